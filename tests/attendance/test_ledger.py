from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from face_attendance.attendance.ledger import AttendanceLedger


def _at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


def test_mark_twice_same_day_is_idempotent(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()

    first = ledger.mark(bob, _at(1, 9))
    second = ledger.mark(bob, _at(1, 17))

    assert second == first
    assert len(ledger.all_events()) == 1
    assert first.calendar_date == date(2024, 1, 1)
    assert first.timestamp == _at(1, 9)
    assert ledger.status(bob.identity_id, date(2024, 1, 1)).marked_today is True


def test_distinct_days_produce_distinct_events(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()

    d1 = ledger.mark(bob, _at(1, 9))
    d2 = ledger.mark(bob, _at(2, 9))

    assert d1.event_id != d2.event_id
    assert {e.calendar_date for e in ledger.all_events()} == {date(2024, 1, 1), date(2024, 1, 2)}


def test_status_reports_most_recent_event(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()

    ledger.mark(bob, _at(1, 9))
    d2 = ledger.mark(bob, _at(2, 8))

    status = ledger.status(bob.identity_id, date(2024, 1, 2))
    assert status.marked_today is True
    assert status.last_marked == d2.timestamp

    status = ledger.status(bob.identity_id, date(2024, 1, 3))
    assert status.marked_today is False
    assert status.last_marked == d2.timestamp


def test_status_for_identity_without_events(attendance_repo):
    status = AttendanceLedger(attendance_repo).status("nobody", date(2024, 1, 1))
    assert status.marked_today is False
    assert status.last_marked is None


def test_display_name_is_copied_at_marking_time(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()

    ledger.mark(bob, _at(1, 9))
    renamed = make_identity(name="Robert")
    ledger.mark(renamed, _at(2, 9))

    names = [e.display_name for e in ledger.all_events()]
    assert names == ["Robert", "Bob"]


def test_all_events_newest_first(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    t1, t2, t3 = _at(2, 9), _at(1, 9), _at(3, 9)

    ledger.mark(make_identity("a", "A"), t1)
    ledger.mark(make_identity("b", "B"), t2)
    ledger.mark(make_identity("c", "C"), t3)

    assert [e.timestamp for e in ledger.all_events()] == [t3, t1, t2]


def test_calendar_date_uses_reference_timezone(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo, reference_tz=ZoneInfo("Asia/Ho_Chi_Minh"))
    bob = make_identity()

    # 2024-01-01 20:00 UTC is already 2024-01-02 03:00 in UTC+7
    event = ledger.mark(bob, _at(1, 20))
    assert event.calendar_date == date(2024, 1, 2)
    assert event.timestamp == _at(1, 20)

    # same local day, later
    again = ledger.mark(bob, _at(2, 1))
    assert again == event


def test_naive_now_is_taken_as_reference_wall_clock(attendance_repo, make_identity):
    zone = ZoneInfo("Asia/Ho_Chi_Minh")
    ledger = AttendanceLedger(attendance_repo, reference_tz=zone)

    event = ledger.mark(make_identity(), datetime(2024, 1, 1, 23, 30))
    assert event.calendar_date == date(2024, 1, 1)
    assert event.timestamp == datetime(2024, 1, 1, 16, 30, tzinfo=timezone.utc)


def test_concurrent_marks_produce_one_event(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()
    barrier = threading.Barrier(10)
    results = []

    def worker(i):
        barrier.wait()
        results.append(ledger.mark(bob, _at(1, 9) + timedelta(minutes=i)))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ledger.all_events()) == 1
    assert attendance_repo.create_calls == 1
    assert len({r.event_id for r in results}) == 1


def test_mark_once_reports_whether_event_existed(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()

    first, existed = ledger.mark_once(bob, _at(1, 9))
    assert existed is False
    second, existed = ledger.mark_once(bob, _at(1, 17))
    assert existed is True
    assert second == first


def test_mark_once_flags_event_created_by_another_writer(attendance_repo, make_identity, monkeypatch):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()
    winner = ledger.mark(bob, _at(1, 8))
    # the row lands between the read and the insert
    monkeypatch.setattr(attendance_repo, "get_for_identity_and_date", lambda *_: None)

    event, existed = ledger.mark_once(bob, _at(1, 9))

    assert event == winner
    assert existed is True


def test_concurrent_mark_once_has_exactly_one_first_marker(attendance_repo, make_identity):
    ledger = AttendanceLedger(attendance_repo)
    bob = make_identity()
    barrier = threading.Barrier(10)
    flags = []

    def worker(i):
        barrier.wait()
        flags.append(ledger.mark_once(bob, _at(1, 9) + timedelta(minutes=i))[1])

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(flags) == [False] + [True] * 9
