from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from face_attendance.attendance.model import AttendanceEvent
from face_attendance.container import assemble_container
from face_attendance.identities.model import Identity


class InMemoryIdentities:
    def __init__(self):
        self._by_id: dict[str, Identity] = {}

    def get_by_id(self, identity_id: str) -> Optional[Identity]:
        return self._by_id.get(identity_id)

    def get_by_email(self, email: str) -> Optional[Identity]:
        for identity in self._by_id.values():
            if identity.email == email:
                return identity
        return None

    def create(self, identity: Identity) -> Identity:
        self._by_id[identity.identity_id] = identity
        return identity

    def update(self, identity: Identity) -> bool:
        if identity.identity_id not in self._by_id:
            return False
        self._by_id[identity.identity_id] = identity
        return True

    def list_all(self):
        return list(self._by_id.values())


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[str, date], AttendanceEvent] = {}
        self.create_calls = 0

    def get_for_identity_and_date(self, identity_id: str, calendar_date: date) -> Optional[AttendanceEvent]:
        return self._by_key.get((identity_id, calendar_date))

    def get_latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        items = [e for e in self._by_key.values() if e.identity_id == identity_id]
        items.sort(key=lambda e: e.timestamp, reverse=True)
        return items[0] if items else None

    def create_event(self, event: AttendanceEvent) -> AttendanceEvent:
        self.create_calls += 1
        return self._by_key.setdefault((event.identity_id, event.calendar_date), event)

    def list_all(self):
        # insertion order on purpose; the ledger sorts
        return list(self._by_key.values())


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def identities_repo() -> InMemoryIdentities:
    return InMemoryIdentities()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def container(identities_repo, attendance_repo, clock):
    return assemble_container(
        identities_repo,
        attendance_repo,
        embedding_dimension=3,
        distance_threshold=0.6,
        clock=clock,
    )


@pytest.fixture
def make_identity():
    def _make(identity_id: str = "id-bob", name: str = "Bob", **kwargs) -> Identity:
        defaults = dict(
            identity_id=identity_id,
            name=name,
            email=f"{name.lower()}@x.com",
            embedding=(0.0, 0.0, 0.0),
            registered_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        return replace(Identity(**defaults), **kwargs)

    return _make
