from __future__ import annotations

import threading
import uuid
from datetime import date, datetime, timezone, tzinfo
from typing import Sequence

from ..common.datetime_utils import calendar_date, to_utc
from ..core.logging_config import get_logger
from ..identities.model import Identity
from .model import AttendanceEvent, AttendanceStatus
from .repository import AttendanceRepository

logger = get_logger(__name__)


class AttendanceLedger:
    """At most one attendance event per identity per calendar day.

    The ledger trusts the Identity it is given; resolving ids is the
    caller's job.
    """

    def __init__(self, attendance: AttendanceRepository, *, reference_tz: tzinfo = timezone.utc):
        self._attendance = attendance
        self._tz = reference_tz
        self._write_lock = threading.Lock()

    @property
    def reference_tz(self) -> tzinfo:
        return self._tz

    def calendar_date_of(self, moment: datetime) -> date:
        return calendar_date(moment, self._tz)

    def status(self, identity_id: str, as_of_date: date) -> AttendanceStatus:
        today = self._attendance.get_for_identity_and_date(identity_id, as_of_date)
        latest = self._attendance.get_latest_for_identity(identity_id)
        return AttendanceStatus(
            marked_today=today is not None,
            last_marked=latest.timestamp if latest else None,
        )

    def mark(self, identity: Identity, now: datetime) -> AttendanceEvent:
        event, _ = self.mark_once(identity, now)
        return event

    def mark_once(self, identity: Identity, now: datetime) -> tuple[AttendanceEvent, bool]:
        """Record attendance for `now`'s calendar date.

        Returns the event for that date and whether it already existed before
        this call. Both come from the same check under the write lock.
        """
        work_date = self.calendar_date_of(now)
        event_id = uuid.uuid4().hex

        with self._write_lock:
            existing = self._attendance.get_for_identity_and_date(identity.identity_id, work_date)
            if existing:
                logger.debug(f"{identity.identity_id} already marked on {work_date}")
                return existing, True

            event = self._attendance.create_event(
                AttendanceEvent(
                    event_id=event_id,
                    identity_id=identity.identity_id,
                    display_name=identity.name,
                    timestamp=to_utc(now, self._tz),
                    calendar_date=work_date,
                )
            )

        if event.event_id != event_id:
            logger.debug(f"{identity.identity_id} was marked concurrently on {work_date}")
            return event, True

        logger.info(f"Attendance marked for {identity.name} ({identity.identity_id}) on {work_date}")
        return event, False

    def all_events(self) -> Sequence[AttendanceEvent]:
        return sorted(self._attendance.list_all(), key=lambda e: e.timestamp, reverse=True)
