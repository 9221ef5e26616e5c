from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def get_for_identity_and_date(self, identity_id: str, calendar_date: date) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def create_event(self, event: AttendanceEvent) -> AttendanceEvent:
        """Persist `event` unless one already exists for its (identity_id, calendar_date).

        Returns the stored event for that key.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceEvent]:
        """All events, newest first."""

        raise NotImplementedError
