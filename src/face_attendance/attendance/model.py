from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one attendance marking. Never mutated after creation."""

    event_id: str
    identity_id: str
    display_name: str
    timestamp: datetime
    calendar_date: date

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "identityId": self.identity_id,
            "displayName": self.display_name,
            "timestamp": self.timestamp.isoformat(),
            "calendarDate": self.calendar_date.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceStatus:
    """Read-model answering "has this identity been marked on a given day"."""

    marked_today: bool
    last_marked: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "markedToday": self.marked_today,
            "lastMarked": self.last_marked.isoformat() if self.last_marked else None,
        }
