from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_datetime, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent
from .repository import AttendanceRepository

_COLUMNS = "event_id, identity_id, display_name, event_timestamp, calendar_date"


def _to_event(row: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=row["event_id"],
        identity_id=row["identity_id"],
        display_name=row["display_name"],
        timestamp=from_db_datetime(row["event_timestamp"]),
        calendar_date=row["calendar_date"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_identity_and_date(self, identity_id: str, calendar_date: date) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE identity_id=%s AND calendar_date=%s
                """,
                (identity_id, calendar_date),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE identity_id=%s
                ORDER BY event_timestamp DESC
                LIMIT 1
                """,
                (identity_id,),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def create_event(self, event: AttendanceEvent) -> AttendanceEvent:
        # UNIQUE(identity_id, calendar_date) makes a losing concurrent insert a no-op;
        # the re-read returns whichever row won.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_events(event_id, identity_id, display_name, event_timestamp, calendar_date)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    event.event_id,
                    event.identity_id,
                    event.display_name,
                    to_db_datetime(event.timestamp),
                    event.calendar_date,
                ),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE identity_id=%s AND calendar_date=%s
                """,
                (event.identity_id, event.calendar_date),
            )
            return _to_event(fetchone(cur))

    def list_all(self) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                ORDER BY event_timestamp DESC
                """
            )
            return [_to_event(r) for r in fetchall(cur)]
