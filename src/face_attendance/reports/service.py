from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, timezone, tzinfo
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import to_zone
from ..core.constants import REPORT_CSV_HEADERS, REPORT_FILENAME_PREFIX


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    total_events: int
    unique_identities: int


class AttendanceReportService:
    """Admin report over attendance events: filtering and CSV export."""

    def __init__(self, *, reference_tz: tzinfo = timezone.utc):
        self._tz = reference_tz

    @staticmethod
    def filter_events(
        events: Iterable[AttendanceEvent],
        *,
        name_query: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> list[AttendanceEvent]:
        term = (name_query or "").strip().lower()
        out = []
        for e in events:
            if term and term not in e.display_name.lower():
                continue
            if on_date is not None and e.calendar_date != on_date:
                continue
            out.append(e)
        return out

    def build_report(self, events: Sequence[AttendanceEvent]) -> ReportData:
        rows = [
            {
                "name": e.display_name,
                "date": e.calendar_date.strftime("%Y-%m-%d"),
                "time": to_zone(e.timestamp, self._tz).strftime("%H:%M:%S"),
            }
            for e in events
        ]
        return ReportData(
            rows=rows,
            total_events=len(rows),
            unique_identities=len({e.identity_id for e in events}),
        )

    def export_csv(self, events: Sequence[AttendanceEvent]) -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(REPORT_CSV_HEADERS)
        for row in self.build_report(events).rows:
            writer.writerow([row["name"], row["date"], row["time"]])
        return out.getvalue()

    @staticmethod
    def report_filename(today: date) -> str:
        return f"{REPORT_FILENAME_PREFIX}-{today.strftime('%Y-%m-%d')}.csv"
