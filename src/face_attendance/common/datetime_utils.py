from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def get_zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_zone(moment: datetime, zone: tzinfo) -> datetime:
    """Express `moment` in `zone`.

    Naive datetimes are taken to be wall-clock time in `zone` already.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def calendar_date(moment: datetime, zone: tzinfo) -> date:
    return to_zone(moment, zone).date()


def to_utc(moment: datetime, zone: tzinfo = timezone.utc) -> datetime:
    return to_zone(moment, zone).astimezone(timezone.utc)


def to_db_datetime(moment: datetime) -> datetime:
    """Naive UTC value for DATETIME columns."""
    return to_utc(moment).replace(tzinfo=None)


def from_db_datetime(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
