from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into naive local time.

    Offsets (including a trailing 'Z') are converted to the local zone, so the
    result compares with values from ``now_local``.
    """
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    parsed = datetime.fromisoformat(v)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded half up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end], both endpoints included."""
    return math.ceil(abs((end - start) / timedelta(days=1))) + 1


def iso_or_none(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
