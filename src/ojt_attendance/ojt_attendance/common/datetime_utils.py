from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(r"^\s*(\d{1,2})(?::(\d{1,2}))?(?::(\d{1,2}))?\s*([AaPp][Mm])?\s*$")


def get_zone(name: str) -> tzinfo:
    return ZoneInfo(name)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the given zone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz or timezone.utc)


def from_epoch_ms(value: int, tz: tzinfo) -> datetime:
    return (_EPOCH + timedelta(milliseconds=int(value))).astimezone(tz)


def to_epoch_ms(value: datetime) -> int:
    return (value - _EPOCH) // timedelta(milliseconds=1)


def truncate_to_minute(value: datetime) -> datetime:
    """Floor an instant to the start of its minute."""
    return value.replace(second=0, microsecond=0)


def to_utc(value: datetime) -> datetime:
    """Same instant in UTC, so arithmetic spans offset changes such as DST."""
    return value.astimezone(timezone.utc)


def elapsed(start: datetime, end: datetime) -> timedelta:
    return to_utc(end) - to_utc(start)


def whole_minutes(value: timedelta) -> int:
    return int(value // timedelta(minutes=1))


def parse_time_of_day(value: str) -> time:
    """Parse "HH:MM", "HH:MM:SS" or a 12-hour "h:MM AM" string."""
    m = _TIME_RE.match(value or "")
    if not m:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours = int(m.group(1))
    minutes = int(m.group(2) or 0)
    seconds = int(m.group(3) or 0)
    suffix = (m.group(4) or "").lower()
    if suffix:
        if not 1 <= hours <= 12:
            raise ValueError(f"Invalid 12-hour time: {value!r}")
        if suffix == "pm" and hours < 12:
            hours += 12
        elif suffix == "am" and hours == 12:
            hours = 0
    return time(hour=hours, minute=minutes, second=seconds)


def format_time_of_day(value: time) -> str:
    return value.strftime("%H:%M")


def at_time(work_date: date, value: time, tz: tzinfo) -> datetime:
    """Anchor a wall-clock time to a calendar date in the given zone."""
    return datetime.combine(work_date, value, tzinfo=tz)


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}:{minutes % 60:02d}"
