"""Conversions between reference-timezone wall clock and stored instants.

Clients send and receive ``due_date`` as wall-clock time in the configured
reference timezone. The database holds aware UTC instants; values read back
from backends that drop the offset are treated as UTC.
"""
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from .config import settings

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


@lru_cache
def reference_tz() -> ZoneInfo:
    return ZoneInfo(settings.reference_timezone)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_local(value: str | datetime) -> datetime:
    """Parse a client datetime into an aware UTC instant.

    Naive values are read as reference-timezone wall clock; values that
    carry an offset keep it. A bare date means local midnight.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            raise ValueError("empty datetime")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=reference_tz())
    return parsed.astimezone(timezone.utc)


def to_storage(instant: datetime) -> datetime:
    """Aware UTC; naive input is taken to be UTC already."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def from_storage(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_local(value: datetime | None) -> str | None:
    if value is None:
        return None
    return from_storage(value).astimezone(reference_tz()).strftime(DISPLAY_FORMAT)


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC [start, end) of a calendar day in the reference timezone."""
    start = datetime.combine(day, time.min, tzinfo=reference_tz())
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=reference_tz())
    return to_storage(start), to_storage(end)
