"""Shared utility functions."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalize datetime to UTC timezone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def combine_local(on_date: date, at_time: time, tz_name: str) -> datetime:
    """Build an aware UTC datetime from a wall-clock date and time in `tz_name`."""
    local = datetime.combine(on_date, at_time.replace(tzinfo=None), tzinfo=ZoneInfo(tz_name))
    return local.astimezone(timezone.utc)


def minutes_since_midnight(value: time) -> int:
    """Return whole minutes elapsed since 00:00 for a time-of-day."""
    return value.hour * 60 + value.minute


def wall_clock_minute(value: time) -> time:
    """Drop any UTC offset and require HH:MM precision.

    Schedule times are wall-clock values in BOOKING_TIMEZONE, so all stored
    and requested times stay offset-naive and comparable.
    """
    if value.second or value.microsecond:
        raise ValueError("time must be given with minute precision (HH:MM)")
    return value.replace(tzinfo=None)
