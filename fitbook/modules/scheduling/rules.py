"""Working-hours rules over trainer weekly availability.

Pure functions: callers load the weekly hours and pass them in.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, time

from fitbook.core.enums import WeekdayEnum
from fitbook.modules.scheduling.schemas import DayWindow
from fitbook.shared.utils import minutes_since_midnight

_WEEKDAYS = tuple(WeekdayEnum)

# Offered when a trainer has not configured the requested day.
DEFAULT_START_TIMES = (
    time(7, 0),
    time(8, 30),
    time(10, 0),
    time(13, 0),
    time(14, 30),
    time(16, 0),
    time(17, 30),
    time(19, 0),
)


def weekday_of(on_date: date) -> WeekdayEnum:
    """Return weekday key for a calendar date."""
    return _WEEKDAYS[on_date.weekday()]


def is_within_working_hours(
    weekly_hours: Mapping[WeekdayEnum, DayWindow] | None,
    on_date: date,
    start: time,
    duration_minutes: int | None = None,
    *,
    require_configured: bool = False,
) -> bool:
    """Check a requested start against the trainer's window for that weekday.

    A missing record or a missing weekday is allowed unless
    `require_configured` is set. Only the start instant is checked
    (`window.start <= start < window.end`); passing `duration_minutes`
    additionally requires the session to end by closing time.
    """
    start = start.replace(tzinfo=None)
    window = (weekly_hours or {}).get(weekday_of(on_date))
    if window is None:
        return not require_configured
    if not window.available:
        return False
    if not (window.start <= start < window.end):
        return False
    if duration_minutes is not None:
        return minutes_since_midnight(start) + duration_minutes <= minutes_since_midnight(window.end)
    return True


def candidate_start_times(window: DayWindow | None, step_minutes: int) -> list[time]:
    """List start times offered for a day before conflicts are removed."""
    if window is None:
        return list(DEFAULT_START_TIMES)
    if not window.available:
        return []

    candidates: list[time] = []
    cursor = minutes_since_midnight(window.start)
    closing = minutes_since_midnight(window.end)
    while cursor < closing:
        candidates.append(time(cursor // 60, cursor % 60))
        cursor += step_minutes
    return candidates
