"""Slot conflict and cancellation policy rules.

Pure functions with no I/O; the booking service feeds them rows and the
current time.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, TypeVar

from fitbook.shared.utils import minutes_since_midnight

CENT = Decimal("0.01")


class ScheduledInterval(Protocol):
    scheduled_time: time
    duration_minutes: int


T = TypeVar("T", bound=ScheduledInterval)


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open intervals [start, end) overlap; touching ends do not."""
    return start_a < end_b and start_b < end_a


def interval_minutes(start: time, duration_minutes: int) -> tuple[int, int]:
    """Return (start, end) in minutes since midnight."""
    begin = minutes_since_midnight(start)
    return begin, begin + duration_minutes


def find_conflict(existing: Iterable[T], start: time, duration_minutes: int) -> T | None:
    """Return the first existing booking overlapping the requested interval."""
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    requested_start, requested_end = interval_minutes(start, duration_minutes)
    for booking in existing:
        booked_start, booked_end = interval_minutes(booking.scheduled_time, booking.duration_minutes)
        if intervals_overlap(booked_start, booked_end, requested_start, requested_end):
            return booking
    return None


@dataclass(frozen=True, slots=True)
class CancellationOutcome:
    fee: Decimal
    refund: Decimal
    hours_until_session: float

    @property
    def tier(self) -> str:
        return "late" if self.fee > 0 else "free"


def compute_cancellation(
    price: Decimal,
    session_at: datetime,
    now: datetime,
    *,
    window_hours: int = 24,
    late_fee_rate: Decimal = Decimal("0.5"),
) -> CancellationOutcome:
    """Split the price into fee and refund.

    Less than `window_hours` before the session the fee is
    `price * late_fee_rate` rounded to cents; otherwise it is zero. The
    refund is always `price - fee`.
    """
    remaining = session_at - now
    if remaining < timedelta(hours=window_hours):
        fee = (price * late_fee_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        fee = Decimal("0.00")

    return CancellationOutcome(
        fee=fee,
        refund=(price - fee).quantize(CENT, rounding=ROUND_HALF_UP),
        hours_until_session=remaining.total_seconds() / 3600,
    )
