from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal

import pytest

from fitbook.modules.booking.rules import (
    compute_cancellation,
    find_conflict,
    interval_minutes,
    intervals_overlap,
)
from fitbook.shared.utils import combine_local, minutes_since_midnight

SESSION_AT = datetime(2026, 3, 4, 10, 0, tzinfo=UTC)


@dataclass
class Slot:
    scheduled_time: time
    duration_minutes: int


def test_touching_intervals_do_not_overlap() -> None:
    assert intervals_overlap(600, 660, 660, 720) is False
    assert intervals_overlap(660, 720, 600, 660) is False


def test_contained_and_partial_intervals_overlap() -> None:
    assert intervals_overlap(600, 720, 630, 660) is True
    assert intervals_overlap(600, 660, 659, 719) is True


def test_interval_minutes_from_time() -> None:
    assert interval_minutes(time(9, 30), 45) == (570, 615)


def test_find_conflict_returns_first_overlapping_booking() -> None:
    morning = Slot(time(9, 0), 60)
    late_morning = Slot(time(10, 30), 60)

    assert find_conflict([morning, late_morning], time(10, 0), 60) is late_morning
    assert find_conflict([morning, late_morning], time(10, 0), 30) is None
    assert find_conflict([], time(10, 0), 60) is None


def test_find_conflict_rejects_non_positive_duration() -> None:
    with pytest.raises(ValueError):
        find_conflict([], time(10, 0), 0)


def test_find_conflict_ignores_seconds_in_start_time() -> None:
    existing = [Slot(time(10, 0), 60)]

    assert find_conflict(existing, time(11, 0, 30), 30) is None


@pytest.mark.parametrize(
    ("remaining", "expected_fee", "expected_refund", "expected_tier"),
    [
        (timedelta(hours=48), Decimal("0.00"), Decimal("100.00"), "free"),
        (timedelta(hours=24), Decimal("0.00"), Decimal("100.00"), "free"),
        (timedelta(hours=24) - timedelta(seconds=1), Decimal("50.00"), Decimal("50.00"), "late"),
        (timedelta(minutes=5), Decimal("50.00"), Decimal("50.00"), "late"),
        (-timedelta(hours=1), Decimal("50.00"), Decimal("50.00"), "late"),
    ],
)
def test_compute_cancellation_window(
    remaining: timedelta,
    expected_fee: Decimal,
    expected_refund: Decimal,
    expected_tier: str,
) -> None:
    outcome = compute_cancellation(Decimal("100.00"), SESSION_AT, SESSION_AT - remaining)

    assert outcome.fee == expected_fee
    assert outcome.refund == expected_refund
    assert outcome.tier == expected_tier
    assert outcome.hours_until_session == pytest.approx(remaining.total_seconds() / 3600)


def test_compute_cancellation_rounds_half_up_to_cents() -> None:
    outcome = compute_cancellation(Decimal("45.55"), SESSION_AT, SESSION_AT - timedelta(hours=1))

    assert outcome.fee == Decimal("22.78")
    assert outcome.refund == Decimal("22.77")
    assert outcome.fee + outcome.refund == Decimal("45.55")


def test_compute_cancellation_with_custom_policy() -> None:
    outcome = compute_cancellation(
        Decimal("80.00"),
        SESSION_AT,
        SESSION_AT - timedelta(hours=40),
        window_hours=48,
        late_fee_rate=Decimal("0.25"),
    )

    assert outcome.fee == Decimal("20.00")
    assert outcome.refund == Decimal("60.00")


def test_free_session_costs_nothing_to_cancel() -> None:
    outcome = compute_cancellation(Decimal("0"), SESSION_AT, SESSION_AT - timedelta(hours=1))

    assert outcome.fee == Decimal("0.00")
    assert outcome.refund == Decimal("0.00")
    assert outcome.tier == "free"


def test_combine_local_converts_wall_clock_to_utc() -> None:
    result = combine_local(date(2026, 7, 1), time(10, 0), "Europe/Berlin")

    assert result == datetime(2026, 7, 1, 8, 0, tzinfo=UTC)


def test_minutes_since_midnight() -> None:
    assert minutes_since_midnight(time(0, 0)) == 0
    assert minutes_since_midnight(time(23, 59)) == 1439
