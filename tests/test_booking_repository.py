from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, time
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from fitbook.core.enums import BookingStatusEnum, PaymentStatusEnum
from fitbook.modules.booking.models import ACTIVE_OVERLAP_CONSTRAINT, ACTIVE_SLOT_INDEX
from fitbook.modules.booking.repository import BookingRepository, SlotTakenError, is_slot_conflict


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO bookings ...", {}, Exception(message))


class FakeSession:
    def __init__(self, flush_error: Exception | None = None) -> None:
        self.flush_error = flush_error
        self.added: list[object] = []
        self.savepoints_opened = 0
        self.savepoints_rolled_back = 0

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints_opened += 1
        try:
            yield self
        except Exception:
            self.savepoints_rolled_back += 1
            raise

    def add(self, instance: object) -> None:
        self.added.append(instance)

    async def flush(self) -> None:
        if self.flush_error is not None:
            raise self.flush_error


async def _create(repository: BookingRepository):
    return await repository.create_booking(
        trainer_id=uuid4(),
        client_id=uuid4(),
        scheduled_date=date(2026, 3, 4),
        scheduled_time=time(10, 0),
        duration_minutes=60,
        price=Decimal("45.00"),
    )


def test_slot_conflict_detection_by_constraint_name() -> None:
    assert is_slot_conflict(
        _integrity_error(f'duplicate key value violates unique constraint "{ACTIVE_SLOT_INDEX}"'),
    )
    assert is_slot_conflict(
        _integrity_error(f'conflicting key value violates exclusion constraint "{ACTIVE_OVERLAP_CONSTRAINT}"'),
    )
    assert not is_slot_conflict(
        _integrity_error('new row violates check constraint "ck_bookings_price_non_negative"'),
    )


@pytest.mark.asyncio
async def test_create_booking_inserts_pending_row() -> None:
    session = FakeSession()
    booking = await _create(BookingRepository(session))

    assert session.added == [booking]
    assert session.savepoints_opened == 1
    assert booking.status == BookingStatusEnum.PENDING
    assert booking.payment_status == PaymentStatusEnum.PENDING


@pytest.mark.asyncio
async def test_create_booking_maps_slot_constraint_to_slot_taken() -> None:
    session = FakeSession(
        flush_error=_integrity_error(
            f'conflicting key value violates exclusion constraint "{ACTIVE_OVERLAP_CONSTRAINT}"',
        ),
    )

    with pytest.raises(SlotTakenError):
        await _create(BookingRepository(session))
    assert session.savepoints_rolled_back == 1


@pytest.mark.asyncio
async def test_create_booking_reraises_unrelated_integrity_errors() -> None:
    session = FakeSession(
        flush_error=_integrity_error('new row violates check constraint "ck_bookings_duration_positive"'),
    )

    with pytest.raises(IntegrityError):
        await _create(BookingRepository(session))
