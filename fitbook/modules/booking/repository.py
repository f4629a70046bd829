"""Booking repository layer."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitbook.core.enums import ACTIVE_BOOKING_STATUSES, BookingStatusEnum, PaymentStatusEnum
from fitbook.modules.booking.models import ACTIVE_OVERLAP_CONSTRAINT, ACTIVE_SLOT_INDEX, Booking


class SlotTakenError(Exception):
    """Insert rejected by the active-slot uniqueness or overlap constraint."""


def is_slot_conflict(exc: IntegrityError) -> bool:
    """Tell slot constraint violations apart from other integrity errors."""
    message = str(exc.orig)
    return ACTIVE_SLOT_INDEX in message or ACTIVE_OVERLAP_CONSTRAINT in message


class BookingRepository:
    """DB operations for the booking ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_active_bookings_for_day(self, trainer_id: UUID, on_date: date) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(
                Booking.trainer_id == trainer_id,
                Booking.scheduled_date == on_date,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .order_by(Booking.scheduled_time.asc())
        )
        return list((await self.session.scalars(stmt)).all())

    async def create_booking(
        self,
        trainer_id: UUID,
        client_id: UUID,
        scheduled_date: date,
        scheduled_time: time,
        duration_minutes: int,
        price: Decimal,
    ) -> Booking:
        booking = Booking(
            trainer_id=trainer_id,
            client_id=client_id,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            duration_minutes=duration_minutes,
            price=price,
            status=BookingStatusEnum.PENDING,
            payment_status=PaymentStatusEnum.PENDING,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(booking)
                await self.session.flush()
        except IntegrityError as exc:
            if is_slot_conflict(exc):
                raise SlotTakenError(str(exc.orig)) from exc
            raise
        return booking

    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        stmt = select(Booking).where(Booking.id == booking_id)
        return await self.session.scalar(stmt)

    async def mark_cancelled(
        self,
        booking_id: UUID,
        cancellation_fee: Decimal,
        refund_amount: Decimal,
        cancelled_at: datetime,
    ) -> Booking | None:
        """Cancel only if still cancellable; None means another request got there first."""
        stmt = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .values(
                status=BookingStatusEnum.CANCELLED,
                cancellation_fee=cancellation_fee,
                refund_amount=refund_amount,
                cancelled_at=cancelled_at,
                updated_at=cancelled_at,
            )
            .returning(Booking)
        )
        return await self.session.scalar(stmt, execution_options={"populate_existing": True})

    async def _paginate(
        self,
        base_stmt: Select[tuple[Booking]],
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(Booking.scheduled_date.asc(), Booking.scheduled_time.asc())
            .limit(limit)
            .offset(offset)
        )
        items = (await self.session.scalars(stmt)).all()
        return list(items), total

    async def list_client_bookings(
        self,
        client_id: UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        return await self._paginate(select(Booking).where(Booking.client_id == client_id), limit, offset)

    async def list_trainer_bookings(
        self,
        trainer_id: UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        return await self._paginate(select(Booking).where(Booking.trainer_id == trainer_id), limit, offset)

    async def get_trainer_stats(self, trainer_id: UUID) -> tuple[int, Decimal]:
        total_stmt = select(func.count()).where(Booking.trainer_id == trainer_id)
        earnings_stmt = select(func.coalesce(func.sum(Booking.price), 0)).where(
            Booking.trainer_id == trainer_id,
            Booking.payment_status == PaymentStatusEnum.PAID,
        )
        total = int((await self.session.scalar(total_stmt)) or 0)
        earnings = Decimal((await self.session.scalar(earnings_stmt)) or 0)
        return total, earnings
