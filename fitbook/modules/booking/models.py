"""Booking ORM models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, Numeric, Time, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from fitbook.core.database import Base, BaseModelMixin
from fitbook.core.enums import BookingStatusEnum, PaymentStatusEnum

# Constraint names checked when an insert is rejected by the database.
ACTIVE_SLOT_INDEX = "uq_bookings_active_slot"
ACTIVE_OVERLAP_CONSTRAINT = "ex_bookings_active_overlap"

_ACTIVE_STATUS_SQL = "status IN ('pending', 'confirmed')"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Booking(BaseModelMixin, Base):
    """Trainer session booking.

    Active rows (pending/confirmed) of one trainer never overlap. The partial
    unique index below and the `ex_bookings_active_overlap` exclusion
    constraint created by the migration enforce it.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_trainer_id_scheduled_date", "trainer_id", "scheduled_date"),
        Index(
            ACTIVE_SLOT_INDEX,
            "trainer_id",
            "scheduled_date",
            "scheduled_time",
            unique=True,
            postgresql_where=text(_ACTIVE_STATUS_SQL),
        ),
        CheckConstraint("duration_minutes > 0", name="duration_positive"),
        CheckConstraint("price >= 0", name="price_non_negative"),
    )

    trainer_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False)
    client_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False, index=True)

    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_time: Mapped[time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    status: Mapped[BookingStatusEnum] = mapped_column(
        SAEnum(
            BookingStatusEnum,
            name="booking_status_enum",
            native_enum=False,
            values_callable=_enum_values,
        ),
        default=BookingStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
    payment_status: Mapped[PaymentStatusEnum] = mapped_column(
        SAEnum(
            PaymentStatusEnum,
            name="payment_status_enum",
            native_enum=False,
            values_callable=_enum_values,
        ),
        default=PaymentStatusEnum.PENDING,
        nullable=False,
    )

    cancellation_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    refund_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
