"""Booking schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fitbook.core.enums import BookingStatusEnum, PaymentStatusEnum
from fitbook.shared.utils import wall_clock_minute


class BookingCreate(BaseModel):
    """Reserve a session with a trainer."""

    model_config = ConfigDict(populate_by_name=True)

    trainer_id: UUID
    scheduled_date: date = Field(alias="date")
    scheduled_time: time = Field(alias="time")
    duration_minutes: int | None = Field(default=None, gt=0, le=24 * 60)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, value: time) -> time:
        return wall_clock_minute(value)


class BookingRead(BaseModel):
    """Booking response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trainer_id: UUID
    client_id: UUID
    scheduled_date: date
    scheduled_time: time
    duration_minutes: int
    price: Decimal
    status: BookingStatusEnum
    payment_status: PaymentStatusEnum
    cancellation_fee: Decimal | None
    refund_amount: Decimal | None
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime


class TrainerStatsRead(BaseModel):
    """Trainer dashboard totals."""

    trainer_id: UUID
    total_bookings: int
    total_earnings: Decimal


class OpenTimesRead(BaseModel):
    """Bookable start times for one trainer and day."""

    trainer_id: UUID
    scheduled_date: date
    duration_minutes: int
    start_times: list[time]
