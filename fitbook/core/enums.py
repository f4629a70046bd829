"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """Roles carried in access tokens."""

    CLIENT = "client"
    TRAINER = "trainer"
    ADMIN = "admin"


class BookingStatusEnum(StrEnum):
    """Booking lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that occupy a trainer's time.
ACTIVE_BOOKING_STATUSES = (BookingStatusEnum.PENDING, BookingStatusEnum.CONFIRMED)


class PaymentStatusEnum(StrEnum):
    """Payment state recorded on a booking."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class WeekdayEnum(StrEnum):
    """Weekday keys used in trainer weekly hours, Monday first."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
