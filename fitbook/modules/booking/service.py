"""Booking business logic layer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitbook.core.config import Settings, get_settings
from fitbook.core.database import get_db_session
from fitbook.core.enums import BookingStatusEnum, RoleEnum
from fitbook.core.metrics import (
    AVAILABILITY_CHECK_FAILURES_TOTAL,
    record_cancellation,
    record_reservation,
)
from fitbook.modules.booking.models import Booking
from fitbook.modules.booking.repository import BookingRepository, SlotTakenError
from fitbook.modules.booking.rules import compute_cancellation, find_conflict
from fitbook.modules.identity.schemas import Principal
from fitbook.modules.scheduling.repository import SchedulingRepository
from fitbook.modules.scheduling.rules import (
    candidate_start_times,
    is_within_working_hours,
    weekday_of,
)
from fitbook.modules.scheduling.service import SchedulingService
from fitbook.shared.exceptions import (
    AlreadyCancelledError,
    BookingNotCancellableError,
    BusinessRuleException,
    NotFoundException,
    OutsideWorkingHoursError,
    SlotUnavailableError,
    UnauthorizedException,
)
from fitbook.shared.utils import combine_local, utc_now

logger = logging.getLogger(__name__)


class BookingService:
    """Reservation, conflict checks and cancellation policy."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        scheduling_service: SchedulingService,
        *,
        settings: Settings | None = None,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self.booking_repository = booking_repository
        self.scheduling_service = scheduling_service
        self.settings = settings or get_settings()
        self.now_provider = now_provider

    def resolve_duration(self, duration_minutes: int | None) -> int:
        """Fall back to the default length only when none was given."""
        if duration_minutes is None:
            return self.settings.booking_default_duration_minutes
        if duration_minutes <= 0:
            raise BusinessRuleException("Session duration must be positive")
        return duration_minutes

    def _session_start(self, on_date: date, start: time) -> datetime:
        return combine_local(on_date, start, self.settings.booking_timezone)

    async def _load_active_bookings(self, trainer_id: UUID, on_date: date) -> list[Booking] | None:
        """Fetch active bookings for a day; None when storage did not answer."""
        try:
            return await asyncio.wait_for(
                self.booking_repository.list_active_bookings_for_day(trainer_id, on_date),
                timeout=self.settings.booking_storage_timeout_seconds,
            )
        except (SQLAlchemyError, OSError, TimeoutError):
            AVAILABILITY_CHECK_FAILURES_TOTAL.inc()
            logger.exception(
                "Booking lookup failed for trainer %s on %s, treating slot as unavailable",
                trainer_id,
                on_date,
            )
            return None

    async def is_slot_available(
        self,
        trainer_id: UUID,
        on_date: date,
        start: time,
        duration_minutes: int,
    ) -> bool:
        """Return True when no active booking overlaps the requested interval.

        Fails closed: a storage error or timeout reports the slot as taken.
        """
        if duration_minutes <= 0:
            raise BusinessRuleException("Session duration must be positive")

        existing = await self._load_active_bookings(trainer_id, on_date)
        if existing is None:
            return False
        return find_conflict(existing, start, duration_minutes) is None

    async def reserve(
        self,
        client_id: UUID,
        trainer_id: UUID,
        on_date: date,
        start: time,
        duration_minutes: int | None,
        price: Decimal,
    ) -> Booking:
        """Reserve a pending session with a trainer.

        The working-hours and overlap checks only save a round trip; the
        database constraints decide between concurrent requests.
        """
        duration = self.resolve_duration(duration_minutes)
        if client_id == trainer_id:
            raise BusinessRuleException("Trainers cannot book sessions with themselves")
        if self._session_start(on_date, start) <= self.now_provider():
            raise BusinessRuleException("Cannot book a session in the past")

        if not await self.scheduling_service.is_within_working_hours(trainer_id, on_date, start, duration):
            record_reservation("outside_working_hours")
            raise OutsideWorkingHoursError("Requested time is outside the trainer's working hours")

        if not await self.is_slot_available(trainer_id, on_date, start, duration):
            record_reservation("slot_unavailable")
            raise SlotUnavailableError("Requested time slot is no longer available")

        try:
            booking = await self.booking_repository.create_booking(
                trainer_id=trainer_id,
                client_id=client_id,
                scheduled_date=on_date,
                scheduled_time=start,
                duration_minutes=duration,
                price=price,
            )
        except SlotTakenError as exc:
            record_reservation("slot_unavailable")
            logger.info(
                "Concurrent reservation won slot %s %s for trainer %s",
                on_date,
                start,
                trainer_id,
            )
            raise SlotUnavailableError("Requested time slot is no longer available") from exc

        record_reservation("created")
        logger.info(
            "Booking %s reserved: trainer=%s client=%s at %s %s for %s min",
            booking.id,
            trainer_id,
            client_id,
            on_date,
            start,
            duration,
        )
        return booking

    async def cancel(self, booking_id: UUID, requesting_client_id: UUID) -> Booking:
        """Cancel a booking and record the fee/refund split on it."""
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        if booking.client_id != requesting_client_id:
            raise UnauthorizedException("You cannot cancel this booking")
        if booking.status == BookingStatusEnum.CANCELLED:
            raise AlreadyCancelledError("Booking is already cancelled")
        if booking.status == BookingStatusEnum.COMPLETED:
            raise BookingNotCancellableError("Completed booking cannot be cancelled")

        now = self.now_provider()
        outcome = compute_cancellation(
            Decimal(booking.price),
            self._session_start(booking.scheduled_date, booking.scheduled_time),
            now,
            window_hours=self.settings.booking_cancellation_window_hours,
            late_fee_rate=self.settings.booking_late_cancellation_fee_rate,
        )

        cancelled = await self.booking_repository.mark_cancelled(
            booking.id,
            cancellation_fee=outcome.fee,
            refund_amount=outcome.refund,
            cancelled_at=now,
        )
        if cancelled is None:
            raise AlreadyCancelledError("Booking is already cancelled")

        record_cancellation(outcome.tier)
        logger.info(
            "Booking %s cancelled %.2fh before session: fee=%s refund=%s",
            booking.id,
            outcome.hours_until_session,
            outcome.fee,
            outcome.refund,
        )
        return cancelled

    async def get_booking(self, booking_id: UUID, actor: Principal) -> Booking:
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        if actor.is_admin or actor.id in (booking.client_id, booking.trainer_id):
            return booking
        raise UnauthorizedException("You cannot view this booking")

    async def list_my_bookings(
        self,
        actor: Principal,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        """List bookings where the caller is the client, or the trainer for trainers."""
        if actor.role == RoleEnum.TRAINER:
            return await self.booking_repository.list_trainer_bookings(actor.id, limit, offset)
        return await self.booking_repository.list_client_bookings(actor.id, limit, offset)

    def _ensure_trainer_access(self, trainer_id: UUID, actor: Principal) -> None:
        if actor.is_admin:
            return
        if actor.role == RoleEnum.TRAINER and actor.id == trainer_id:
            return
        raise UnauthorizedException("Only the trainer or admin can view this data")

    async def list_trainer_bookings(
        self,
        trainer_id: UUID,
        actor: Principal,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        self._ensure_trainer_access(trainer_id, actor)
        return await self.booking_repository.list_trainer_bookings(trainer_id, limit, offset)

    async def get_trainer_stats(self, trainer_id: UUID, actor: Principal) -> tuple[int, Decimal]:
        """Return total bookings and paid earnings for a trainer."""
        self._ensure_trainer_access(trainer_id, actor)
        return await self.booking_repository.get_trainer_stats(trainer_id)

    async def list_open_start_times(
        self,
        trainer_id: UUID,
        on_date: date,
        duration_minutes: int | None = None,
    ) -> tuple[int, list[time]]:
        """Start times that would pass both reservation pre-checks right now.

        Returns the session length used together with the start times.
        """
        duration = self.resolve_duration(duration_minutes)
        weekly_hours = await self.scheduling_service.get_weekly_hours(trainer_id)
        window = (weekly_hours or {}).get(weekday_of(on_date))
        if window is None and self.settings.booking_require_configured_hours:
            return duration, []

        existing = await self._load_active_bookings(trainer_id, on_date)
        if existing is None:
            return duration, []

        enforce_end = self.settings.booking_enforce_session_end_within_hours
        now = self.now_provider()
        open_times: list[time] = []
        for start in candidate_start_times(window, self.settings.booking_slot_step_minutes):
            if self._session_start(on_date, start) <= now:
                continue
            if not is_within_working_hours(
                weekly_hours,
                on_date,
                start,
                duration if enforce_end else None,
                require_configured=self.settings.booking_require_configured_hours,
            ):
                continue
            if find_conflict(existing, start, duration) is not None:
                continue
            open_times.append(start)
        return duration, open_times


async def get_booking_service(session: AsyncSession = Depends(get_db_session)) -> BookingService:
    """Dependency provider for booking service."""
    return BookingService(
        booking_repository=BookingRepository(session),
        scheduling_service=SchedulingService(SchedulingRepository(session)),
    )
