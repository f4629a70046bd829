"""Scheduling business logic layer."""

from __future__ import annotations

import logging
from datetime import date, time
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitbook.core.config import Settings, get_settings
from fitbook.core.database import get_db_session
from fitbook.core.enums import RoleEnum, WeekdayEnum
from fitbook.modules.identity.schemas import Principal
from fitbook.modules.scheduling.models import TrainerAvailability
from fitbook.modules.scheduling.repository import SchedulingRepository
from fitbook.modules.scheduling.rules import is_within_working_hours
from fitbook.modules.scheduling.schemas import AvailabilityUpdate, DayWindow, WeeklyHours
from fitbook.shared.exceptions import NotFoundException, UnauthorizedException

logger = logging.getLogger(__name__)


def parse_weekly_hours(raw: dict | None) -> WeeklyHours | None:
    """Validate stored JSON into typed weekly hours."""
    if raw is None:
        return None
    return {
        WeekdayEnum(str(weekday).lower()): DayWindow.model_validate(window)
        for weekday, window in raw.items()
    }


class SchedulingService:
    """Trainer availability and working-hours checks."""

    def __init__(self, repository: SchedulingRepository, settings: Settings | None = None) -> None:
        self.repository = repository
        self.settings = settings or get_settings()

    async def get_weekly_hours(self, trainer_id: UUID) -> WeeklyHours | None:
        """Return configured weekly hours, or None when the trainer has none."""
        availability = await self.repository.get_availability(trainer_id)
        if availability is None:
            return None
        return parse_weekly_hours(availability.weekly_hours)

    async def is_within_working_hours(
        self,
        trainer_id: UUID,
        on_date: date,
        start: time,
        duration_minutes: int | None = None,
    ) -> bool:
        """Check requested start against the trainer's weekly hours."""
        weekly_hours = await self.get_weekly_hours(trainer_id)
        if weekly_hours is None:
            logger.debug("Trainer %s has no configured hours", trainer_id)

        return is_within_working_hours(
            weekly_hours,
            on_date,
            start,
            duration_minutes if self.settings.booking_enforce_session_end_within_hours else None,
            require_configured=self.settings.booking_require_configured_hours,
        )

    async def get_availability(self, trainer_id: UUID) -> TrainerAvailability:
        availability = await self.repository.get_availability(trainer_id)
        if availability is None:
            raise NotFoundException("Trainer availability is not configured")
        return availability

    async def set_availability(
        self,
        trainer_id: UUID,
        payload: AvailabilityUpdate,
        actor: Principal,
    ) -> TrainerAvailability:
        """Replace weekly hours (trainer owner or admin)."""
        is_owner = actor.role == RoleEnum.TRAINER and actor.id == trainer_id
        if not (is_owner or actor.is_admin):
            raise UnauthorizedException("Only the trainer or admin can change availability")

        weekly_hours = {
            str(weekday): window.model_dump(mode="json")
            for weekday, window in payload.weekly_hours.items()
        }
        availability = await self.repository.upsert_availability(trainer_id, weekly_hours)
        logger.info("Availability updated for trainer %s by %s", trainer_id, actor.id)
        return availability


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(SchedulingRepository(session))
