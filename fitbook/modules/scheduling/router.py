"""Scheduling API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from fitbook.modules.identity.service import get_current_user
from fitbook.modules.scheduling.schemas import AvailabilityRead, AvailabilityUpdate
from fitbook.modules.scheduling.service import (
    SchedulingService,
    get_scheduling_service,
    parse_weekly_hours,
)

router = APIRouter(prefix="/trainers", tags=["scheduling"])


def _serialize(availability) -> AvailabilityRead:
    return AvailabilityRead(
        trainer_id=availability.trainer_id,
        weekly_hours=parse_weekly_hours(availability.weekly_hours) or {},
        updated_at=availability.updated_at,
    )


@router.get("/{trainer_id}/availability", response_model=AvailabilityRead)
async def get_availability(
    trainer_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
    _current_user=Depends(get_current_user),
) -> AvailabilityRead:
    """Return trainer weekly working hours."""
    availability = await service.get_availability(trainer_id)
    return _serialize(availability)


@router.put("/{trainer_id}/availability", response_model=AvailabilityRead)
async def set_availability(
    trainer_id: UUID,
    payload: AvailabilityUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> AvailabilityRead:
    """Replace trainer weekly working hours."""
    availability = await service.set_availability(trainer_id, payload, current_user)
    return _serialize(availability)
