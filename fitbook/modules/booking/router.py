"""Booking API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from fitbook.core.enums import RoleEnum
from fitbook.modules.booking.schemas import BookingCreate, BookingRead, OpenTimesRead, TrainerStatsRead
from fitbook.modules.booking.service import BookingService, get_booking_service
from fitbook.modules.identity.service import get_current_user, require_roles
from fitbook.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/bookings", tags=["booking"])


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def reserve_booking(
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(require_roles(RoleEnum.CLIENT)),
) -> BookingRead:
    """Reserve a session with a trainer."""
    booking = await service.reserve(
        client_id=current_user.id,
        trainer_id=payload.trainer_id,
        on_date=payload.scheduled_date,
        start=payload.scheduled_time,
        duration_minutes=payload.duration_minutes,
        price=payload.price,
    )
    return BookingRead.model_validate(booking)


@router.post("/{booking_id}/cancel", response_model=BookingRead)
async def cancel_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> BookingRead:
    """Cancel booking and record fee and refund."""
    booking = await service.cancel(booking_id, current_user.id)
    return BookingRead.model_validate(booking)


@router.get("/my", response_model=Page[BookingRead])
async def list_my_bookings(
    pagination=Depends(get_pagination_params),
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> Page[BookingRead]:
    """List bookings for current user."""
    items, total = await service.list_my_bookings(current_user, pagination.limit, pagination.offset)
    serialized = [BookingRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/trainers/{trainer_id}", response_model=Page[BookingRead])
async def list_trainer_bookings(
    trainer_id: UUID,
    pagination=Depends(get_pagination_params),
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> Page[BookingRead]:
    """List bookings of a trainer."""
    items, total = await service.list_trainer_bookings(
        trainer_id,
        current_user,
        pagination.limit,
        pagination.offset,
    )
    serialized = [BookingRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/trainers/{trainer_id}/stats", response_model=TrainerStatsRead)
async def get_trainer_stats(
    trainer_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> TrainerStatsRead:
    """Return total bookings and paid earnings."""
    total_bookings, total_earnings = await service.get_trainer_stats(trainer_id, current_user)
    return TrainerStatsRead(
        trainer_id=trainer_id,
        total_bookings=total_bookings,
        total_earnings=total_earnings,
    )


@router.get("/trainers/{trainer_id}/open-times", response_model=OpenTimesRead)
async def list_open_times(
    trainer_id: UUID,
    on_date: date = Query(alias="date"),
    duration_minutes: int | None = Query(default=None, gt=0, le=24 * 60),
    service: BookingService = Depends(get_booking_service),
    _current_user=Depends(get_current_user),
) -> OpenTimesRead:
    """List start times currently bookable for a trainer and day."""
    duration, start_times = await service.list_open_start_times(trainer_id, on_date, duration_minutes)
    return OpenTimesRead(
        trainer_id=trainer_id,
        scheduled_date=on_date,
        duration_minutes=duration,
        start_times=start_times,
    )


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user=Depends(get_current_user),
) -> BookingRead:
    """Return one booking visible to the caller."""
    booking = await service.get_booking(booking_id, current_user)
    return BookingRead.model_validate(booking)
