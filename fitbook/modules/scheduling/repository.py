"""Scheduling repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from fitbook.modules.scheduling.models import TrainerAvailability
from fitbook.shared.utils import utc_now


class SchedulingRepository:
    """DB access for trainer availability."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_availability(self, trainer_id: UUID) -> TrainerAvailability | None:
        stmt = select(TrainerAvailability).where(TrainerAvailability.trainer_id == trainer_id)
        return await self.session.scalar(stmt)

    async def upsert_availability(self, trainer_id: UUID, weekly_hours: dict) -> TrainerAvailability:
        now = utc_now()
        stmt = (
            insert(TrainerAvailability)
            .values(
                trainer_id=trainer_id,
                weekly_hours=weekly_hours,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=[TrainerAvailability.trainer_id],
                set_={"weekly_hours": weekly_hours, "updated_at": now},
            )
            .returning(TrainerAvailability)
        )
        availability = await self.session.scalar(
            stmt,
            execution_options={"populate_existing": True},
        )
        await self.session.flush()
        return availability
