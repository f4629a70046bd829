"""Scheduling ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from fitbook.core.database import Base, BaseModelMixin


class TrainerAvailability(BaseModelMixin, Base):
    """Recurring weekly working hours of a trainer.

    `weekly_hours` maps a weekday name to
    `{"available": bool, "start": "HH:MM:SS", "end": "HH:MM:SS"}`.
    """

    __tablename__ = "trainer_availability"

    trainer_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), unique=True, nullable=False)
    weekly_hours: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)
