"""Scheduling schemas."""

from __future__ import annotations

from datetime import datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from fitbook.core.enums import WeekdayEnum
from fitbook.shared.utils import wall_clock_minute


class DayWindow(BaseModel):
    """Working window for one weekday."""

    available: bool = True
    start: time | None = None
    end: time | None = None

    @field_validator("start", "end")
    @classmethod
    def validate_bounds(cls, value: time | None) -> time | None:
        if value is None:
            return None
        return wall_clock_minute(value)

    @model_validator(mode="after")
    def validate_window(self) -> "DayWindow":
        if not self.available:
            return self
        if self.start is None or self.end is None:
            raise ValueError("start and end are required when the day is available")
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


WeeklyHours = dict[WeekdayEnum, DayWindow]


class AvailabilityUpdate(BaseModel):
    """Replace trainer weekly hours."""

    weekly_hours: WeeklyHours


class AvailabilityRead(BaseModel):
    """Trainer weekly hours response schema."""

    model_config = ConfigDict(from_attributes=True)

    trainer_id: UUID
    weekly_hours: WeeklyHours
    updated_at: datetime
