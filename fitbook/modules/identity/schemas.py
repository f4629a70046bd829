"""Identity schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from fitbook.core.enums import RoleEnum


class Principal(BaseModel):
    """Authenticated caller resolved from an access token."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: RoleEnum

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN
