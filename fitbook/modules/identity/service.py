"""Identity resolution for incoming requests.

Accounts and credentials live in the external auth service. This module
only turns a bearer token into a `Principal`.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from fitbook.core.enums import RoleEnum
from fitbook.core.security import bearer_scheme, decode_token
from fitbook.modules.identity.schemas import Principal


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def principal_from_token(token: str) -> Principal:
    """Resolve principal from access token claims."""
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise _unauthorized("Invalid access token")

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Token subject is missing")

    try:
        user_id = UUID(str(subject))
        role = RoleEnum(str(payload.get("role", RoleEnum.CLIENT)).lower())
    except ValueError as exc:
        raise _unauthorized("Token claims are malformed") from exc

    return Principal(id=user_id, role=role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Principal:
    """Resolve currently authenticated user from bearer token."""
    return principal_from_token(credentials.credentials)


def require_roles(*roles: RoleEnum):
    """Dependency factory for role-based access."""

    async def _checker(current_user: Principal = Depends(get_current_user)) -> Principal:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted for your role",
            )
        return current_user

    return _checker
