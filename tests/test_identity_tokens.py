from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import HTTPException
from jose import jwt

from fitbook.core.config import get_settings
from fitbook.core.enums import RoleEnum
from fitbook.core.security import create_access_token
from fitbook.modules.identity.service import principal_from_token


def test_access_token_resolves_principal() -> None:
    user_id = uuid4()

    principal = principal_from_token(create_access_token(str(user_id), role="trainer"))

    assert principal.id == user_id
    assert principal.role == RoleEnum.TRAINER
    assert principal.is_admin is False


def test_role_defaults_to_client_and_is_case_insensitive() -> None:
    assert principal_from_token(create_access_token(str(uuid4()))).role == RoleEnum.CLIENT
    assert principal_from_token(create_access_token(str(uuid4()), role="ADMIN")).is_admin is True


@pytest.mark.parametrize(
    "claims",
    [
        {"type": "refresh"},
        {"role": "superuser"},
    ],
)
def test_invalid_claims_are_rejected(claims: dict) -> None:
    token = create_access_token(str(uuid4()), **claims)

    with pytest.raises(HTTPException) as exc:
        principal_from_token(token)
    assert exc.value.status_code == 401


def test_non_uuid_subject_is_rejected() -> None:
    with pytest.raises(HTTPException) as exc:
        principal_from_token(create_access_token("not-a-uuid"))
    assert exc.value.status_code == 401


def test_token_signed_with_other_key_is_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"sub": str(uuid4()), "type": "access"},
        "some-other-signing-key",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(HTTPException) as exc:
        principal_from_token(token)
    assert exc.value.status_code == 401
    assert exc.value.headers == {"WWW-Authenticate": "Bearer"}
