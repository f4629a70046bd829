from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from fitbook.core.config import Settings


def test_default_secret_key_allowed_in_development() -> None:
    settings = Settings(_env_file=None, app_env="development", secret_key="change-me")
    assert settings.secret_key == "change-me"


def test_default_secret_key_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production", secret_key="change-me")


def test_placeholder_secret_key_prefix_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="prod", secret_key="change-me-in-production")


def test_custom_secret_key_allowed_in_production() -> None:
    settings = Settings(_env_file=None, app_env="production", secret_key="super-secure-value")
    assert settings.secret_key == "super-secure-value"


def test_booking_policy_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.booking_default_duration_minutes == 60
    assert settings.booking_cancellation_window_hours == 24
    assert settings.booking_late_cancellation_fee_rate == Decimal("0.5")
    assert settings.booking_require_configured_hours is False
    assert settings.booking_enforce_session_end_within_hours is False


def test_unknown_booking_timezone_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, booking_timezone="Mars/Olympus_Mons")


def test_fee_rate_above_one_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, booking_late_cancellation_fee_rate=Decimal("1.5"))
