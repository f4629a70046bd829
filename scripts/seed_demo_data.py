"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import time
from uuid import UUID

from fitbook.core.config import get_settings
from fitbook.core.database import SessionLocal, close_engine
from fitbook.core.enums import RoleEnum, WeekdayEnum
from fitbook.core.security import create_access_token
from fitbook.modules.identity.schemas import Principal
from fitbook.modules.scheduling.repository import SchedulingRepository
from fitbook.modules.scheduling.schemas import AvailabilityUpdate, DayWindow
from fitbook.modules.scheduling.service import SchedulingService

DEMO_TRAINER_ID = UUID("6f1b8c9e-2d4a-4c7e-9f10-3a5b7c9d1e01")
DEMO_CLIENT_ID = UUID("0c2d4e6f-8a1b-4c3d-9e5f-7a9b1c3d5e02")
DEMO_ADMIN_ID = UUID("9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c03")

DEMO_WORKDAYS = (
    WeekdayEnum.MONDAY,
    WeekdayEnum.TUESDAY,
    WeekdayEnum.WEDNESDAY,
    WeekdayEnum.THURSDAY,
    WeekdayEnum.FRIDAY,
)
DEMO_DAY_START = time(8, 0)
DEMO_DAY_END = time(20, 0)


@dataclass(slots=True)
class SeedStats:
    trainer_id: str
    workdays: int
    client_token: str
    trainer_token: str


def _demo_weekly_hours() -> AvailabilityUpdate:
    weekly_hours = {
        weekday: DayWindow(available=weekday in DEMO_WORKDAYS, start=DEMO_DAY_START, end=DEMO_DAY_END)
        for weekday in WeekdayEnum
    }
    return AvailabilityUpdate(weekly_hours=weekly_hours)


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    if settings.app_env.strip().lower() in {"production", "prod"} and not allow_production:
        raise RuntimeError("Refusing to seed demo data in production without --allow-production")

    async with SessionLocal() as session:
        service = SchedulingService(SchedulingRepository(session))
        admin = Principal(id=DEMO_ADMIN_ID, role=RoleEnum.ADMIN)
        await service.set_availability(DEMO_TRAINER_ID, _demo_weekly_hours(), admin)
        await session.commit()

    return SeedStats(
        trainer_id=str(DEMO_TRAINER_ID),
        workdays=len(DEMO_WORKDAYS),
        client_token=create_access_token(str(DEMO_CLIENT_ID), role=RoleEnum.CLIENT.value),
        trainer_token=create_access_token(str(DEMO_TRAINER_ID), role=RoleEnum.TRAINER.value),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for FitBook (trainer weekly hours, demo tokens).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Trainer id: {stats.trainer_id}")
    print(f"- Working days configured: {stats.workdays} ({DEMO_DAY_START:%H:%M}-{DEMO_DAY_END:%H:%M})")
    print("")
    print("Demo bearer tokens (non-production only, short-lived):")
    print(f"- client:  {stats.client_token}")
    print(f"- trainer: {stats.trainer_token}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
