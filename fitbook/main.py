"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from sqlalchemy import text

import fitbook.modules  # noqa: F401
from fitbook.core.config import get_settings
from fitbook.core.database import SessionLocal, close_engine
from fitbook.core.metrics import build_metrics_response, instrument_http_request
from fitbook.modules.booking.router import router as booking_router
from fitbook.modules.scheduling.router import router as scheduling_router
from fitbook.shared.exceptions import register_exception_handlers
from fitbook.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info(
        "Starting %s (booking timezone %s, cancellation window %sh)",
        settings.app_name,
        settings.booking_timezone,
        settings.booking_cancellation_window_hours,
    )

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(booking_router, prefix=settings.api_prefix)
app.include_router(scheduling_router, prefix=settings.api_prefix)


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    """Return True if DB answers and the booking schema is migrated."""
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1 FROM bookings LIMIT 1"))
        return True
    except Exception:
        logger.exception("Database readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str | int]:
    """Readiness probe endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "booking_timezone": settings.booking_timezone,
        "cancellation_window_hours": settings.booking_cancellation_window_hours,
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
