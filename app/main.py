from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from fastapi import FastAPI

from app.config import get_aggregation_settings, get_refresh_scheduler_settings


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_data_dir() -> None:
    """
    Warn when the configured data directory is missing.

    Not fatal: the aggregation layer reports a total outage as HTTP 503 at
    request time, and the directory may be populated after start-up.
    """

    settings = get_aggregation_settings()
    if not settings.data_dir.is_dir():
        logging.getLogger(__name__).warning(
            "Performance data directory %s does not exist; requests will return 503 "
            "until the primary source %r is available.",
            settings.data_dir,
            settings.primary_source,
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Check the data directory and start the refresh scheduler when enabled."""
    _check_data_dir()

    if not get_refresh_scheduler_settings().enabled:
        yield
        return

    from app.scheduler.jobs import build_scheduler

    scheduler = build_scheduler()
    scheduler.start()
    logging.getLogger(__name__).info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        logging.getLogger(__name__).info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Solar Performance Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import insight_router, performance_router

    application.include_router(performance_router)
    application.include_router(insight_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

    return application


app = create_app()
