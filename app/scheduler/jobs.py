"""
app/scheduler/jobs.py

APScheduler-based background refresh of the merged performance snapshot.

Job
---
  refresh_performance_cache: every ``PERFORMANCE_REFRESH_INTERVAL_SECONDS``
                             (default 300 s), first run at start-up.

The job rebuilds the aggregation cache ahead of expiry, so readers keep
getting a warm snapshot instead of paying the rebuild cost on a cache miss.
A failed rebuild leaves the previous snapshot in place; it is logged and
retried on the next tick.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py
and only when ``PERFORMANCE_REFRESH_ENABLED`` is true.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from aggregation.errors import PerformanceDataUnavailableError
from app.config import get_refresh_scheduler_settings
from app.services.aggregation_service import PerformanceAggregationService, get_aggregation_service

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh_performance_cache"


# ---------------------------------------------------------------------------
# Job: cache refresh
# ---------------------------------------------------------------------------


def run_cache_refresh(service: PerformanceAggregationService | None = None) -> bool:
    """
    Rebuild the merged snapshot.

    Returns True on success.  A total source outage is logged at WARNING
    and reported as False so the scheduler keeps running.
    """
    service = service or get_aggregation_service()
    logger.info("Scheduler: %s starting", REFRESH_JOB_ID)
    try:
        merged = service.refresh()
    except PerformanceDataUnavailableError as exc:
        logger.warning("Scheduler: %s failed: %s", REFRESH_JOB_ID, exc)
        return False

    logger.info(
        "Scheduler: %s complete dates=%d sources=%s failed=%s",
        REFRESH_JOB_ID,
        merged.metadata.total_dates,
        list(merged.metadata.source_files),
        list(merged.metadata.failed_sources),
    )
    return True


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler(service: PerformanceAggregationService | None = None) -> BackgroundScheduler:
    """
    Return a configured, not-yet-started ``BackgroundScheduler``.
    """
    settings = get_refresh_scheduler_settings()
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_cache_refresh,
        trigger="interval",
        seconds=settings.interval_seconds,
        kwargs={"service": service},
        id=REFRESH_JOB_ID,
        name="Refresh merged performance snapshot",
        next_run_time=datetime.now(tz=timezone.utc),
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
