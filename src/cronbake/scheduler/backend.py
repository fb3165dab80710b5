"""APScheduler v3 backend — the timer facility jobs register their checks on."""

from __future__ import annotations

import logging

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler

from cronbake.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_scheduler(settings: Settings | None = None) -> BackgroundScheduler:
    """Build an unstarted background scheduler sized from *settings*.

    Uses the local timezone, matching the naive wall-clock times the
    parser works with.
    """
    settings = settings or get_settings()
    scheduler = BackgroundScheduler(
        executors={"default": ThreadPoolExecutor(settings.executor_max_workers)},
        job_defaults={"coalesce": True, "max_instances": 1},
    )
    logger.debug(
        "Created background scheduler with %d workers", settings.executor_max_workers
    )
    return scheduler
