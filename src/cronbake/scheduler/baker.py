"""Baker — a named registry of cron jobs sharing one background scheduler."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import TYPE_CHECKING

from cronbake.config import Settings, get_settings
from cronbake.scheduler.backend import create_scheduler
from cronbake.scheduler.job import Clock, CronJob, Status

if TYPE_CHECKING:
    from apscheduler.schedulers.base import BaseScheduler

    from cronbake.utils.callbacks import Callback

logger = logging.getLogger(__name__)


class Baker:
    """Holds one :class:`CronJob` per name and forwards lifecycle calls.

    Operations on unknown names are no-ops; queries on unknown names return
    a default (``stopped``, ``False``, the current time, or ``0``).
    """

    def __init__(
        self,
        auto_start: bool = False,
        *,
        scheduler: BaseScheduler | None = None,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._clock: Clock = clock or datetime.now
        self._auto_start = auto_start
        self._jobs: dict[str, CronJob] = {}

    @classmethod
    def create(cls, auto_start: bool = False, **kwargs: object) -> Baker:
        return cls(auto_start, **kwargs)  # type: ignore[arg-type]

    def __contains__(self, name: object) -> bool:
        return name in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[CronJob]:
        return iter(list(self._jobs.values()))

    @property
    def scheduler(self) -> BaseScheduler:
        """The shared scheduler, created on first use."""
        if self._scheduler is None:
            self._scheduler = create_scheduler(self._settings)
        return self._scheduler

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        expression: str,
        action: Callback,
        on_fire: Callback | None = None,
        on_dispose: Callback | None = None,
        auto_start: bool | None = None,
    ) -> CronJob:
        """Create and register a job, replacing (and disposing) any namesake.

        *auto_start* defaults to the baker's own ``auto_start``.

        Raises:
            MalformedExpression: If *expression* cannot be parsed.
        """
        job = CronJob(
            name,
            expression,
            action,
            on_fire=on_fire,
            on_dispose=on_dispose,
            scheduler=self.scheduler,
            clock=self._clock,
            settings=self._settings,
        )
        previous = self._jobs.pop(name, None)
        if previous is not None:
            logger.info("Replacing job '%s'", name)
            previous.dispose()
        self._jobs[name] = job
        logger.info("Added job '%s' with cron '%s'", name, expression)

        if auto_start is None:
            auto_start = self._auto_start
        if auto_start:
            job.start()
        return job

    def get(self, name: str) -> CronJob | None:
        return self._jobs.get(name)

    def names(self) -> list[str]:
        return list(self._jobs)

    def remove(self, name: str) -> None:
        """Dispose the job and forget it."""
        job = self._jobs.pop(name, None)
        if job is not None:
            job.dispose()
            logger.info("Removed job '%s'", name)

    # ------------------------------------------------------------------
    # Per-job lifecycle
    # ------------------------------------------------------------------

    def start(self, name: str) -> None:
        job = self._jobs.get(name)
        if job is not None:
            job.start()

    bake = start

    def stop(self, name: str) -> None:
        job = self._jobs.get(name)
        if job is not None:
            job.stop()

    def dispose(self, name: str) -> None:
        self.remove(name)

    # ------------------------------------------------------------------
    # Per-job queries
    # ------------------------------------------------------------------

    def get_status(self, name: str) -> Status:
        job = self._jobs.get(name)
        return job.get_status() if job else Status.STOPPED

    def is_running(self, name: str) -> bool:
        job = self._jobs.get(name)
        return job.is_running() if job else False

    def last_execution(self, name: str) -> datetime:
        job = self._jobs.get(name)
        return job.last_execution() if job else self._clock()

    def next_execution(self, name: str) -> datetime:
        job = self._jobs.get(name)
        return job.next_execution() if job else self._clock()

    def remaining(self, name: str) -> int:
        job = self._jobs.get(name)
        return job.remaining() if job else 0

    def time(self, name: str) -> int:
        job = self._jobs.get(name)
        return job.time() if job else int(self._clock().timestamp() * 1000)

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def start_all(self) -> None:
        for job in self:
            job.start()

    bake_all = start_all

    def stop_all(self) -> None:
        for job in self:
            job.stop()

    def dispose_all(self) -> None:
        """Dispose every job, empty the registry, and release the scheduler."""
        for job in self:
            job.dispose()
        self._jobs.clear()
        if self._owns_scheduler and self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("All jobs disposed")
