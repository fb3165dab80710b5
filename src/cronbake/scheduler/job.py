"""A single named cron job: an expression, an action, and a polling timer."""

from __future__ import annotations

import contextlib
import logging
import threading
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from cronbake.config import Settings, get_settings
from cronbake.core import CronParser, NoOccurrenceFound
from cronbake.scheduler.backend import create_scheduler
from cronbake.utils.callbacks import Callback, invoke

if TYPE_CHECKING:
    from apscheduler.job import Job
    from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class Status(str, Enum):
    """Lifecycle state of a job."""

    RUNNING = "running"
    STOPPED = "stopped"


class CronJob:
    """Fires *action* (then *on_fire*) at every occurrence of *expression*.

    While running, the job owns one interval timer on an APScheduler
    scheduler. Each tick compares the clock with the cached next
    occurrence; once it is reached the firing is handed to the scheduler's
    executor so a slow callback never holds up the timer.

    Callbacks may be sync or return an awaitable. Their errors are
    discarded (see :mod:`cronbake.utils.callbacks`).

    Args:
        name: Job name, unique within a :class:`~cronbake.scheduler.baker.Baker`.
        expression: Six-field expression or alias.
        action: Zero-argument callable run on every occurrence.
        on_fire: Optional callable run after *action* on every occurrence.
        on_dispose: Optional callable run once per :meth:`dispose`.
        auto_start: Start immediately after construction.
        scheduler: Scheduler to register the timer on. When omitted the
            job creates, starts and eventually shuts down its own.
        clock: Source of "now"; defaults to :meth:`datetime.now`.
        settings: Overrides :func:`~cronbake.config.get_settings`.

    Raises:
        MalformedExpression: If *expression* cannot be parsed.
    """

    def __init__(
        self,
        name: str,
        expression: str,
        action: Callback,
        on_fire: Callback | None = None,
        on_dispose: Callback | None = None,
        auto_start: bool = False,
        *,
        scheduler: BaseScheduler | None = None,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.name = name
        self.expression = expression
        self._settings = settings or get_settings()
        self._parser = CronParser(expression, self._settings)
        self._action = action
        self._on_fire = on_fire
        self._on_dispose = on_dispose
        self._clock: Clock = clock or datetime.now
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._timer: Job | None = None
        self._next: datetime | None = None
        self._status = Status.STOPPED
        self._disposed = False
        self._lock = threading.RLock()

        if auto_start:
            self.start()

    @classmethod
    def create(cls, name: str, expression: str, action: Callback, **kwargs: object) -> CronJob:
        """Alternate constructor, same arguments as :class:`CronJob`."""
        return cls(name, expression, action, **kwargs)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"CronJob(name={self.name!r}, expression={self.expression!r}, status={self._status.value!r})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Compute the next occurrence and begin polling. No-op if running.

        Raises:
            NoOccurrenceFound: If the expression never matches.
        """
        with self._lock:
            if self._status is Status.RUNNING:
                return
            self._next = self._parser.get_next(self._clock())
            scheduler = self._ensure_scheduler()
            self._timer = scheduler.add_job(
                self._check,
                trigger=IntervalTrigger(seconds=self._settings.poll_interval_seconds),
                id=f"cronbake:{self.name}:{uuid.uuid4().hex[:8]}",
                name=self.name,
                max_instances=1,
                coalesce=True,
            )
            self._status = Status.RUNNING
            self._disposed = False
        logger.info("Job '%s' started (%s), next run at %s", self.name, self.expression, self._next)

    def stop(self) -> None:
        """Cancel the timer. In-flight firings finish. No-op if stopped."""
        with self._lock:
            if self._status is Status.STOPPED:
                return
            self._status = Status.STOPPED
            timer, self._timer = self._timer, None
        if timer is not None:
            with contextlib.suppress(JobLookupError):
                timer.remove()
        logger.info("Job '%s' stopped", self.name)

    def dispose(self) -> None:
        """Stop the job and run *on_dispose* once.

        Disposing again does nothing until :meth:`start` re-arms the job.
        """
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
        self.stop()
        if self._owns_scheduler and self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None
        invoke(self._on_dispose)
        logger.info("Job '%s' disposed", self.name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_status(self) -> Status:
        return self._status

    def is_running(self) -> bool:
        return self._status is Status.RUNNING

    def last_execution(self) -> datetime:
        """Most recent scheduled occurrence before now (not firing history)."""
        return self._parser.get_previous(self._clock())

    def next_execution(self) -> datetime:
        """Cached next occurrence, or the current time if never started."""
        return self._next or self._clock()

    def remaining(self) -> int:
        """Milliseconds until the cached next occurrence; negative if overdue."""
        if self._next is None:
            return 0
        return int((self._next - self._clock()).total_seconds() * 1000)

    def time(self) -> int:
        """Current time in epoch milliseconds."""
        return int(self._clock().timestamp() * 1000)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _ensure_scheduler(self) -> BaseScheduler:
        if self._scheduler is None:
            self._scheduler = create_scheduler(self._settings)
            self._owns_scheduler = True
        if not self._scheduler.running:
            self._scheduler.start()
        return self._scheduler

    def _check(self) -> bool:
        """One timer tick. Returns True if a firing was dispatched."""
        with self._lock:
            if self._status is not Status.RUNNING or self._next is None:
                return False
            now = self._clock()
            if self._next > now:
                return False
            due = self._next
            scheduler = self._scheduler
            try:
                self._next = self._parser.get_next(now)
            except NoOccurrenceFound:
                logger.warning("Job '%s' has no further occurrences, stopping", self.name)
                self.stop()

        logger.debug("Job '%s' due at %s, next run at %s", self.name, due, self._next)
        if scheduler is not None:
            scheduler.add_job(self._fire, name=f"{self.name}:fire", misfire_grace_time=None)
        return True

    def _fire(self) -> None:
        invoke(self._action)
        invoke(self._on_fire)
