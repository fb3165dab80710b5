"""Shared fixtures — deterministic clock, mocked scheduler, isolated settings."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from cronbake.config import Settings, get_settings

# Wednesday
NOW = datetime(2024, 1, 10, 12, 30, 15, 500000)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_scheduler() -> MagicMock:
    """Scheduler mock that runs one-shot jobs (no trigger) immediately."""
    scheduler = MagicMock()
    scheduler.running = True

    def add_job(func, trigger=None, **kwargs):  # noqa: ANN001, ANN202
        if trigger is None:
            func()
        return MagicMock()

    scheduler.add_job.side_effect = add_job
    return scheduler


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler() -> MagicMock:
    return make_scheduler()
