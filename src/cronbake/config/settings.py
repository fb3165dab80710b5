"""Pydantic-based settings loaded from ``CRONBAKE_*`` environment variables.

Every field has a sensible default, so a bare import works without any
environment at all. A ``.env`` file in the working directory is honoured.

Usage::

    from cronbake.config import get_settings
    settings = get_settings()
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime knobs — every field maps to a ``CRONBAKE_UPPER_SNAKE`` env var."""

    model_config = SettingsConfigDict(
        env_prefix="CRONBAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    # -- Jobs ---------------------------------------------------------------
    poll_interval_seconds: float = Field(default=1.0, gt=0)

    # -- Occurrence search --------------------------------------------------
    # ~4 years, so Feb 29 schedules still resolve
    search_horizon_days: int = Field(default=1461, ge=1)

    # -- Owned scheduler ----------------------------------------------------
    executor_max_workers: int = Field(default=10, ge=1)

    @property
    def search_horizon(self) -> timedelta:
        """Search horizon as a ``timedelta``."""
        return timedelta(days=self.search_horizon_days)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    return Settings()
