"""Tests for cronbake.scheduler.baker — the named job registry."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from conftest import NOW, FakeClock

from cronbake.config import Settings
from cronbake.core import MalformedExpression
from cronbake.scheduler.baker import Baker
from cronbake.scheduler.job import CronJob, Status


@pytest.fixture()
def baker(scheduler: MagicMock, clock: FakeClock, settings: Settings) -> Baker:
    return Baker(scheduler=scheduler, clock=clock, settings=settings)


# ── Registry ────────────────────────────────────────────────────────────


class TestAdd:
    def test_add_registers_stopped_job(self, baker: Baker) -> None:
        job = baker.add("tick", "@every_second", MagicMock())
        assert isinstance(job, CronJob)
        assert "tick" in baker
        assert len(baker) == 1
        assert baker.get("tick") is job
        assert baker.get_status("tick") is Status.STOPPED

    def test_add_with_auto_start(self, baker: Baker) -> None:
        baker.add("tick", "@every_second", MagicMock(), auto_start=True)
        assert baker.is_running("tick") is True

    def test_baker_auto_start_is_the_default(self, scheduler: MagicMock, clock: FakeClock, settings: Settings) -> None:
        baker = Baker(True, scheduler=scheduler, clock=clock, settings=settings)
        baker.add("a", "@daily", MagicMock())
        baker.add("b", "@daily", MagicMock(), auto_start=False)
        assert baker.is_running("a") is True
        assert baker.is_running("b") is False

    def test_jobs_share_the_baker_scheduler(self, baker: Baker, scheduler: MagicMock) -> None:
        baker.add("a", "@daily", MagicMock(), auto_start=True)
        baker.add("b", "@hourly", MagicMock(), auto_start=True)
        assert scheduler.add_job.call_count == 2

    def test_same_name_replaces_and_disposes_previous(self, baker: Baker) -> None:
        on_dispose = MagicMock()
        first = baker.add("tick", "@daily", MagicMock(), on_dispose=on_dispose, auto_start=True)

        second = baker.add("tick", "@hourly", MagicMock())

        on_dispose.assert_called_once()
        assert first.is_running() is False
        assert baker.get("tick") is second
        assert len(baker) == 1

    def test_malformed_expression_leaves_registry_untouched(self, baker: Baker) -> None:
        existing = baker.add("tick", "@daily", MagicMock())
        with pytest.raises(MalformedExpression):
            baker.add("tick", "* * *", MagicMock())
        assert baker.get("tick") is existing

    def test_names(self, baker: Baker) -> None:
        baker.add("a", "@daily", MagicMock())
        baker.add("b", "@daily", MagicMock())
        assert baker.names() == ["a", "b"]

    def test_create_factory(self, scheduler: MagicMock, clock: FakeClock) -> None:
        baker = Baker.create(scheduler=scheduler, clock=clock)
        assert isinstance(baker, Baker)
        assert len(baker) == 0


class TestRemove:
    def test_remove_disposes_and_forgets(self, baker: Baker) -> None:
        on_dispose = MagicMock()
        baker.add("tick", "@daily", MagicMock(), on_dispose=on_dispose, auto_start=True)

        baker.remove("tick")

        on_dispose.assert_called_once()
        assert "tick" not in baker

    def test_dispose_by_name(self, baker: Baker) -> None:
        on_dispose = MagicMock()
        baker.add("tick", "@daily", MagicMock(), on_dispose=on_dispose)
        baker.dispose("tick")
        on_dispose.assert_called_once()
        assert len(baker) == 0

    def test_unknown_name_is_noop(self, baker: Baker) -> None:
        baker.remove("missing")
        baker.dispose("missing")
        baker.start("missing")
        baker.stop("missing")
        assert len(baker) == 0


# ── Per-job lifecycle ───────────────────────────────────────────────────


class TestLifecycle:
    def test_start_and_stop_by_name(self, baker: Baker) -> None:
        baker.add("tick", "@daily", MagicMock())

        baker.start("tick")
        assert baker.is_running("tick") is True
        assert baker.get_status("tick") is Status.RUNNING

        baker.stop("tick")
        assert baker.is_running("tick") is False

    def test_bake_is_start(self, baker: Baker) -> None:
        baker.add("tick", "@daily", MagicMock())
        baker.bake("tick")
        assert baker.is_running("tick") is True


# ── Queries ─────────────────────────────────────────────────────────────


class TestQueries:
    def test_known_job_queries_delegate(self, baker: Baker) -> None:
        job = baker.add("tick", "*/5 * * * * *", MagicMock(), auto_start=True)
        assert baker.next_execution("tick") == job.next_execution()
        assert baker.last_execution("tick") == job.last_execution()
        assert baker.remaining("tick") == job.remaining() == 4500
        assert baker.time("tick") == job.time()

    def test_unknown_job_defaults(self, baker: Baker) -> None:
        assert baker.get_status("missing") is Status.STOPPED
        assert baker.is_running("missing") is False
        assert baker.last_execution("missing") == NOW
        assert baker.next_execution("missing") == NOW
        assert baker.remaining("missing") == 0
        assert baker.time("missing") == int(NOW.timestamp() * 1000)
        assert baker.get("missing") is None


# ── Bulk ────────────────────────────────────────────────────────────────


class TestBulk:
    def test_start_all_and_stop_all(self, baker: Baker) -> None:
        baker.add("a", "@daily", MagicMock())
        baker.add("b", "@hourly", MagicMock())

        baker.start_all()
        assert all(job.is_running() for job in baker)

        baker.stop_all()
        assert not any(job.is_running() for job in baker)

    def test_bake_all_is_start_all(self, baker: Baker) -> None:
        baker.add("a", "@daily", MagicMock())
        baker.bake_all()
        assert baker.is_running("a") is True

    def test_dispose_all_empties_registry(self, baker: Baker, scheduler: MagicMock) -> None:
        disposals = [MagicMock(), MagicMock()]
        baker.add("a", "@daily", MagicMock(), on_dispose=disposals[0], auto_start=True)
        baker.add("b", "@hourly", MagicMock(), on_dispose=disposals[1])

        baker.dispose_all()

        for on_dispose in disposals:
            on_dispose.assert_called_once()
        assert len(baker) == 0
        scheduler.shutdown.assert_not_called()

    def test_dispose_all_shuts_down_owned_scheduler(self, clock: FakeClock, settings: Settings) -> None:
        owned = MagicMock()
        owned.running = False
        owned.start.side_effect = lambda: setattr(owned, "running", True)

        with patch("cronbake.scheduler.baker.create_scheduler", return_value=owned):
            baker = Baker(clock=clock, settings=settings)
            baker.add("a", "@daily", MagicMock(), auto_start=True)
            owned.start.assert_called_once()

            baker.dispose_all()

        owned.shutdown.assert_called_once_with(wait=False)
