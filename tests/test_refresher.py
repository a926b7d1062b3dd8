"""
Pricing Refresher Tests
=======================
Tests for the periodic pricing refresh job.
"""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from cost_engine.jobs.refresher import REFRESH_JOB_ID, PricingRefresher
from cost_engine.schemas.usage import UsageSnapshot
from cost_engine.services.pricing import PricingService
from cost_engine.sources import PricingCache, RemotePricingSource

from .conftest import REMOTE_URL, FixedClock, failing_transport, json_transport


def make_refresher(
    service: PricingService,
    transport,
    clock: FixedClock,
    cache: PricingCache | None = None,
) -> PricingRefresher:
    return PricingRefresher(
        service,
        remote=RemotePricingSource(url=REMOTE_URL, transport=transport, clock=clock),
        cache=cache,
        interval=timedelta(hours=24),
        clock=clock,
        scheduler=BackgroundScheduler(timezone="UTC"),
    )


class TestRefresh:
    """Tests for a single refresh cycle."""

    def test_successful_refresh_swaps_table(
        self, service: PricingService, refreshed_bytes: bytes, clock: FixedClock, tmp_path: Path
    ):
        cache = PricingCache(tmp_path / "prices.json", clock=clock)
        refresher = make_refresher(service, json_transport(json.loads(refreshed_bytes)), clock, cache)
        old_table = service.table
        usage = UsageSnapshot(input_tokens=1000)

        assert service.calculate_cost("test-model", usage).input_cost == pytest.approx(0.003)
        assert refresher.refresh() is True

        assert service.table is not old_table
        assert service.last_updated == clock.now
        assert service.calculate_cost("test-model", usage).input_cost == pytest.approx(0.006)
        assert json.loads(cache.path.read_text(encoding="utf-8"))["data"] == json.loads(refreshed_bytes)

    def test_failed_refresh_keeps_table(self, service: PricingService, clock: FixedClock):
        refresher = make_refresher(service, failing_transport(), clock)
        old_table = service.table

        assert refresher.refresh() is False

        assert service.table is old_table
        assert service.last_updated is None

    def test_invalid_remote_json_keeps_table(self, service: PricingService, clock: FixedClock):
        refresher = make_refresher(service, json_transport(["not", "a", "table"]), clock)
        old_table = service.table

        assert refresher.refresh() is False
        assert service.table is old_table

    def test_cache_failure_does_not_undo_swap(
        self, service: PricingService, refreshed_bytes: bytes, clock: FixedClock, tmp_path: Path
    ):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        cache = PricingCache(blocker / "prices.json", clock=clock)
        refresher = make_refresher(service, json_transport(json.loads(refreshed_bytes)), clock, cache)

        assert refresher.refresh() is True
        assert "claude-sonnet-4-20250514" not in service.table

    def test_run_refresh_swallows_errors(self, service: PricingService, clock: FixedClock):
        refresher = make_refresher(service, failing_transport(), clock)

        def explode():
            raise RuntimeError("boom")

        refresher.refresh = explode  # type: ignore[method-assign]

        refresher.run_refresh()


class TestScheduling:
    """Tests for refresh scheduling."""

    def test_unknown_last_update_runs_immediately(self, service: PricingService, clock: FixedClock):
        refresher = make_refresher(service, failing_transport(), clock)

        assert refresher.first_run_delay() == timedelta(0)

    def test_recent_update_waits_remaining_interval(self, service: PricingService, clock: FixedClock):
        service.replace_table(service.table, updated_at=clock.now - timedelta(hours=1))
        refresher = make_refresher(service, failing_transport(), clock)

        assert refresher.first_run_delay() == timedelta(hours=23)

    def test_expired_update_runs_immediately(self, service: PricingService, clock: FixedClock):
        service.replace_table(service.table, updated_at=clock.now - timedelta(hours=30))
        refresher = make_refresher(service, failing_transport(), clock)

        assert refresher.first_run_delay() == timedelta(0)

    def test_setup_schedules_first_run(self, service: PricingService, clock: FixedClock):
        service.replace_table(service.table, updated_at=clock.now - timedelta(hours=6))
        refresher = make_refresher(service, failing_transport(), clock)

        refresher.setup()

        job = refresher.scheduler.get_job(REFRESH_JOB_ID)
        assert job is not None
        assert job.next_run_time == clock.now + timedelta(hours=18)
        assert job.trigger.interval == timedelta(hours=24)

    def test_start_and_stop(self, service: PricingService):
        now = datetime.now(timezone.utc)
        service.replace_table(service.table, updated_at=now)
        refresher = PricingRefresher(
            service,
            remote=RemotePricingSource(url=REMOTE_URL, transport=failing_transport()),
            interval=timedelta(hours=24),
        )

        refresher.start()
        try:
            assert refresher.running
            assert refresher.scheduler.get_job(REFRESH_JOB_ID) is not None
        finally:
            refresher.stop()

        assert not refresher.running
        refresher.stop()
