"""
Pricing Refresher
=================
APScheduler-based background job that keeps the pricing table fresh.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from cost_engine.core.errors import PricingError
from cost_engine.core.pricing import build_pricing_table
from cost_engine.metrics import PRICING_REFRESH_TOTAL
from cost_engine.sources.base import Clock, PricingSource, utcnow
from cost_engine.sources.cache import PricingCache

if TYPE_CHECKING:
    from cost_engine.services.pricing import PricingService

logger = structlog.get_logger()

REFRESH_JOB_ID = "pricing_refresh"


class PricingRefresher:
    """
    Periodically fetches remote pricing and swaps it into a service.

    A failed refresh leaves the current table in place.
    """

    def __init__(
        self,
        service: "PricingService",
        remote: PricingSource,
        cache: Optional[PricingCache] = None,
        interval: timedelta = timedelta(hours=24),
        clock: Clock = utcnow,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.service = service
        self.remote = remote
        self.cache = cache
        self.interval = interval
        self._clock = clock
        self.scheduler = scheduler or BackgroundScheduler(timezone="UTC")

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def refresh(self) -> bool:
        """
        Fetch remote pricing, swap it in and persist it.

        Returns:
            Whether a new table was installed
        """
        logger.info("Refreshing pricing data", source=self.remote.name)

        try:
            payload = self.remote.load()
            table = build_pricing_table(payload.data)
        except PricingError as e:
            logger.error("Pricing refresh failed", error=str(e))
            PRICING_REFRESH_TOTAL.labels(outcome="failure").inc()
            return False

        self.service.replace_table(table, updated_at=payload.updated_at or self._clock())

        if self.cache is not None:
            self.cache.save(payload.data, payload.updated_at)

        PRICING_REFRESH_TOTAL.labels(outcome="success").inc()
        logger.info("Pricing refresh completed", models=len(table))
        return True

    def run_refresh(self) -> None:
        """Execute the scheduled refresh."""
        try:
            self.refresh()
        except Exception as e:
            logger.error("Scheduled pricing refresh crashed", error=str(e))

    def first_run_delay(self) -> timedelta:
        """Time until the first refresh: what is left of the interval, or zero."""
        last_updated = self.service.last_updated
        if last_updated is None:
            return timedelta(0)

        elapsed = self._clock() - last_updated
        if elapsed >= self.interval:
            return timedelta(0)
        return self.interval - elapsed

    def setup(self) -> None:
        """Configure the refresh job."""
        delay = self.first_run_delay()

        self.scheduler.add_job(
            self.run_refresh,
            IntervalTrigger(seconds=self.interval.total_seconds(), timezone=self.scheduler.timezone),
            id=REFRESH_JOB_ID,
            name="Pricing Table Refresh",
            next_run_time=self._clock() + delay,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
        )

        logger.info(
            "Pricing refresher configured",
            first_run_in_seconds=int(delay.total_seconds()),
            interval_hours=self.interval.total_seconds() / 3600,
        )

    def start(self) -> None:
        """Start the scheduler."""
        if self.running:
            return
        self.setup()
        self.scheduler.start()
        logger.info("Pricing refresher started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        logger.info("Pricing refresher stopped")
