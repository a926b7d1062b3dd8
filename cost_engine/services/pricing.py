"""
Pricing Service
===============
Owns the active pricing table and answers cost queries against it.
"""

import threading
from datetime import datetime, timedelta
from typing import Optional, Union

import httpx
import structlog

from cost_engine.config import Settings, get_settings
from cost_engine.core.calculator import calculate_cost
from cost_engine.core.pricing import PricingEntry, PricingTable, build_pricing_table
from cost_engine.jobs.refresher import PricingRefresher
from cost_engine.metrics import COST_CALCULATIONS_TOTAL, PRICING_TABLE_MODELS
from cost_engine.schemas.usage import CostBreakdown, UsageSnapshot
from cost_engine.sources.base import Clock, resolve_pricing_data, utcnow
from cost_engine.sources.cache import PricingCache
from cost_engine.sources.embedded import EmbeddedPricingSource, read_bundled_pricing
from cost_engine.sources.remote import RemotePricingSource

logger = structlog.get_logger()


class PricingService:
    """
    Cost calculation over a swappable pricing table.

    The table reference is read and replaced under a lock; tables themselves
    are immutable, so a calculation that has borrowed a table finishes on it
    even if a refresh swaps in a new one meanwhile.
    """

    def __init__(
        self,
        table: PricingTable,
        last_updated: Optional[datetime] = None,
    ):
        self._table = table
        self._last_updated = last_updated
        self._lock = threading.Lock()
        self.refresher: Optional[PricingRefresher] = None
        self.publishes_metrics = False

    @classmethod
    def from_bytes(cls, data: Union[bytes, str]) -> "PricingService":
        """
        Build a service from pricing JSON; no cache, network or timer.

        Raises:
            PricingDataError: data is not a JSON object
        """
        return cls(build_pricing_table(data))

    @classmethod
    def from_embedded(cls) -> "PricingService":
        """Build a service from the bundled pricing snapshot."""
        return cls.from_bytes(read_bundled_pricing())

    @classmethod
    def from_sources(
        cls,
        settings: Optional[Settings] = None,
        clock: Clock = utcnow,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "PricingService":
        """
        Build a service from the first available source: local cache, remote
        feed, then the bundled snapshot. Never fails.

        A refresher is attached but not started.
        """
        settings = settings or get_settings()

        cache = PricingCache(
            settings.pricing_cache_path,
            max_age=timedelta(hours=settings.pricing_cache_max_age_hours),
            clock=clock,
        )
        remote = RemotePricingSource(
            url=settings.pricing_remote_url,
            timeout=settings.pricing_remote_timeout,
            transport=transport,
            clock=clock,
        )

        payload = resolve_pricing_data([cache, remote, EmbeddedPricingSource()])
        if payload.persist:
            cache.save(payload.data, payload.updated_at)

        service = cls(build_pricing_table(payload.data), last_updated=payload.updated_at)
        service.refresher = PricingRefresher(
            service,
            remote=remote,
            cache=cache,
            interval=timedelta(hours=settings.pricing_refresh_interval_hours),
            clock=clock,
        )
        logger.info(
            "Pricing service ready",
            source=payload.source,
            models=len(service.table),
        )
        return service

    @property
    def table(self) -> PricingTable:
        """The active pricing table."""
        with self._lock:
            return self._table

    @property
    def last_updated(self) -> Optional[datetime]:
        """When the active data was fetched; None for bundled data."""
        with self._lock:
            return self._last_updated

    def replace_table(self, table: PricingTable, updated_at: Optional[datetime] = None) -> None:
        """Install a new pricing table."""
        with self._lock:
            self._table = table
            self._last_updated = updated_at
        if self.publishes_metrics:
            PRICING_TABLE_MODELS.set(len(table))

    def publish_metrics(self) -> None:
        """Report this service's table size on the process-wide gauge."""
        self.publishes_metrics = True
        PRICING_TABLE_MODELS.set(len(self.table))

    def get_pricing(self, model: str) -> tuple[Optional[PricingEntry], bool]:
        """Resolve a model name to its pricing entry."""
        return self.table.resolve(model)

    def calculate_cost(self, model: str, usage: Optional[UsageSnapshot] = None) -> CostBreakdown:
        """
        Calculate the USD cost of one request.

        Args:
            model: Model identifier
            usage: Token usage of the request

        Returns:
            Cost breakdown; ``has_pricing`` is False for unknown models
        """
        breakdown = calculate_cost(self.table, model, usage or UsageSnapshot())
        COST_CALCULATIONS_TOTAL.labels(has_pricing=str(breakdown.has_pricing).lower()).inc()
        return breakdown

    def refresh(self) -> bool:
        """Fetch remote pricing now. Returns whether the table was replaced."""
        if self.refresher is None:
            logger.warning("Pricing refresh requested without a remote source")
            return False
        return self.refresher.refresh()

    def start_periodic_update(self) -> None:
        if self.refresher is not None:
            self.refresher.start()

    def stop_periodic_update(self) -> None:
        """Stop the background refresh, if running."""
        if self.refresher is not None:
            self.refresher.stop()


_default_service: Optional[PricingService] = None
_default_lock = threading.Lock()


def default_service() -> PricingService:
    """
    Get the process-wide pricing service.

    Built on first call from cache/remote/bundled data; periodic refresh is
    started unless disabled in settings.
    """
    global _default_service
    with _default_lock:
        if _default_service is None:
            settings = get_settings()
            service = PricingService.from_sources(settings)
            service.publish_metrics()
            if settings.pricing_refresh_enabled:
                service.start_periodic_update()
            _default_service = service
        return _default_service


def new_service() -> PricingService:
    """Create a service from the bundled pricing snapshot."""
    return PricingService.from_embedded()


def new_service_from_bytes(data: Union[bytes, str]) -> PricingService:
    """Create a service from pricing JSON (no cache, network or timer)."""
    return PricingService.from_bytes(data)


def stop_periodic_update() -> None:
    """Stop the default service's background refresh (for shutdown and tests)."""
    with _default_lock:
        service = _default_service
    if service is not None:
        service.stop_periodic_update()
