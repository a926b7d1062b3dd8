"""
LLM Cost Engine
===============
Usage-based dollar cost calculation for LLM API calls, backed by a
self-refreshing model pricing table.
"""

__version__ = "1.0.0"

from cost_engine.schemas.usage import CacheCreationDetail, CostBreakdown, UsageSnapshot
from cost_engine.services.pricing import (
    PricingService,
    default_service,
    new_service,
    new_service_from_bytes,
    stop_periodic_update,
)

__all__ = [
    "CacheCreationDetail",
    "CostBreakdown",
    "PricingService",
    "UsageSnapshot",
    "default_service",
    "new_service",
    "new_service_from_bytes",
    "stop_periodic_update",
]
