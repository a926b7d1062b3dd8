"""
Pricing Data Sources
====================
Local cache file, remote feed and bundled snapshot, tried in that order.
"""

from cost_engine.sources.base import PricingPayload, PricingSource, resolve_pricing_data
from cost_engine.sources.cache import PricingCache
from cost_engine.sources.embedded import EmbeddedPricingSource, read_bundled_pricing
from cost_engine.sources.remote import RemotePricingSource

__all__ = [
    "EmbeddedPricingSource",
    "PricingCache",
    "PricingPayload",
    "PricingSource",
    "RemotePricingSource",
    "read_bundled_pricing",
    "resolve_pricing_data",
]
