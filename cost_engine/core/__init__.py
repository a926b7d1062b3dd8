"""
Core Business Logic
====================
Pricing table, model name resolution and cost calculation.
"""

from cost_engine.core.errors import PricingDataError, PricingError, PricingSourceError
from cost_engine.core.pricing import (
    LongContextPricing,
    PricingEntry,
    PricingTable,
    build_pricing_table,
)

__all__ = [
    "LongContextPricing",
    "PricingDataError",
    "PricingEntry",
    "PricingError",
    "PricingSourceError",
    "PricingTable",
    "build_pricing_table",
]
