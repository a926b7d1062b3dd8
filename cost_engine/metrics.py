"""
Prometheus Metrics
==================
Counters exposed on the ``/metrics`` endpoint.
"""

from prometheus_client import Counter, Gauge

PRICING_REFRESH_TOTAL = Counter(
    "pricing_refresh_total",
    "Pricing table refresh attempts",
    ["outcome"],
)

PRICING_TABLE_MODELS = Gauge(
    "pricing_table_models",
    "Number of models in the active pricing table",
)

COST_CALCULATIONS_TOTAL = Counter(
    "cost_calculations_total",
    "Cost calculations performed",
    ["has_pricing"],
)
