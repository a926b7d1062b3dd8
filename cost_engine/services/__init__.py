"""
Business Services
=================
Pricing service facade and its process-wide default instance.
"""

from cost_engine.services.pricing import (
    PricingService,
    default_service,
    new_service,
    new_service_from_bytes,
    stop_periodic_update,
)

__all__ = [
    "PricingService",
    "default_service",
    "new_service",
    "new_service_from_bytes",
    "stop_periodic_update",
]
