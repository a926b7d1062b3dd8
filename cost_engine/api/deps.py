"""
API Dependencies
================
Request-scoped access to the pricing service.
"""

from fastapi import Request

from cost_engine.services.pricing import PricingService


def get_pricing_service(request: Request) -> PricingService:
    """Pricing service installed by the application lifespan."""
    return request.app.state.pricing_service
