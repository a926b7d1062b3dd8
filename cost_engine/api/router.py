"""
API Router
==========
Main API router combining all endpoint modules.
"""

from fastapi import APIRouter

from cost_engine.api.endpoints import cost, health, pricing

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(cost.router, prefix="/cost", tags=["Cost"])
api_router.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])
