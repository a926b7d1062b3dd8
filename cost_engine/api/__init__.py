"""
HTTP API
========
FastAPI routers for cost calculation and pricing lookups.
"""

from cost_engine.api.router import api_router

__all__ = ["api_router"]
