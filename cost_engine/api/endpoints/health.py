"""
Health Check Endpoints
======================
Liveness and readiness probes for Kubernetes.
"""

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cost_engine import __version__
from cost_engine.api.deps import get_pricing_service
from cost_engine.services.pricing import PricingService

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str
    models: int
    last_updated: Optional[datetime] = None
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness probe endpoint.
    Returns OK if the service is running.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    service: Annotated[PricingService, Depends(get_pricing_service)],
) -> ReadinessResponse:
    """
    Readiness probe endpoint.
    Degraded when the active pricing table is empty.
    """
    models = len(service.table)

    return ReadinessResponse(
        status="ok" if models else "degraded",
        models=models,
        last_updated=service.last_updated,
        version=__version__,
    )
