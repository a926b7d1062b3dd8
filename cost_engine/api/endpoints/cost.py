"""
Cost Endpoints
==============
API endpoint for pricing a single request's token usage.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from cost_engine.api.deps import get_pricing_service
from cost_engine.schemas.usage import CostBreakdown, CostRequest
from cost_engine.services.pricing import PricingService

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    "",
    response_model=CostBreakdown,
    summary="Calculate cost",
    description="Calculate the USD cost breakdown of one request's token usage",
)
async def calculate_cost(
    request: CostRequest,
    service: Annotated[PricingService, Depends(get_pricing_service)],
) -> CostBreakdown:
    """
    Calculate the cost of a request.

    Unknown models are not an error: the breakdown is all zeros with
    ``has_pricing`` set to false.
    """
    breakdown = service.calculate_cost(request.model, request.usage)

    if not breakdown.has_pricing:
        logger.info("No pricing for model", model=request.model)

    return breakdown
