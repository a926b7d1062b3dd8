"""
Pricing Endpoints
=================
API endpoints for model pricing lookups and refresh.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from cost_engine.api.deps import get_pricing_service
from cost_engine.schemas.usage import ModelPricingResponse, RefreshResponse
from cost_engine.services.pricing import PricingService

router = APIRouter()
logger = structlog.get_logger()


@router.get(
    "/models/{model:path}",
    response_model=ModelPricingResponse,
    summary="Get model pricing",
    description="Resolve a model name to its pricing entry",
)
async def get_model_pricing(
    model: str,
    service: Annotated[PricingService, Depends(get_pricing_service)],
) -> ModelPricingResponse:
    """
    Resolve a model name against the active pricing table.

    Region prefixes (us./eu./apac.), the anthropic. provider prefix and
    separator differences are tolerated.
    """
    entry, found = service.get_pricing(model)
    return ModelPricingResponse(model=model, found=found, entry=entry)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh pricing data",
    description="Fetch the remote pricing feed and replace the active table",
)
def refresh_pricing(
    service: Annotated[PricingService, Depends(get_pricing_service)],
) -> RefreshResponse:
    """
    Refresh pricing from the remote feed.

    On failure the current table stays active and 502 is returned.
    """
    if not service.refresh():
        logger.warning("Manual pricing refresh failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to refresh pricing data",
        )

    return RefreshResponse(
        status="ok",
        models=len(service.table),
        last_updated=service.last_updated,
    )
