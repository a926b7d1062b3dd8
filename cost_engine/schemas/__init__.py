"""
Pydantic Schemas
================
Usage snapshots, cost breakdowns and request/response models.
"""

from cost_engine.schemas.usage import (
    CacheCreationDetail,
    CostBreakdown,
    CostRequest,
    ModelPricingResponse,
    RefreshResponse,
    UsageSnapshot,
)

__all__ = [
    "CacheCreationDetail",
    "CostBreakdown",
    "CostRequest",
    "ModelPricingResponse",
    "RefreshResponse",
    "UsageSnapshot",
]
