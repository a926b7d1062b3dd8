"""
Usage Schemas
=============
Pydantic models for token usage snapshots and cost breakdowns.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cost_engine.core.pricing import PricingEntry


class CacheCreationDetail(BaseModel):
    """Split of cache-creation tokens into the 5-minute and 1-hour tiers."""

    model_config = ConfigDict(frozen=True)

    ephemeral_5m_tokens: int = Field(default=0, ge=0)
    ephemeral_1h_tokens: int = Field(default=0, ge=0)


class UsageSnapshot(BaseModel):
    """
    Token usage of a single request.

    ``cache_create_tokens`` is the aggregate cache-creation count. When
    ``cache_creation`` is present it carries the per-tier split; tokens not
    covered by the split are billed as 5-minute tokens.
    """

    model_config = ConfigDict(frozen=True)

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cache_create_tokens: int = Field(default=0, ge=0)
    cache_read_tokens: int = Field(default=0, ge=0)
    cache_creation: CacheCreationDetail | None = None

    @property
    def total_input_tokens(self) -> int:
        return self.input_tokens + self.cache_create_tokens + self.cache_read_tokens


class CostBreakdown(BaseModel):
    """Itemized USD cost of one calculation."""

    model_config = ConfigDict(frozen=True)

    input_cost: float = 0.0
    output_cost: float = 0.0
    cache_create_cost: float = 0.0
    cache_read_cost: float = 0.0
    ephemeral_5m_cost: float = 0.0
    ephemeral_1h_cost: float = 0.0
    total_cost: float = 0.0
    has_pricing: bool = False
    is_long_context: bool = False


class CostRequest(BaseModel):
    """Request body for a cost calculation."""

    model: str = Field(..., max_length=255)
    usage: UsageSnapshot = Field(default_factory=UsageSnapshot)


class ModelPricingResponse(BaseModel):
    """Resolved pricing entry for a model name."""

    model: str
    found: bool
    entry: PricingEntry | None = None


class RefreshResponse(BaseModel):
    """Outcome of a manual pricing refresh."""

    status: str
    models: int
    last_updated: datetime | None = None
