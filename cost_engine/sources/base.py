"""
Pricing Data Sources
====================
Common contract for the places pricing JSON can come from, and the ordered
resolution across them.
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

import structlog

from cost_engine.core.errors import PricingSourceError

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PricingPayload:
    """
    Raw pricing JSON produced by a source.

    Attributes:
        data: Pricing JSON bytes (object keyed by model name)
        source: Name of the source that produced it
        updated_at: When the data was fetched, if known
        persist: Whether the data should be written to the local cache
    """

    data: bytes
    source: str
    updated_at: Optional[datetime] = None
    persist: bool = False


class PricingSource(Protocol):
    """A place pricing data can be loaded from."""

    name: str

    def load(self) -> PricingPayload:
        """Return pricing data or raise PricingSourceError."""
        ...


def ensure_pricing_json(data: bytes, source: str) -> None:
    """
    Check that data is a JSON object.

    Raises:
        PricingSourceError: data is not valid JSON or not an object
    """
    try:
        parsed = json.loads(data)
    except ValueError as e:
        raise PricingSourceError(source, f"invalid pricing JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise PricingSourceError(source, "pricing JSON is not an object")


def resolve_pricing_data(sources: Sequence[PricingSource]) -> PricingPayload:
    """
    Load pricing data from the first source that succeeds.

    Raises:
        PricingSourceError: every source failed
    """
    for source in sources:
        try:
            payload = source.load()
        except PricingSourceError as e:
            logger.warning("Pricing source unavailable", source=source.name, error=e.message)
            continue

        logger.info("Loaded pricing data", source=payload.source, size=len(payload.data))
        return payload

    raise PricingSourceError("pricing", "no pricing source produced data")
