"""
Remote Pricing Source
=====================
Fetches the full pricing table from the community pricing feed.
"""

from typing import Optional

import httpx
import structlog

from cost_engine.config import LITELLM_PRICING_URL
from cost_engine.core.errors import PricingSourceError
from cost_engine.sources.base import Clock, PricingPayload, ensure_pricing_json, utcnow

logger = structlog.get_logger()


class RemotePricingSource:
    """
    HTTP source for pricing JSON.

    Any non-200 response or body that is not a JSON object is rejected.
    """

    name = "remote"

    def __init__(
        self,
        url: str = LITELLM_PRICING_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Clock = utcnow,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._clock = clock

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "llm-cost-engine/1.0.0",
        }

    def load(self) -> PricingPayload:
        """
        Download pricing data.

        Raises:
            PricingSourceError: request failed, non-200 status or invalid JSON
        """
        logger.info("Fetching remote pricing data", url=self.url)

        try:
            with httpx.Client(
                timeout=self.timeout,
                transport=self._transport,
                headers=self._get_headers(),
                follow_redirects=True,
            ) as client:
                response = client.get(self.url)
        except httpx.HTTPError as e:
            raise PricingSourceError(self.name, f"request failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise PricingSourceError(self.name, f"unexpected status {response.status_code}")

        data = response.content
        ensure_pricing_json(data, self.name)

        return PricingPayload(data=data, source=self.name, updated_at=self._clock(), persist=True)
