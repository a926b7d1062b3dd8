"""Pricing snapshot bundled with the package; the last-resort source."""

import importlib.resources

from cost_engine.sources.base import PricingPayload

BUNDLED_PRICING_FILE = "model_prices_and_context_window.json"


def read_bundled_pricing() -> bytes:
    files = importlib.resources.files("cost_engine.resources")
    return (files / BUNDLED_PRICING_FILE).read_bytes()


class EmbeddedPricingSource:
    """Always succeeds with the bundled snapshot."""

    name = "embedded"

    def load(self) -> PricingPayload:
        return PricingPayload(data=read_bundled_pricing(), source=self.name)
