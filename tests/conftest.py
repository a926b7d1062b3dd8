"""
Test Configuration
==================
Pytest fixtures for LLM Cost Engine tests.
"""

import json
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from cost_engine.core.pricing import PricingTable, build_pricing_table
from cost_engine.main import create_app
from cost_engine.services.pricing import PricingService, new_service_from_bytes

REMOTE_URL = "https://pricing.test/model_prices_and_context_window.json"


SAMPLE_PRICING: dict[str, Any] = {
    "sample_spec": {
        "max_tokens": "LEGACY parameter",
        "input_cost_per_token": 0.0,
        "output_cost_per_token": 0.0,
        "litellm_provider": "one of https://docs.litellm.ai/docs/providers",
    },
    "test-model": {
        "input_cost_per_token": 0.000003,
        "output_cost_per_token": 0.000015,
        "litellm_provider": "openai",
        "mode": "chat",
    },
    "gpt-5": {
        "input_cost_per_token": 0.00000125,
        "output_cost_per_token": 0.00001,
        "cache_read_input_token_cost": 0.000000125,
    },
    "claude-sonnet-4-20250514": {
        "input_cost_per_token": 0.000003,
        "output_cost_per_token": 0.000015,
        "cache_creation_input_token_cost": 0.00000375,
        "cache_read_input_token_cost": 0.0000003,
    },
    "claude-3-5-haiku-20241022": {
        "input_cost_per_token": 0.0000008,
        "output_cost_per_token": 0.000004,
        "cache_creation_input_token_cost": 0.000001,
        "cache_read_input_token_cost": 0.00000008,
    },
    "custom-sonnet-preview": {
        "input_cost_per_token": 0.000003,
        "output_cost_per_token": 0.000015,
    },
    "claude-3-5-sonnet": {
        "input_cost_per_token": 0.000003,
        "output_cost_per_token": 0.000015,
    },
    "claude-3-5-sonnet-20241022": {
        "input_cost_per_token": 0.000003,
        "output_cost_per_token": 0.000015,
    },
    "free-embedding": {
        "input_cost_per_token": 0.0,
        "output_cost_per_token": 0.0,
    },
    "broken-entry": {
        "input_cost_per_token": "not a number",
    },
    "metadata": "not an entry",
}

REFRESHED_PRICING: dict[str, Any] = {
    "test-model": {
        "input_cost_per_token": 0.000006,
        "output_cost_per_token": 0.00003,
    },
}


class FixedClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def json_transport(payload: Any, status_code: int = 200) -> httpx.MockTransport:
    """Transport answering every request with the given JSON payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def failing_transport(
    exc_factory: Callable[[httpx.Request], Exception] = lambda r: httpx.ConnectError(
        "connection refused", request=r
    ),
) -> httpx.MockTransport:
    """Transport raising a transport error for every request."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def pricing_bytes() -> bytes:
    """Sample pricing feed as raw JSON bytes."""
    return json.dumps(SAMPLE_PRICING).encode("utf-8")


@pytest.fixture
def refreshed_bytes() -> bytes:
    """A second generation of pricing data."""
    return json.dumps(REFRESHED_PRICING).encode("utf-8")


@pytest.fixture
def table(pricing_bytes: bytes) -> PricingTable:
    """Pricing table built from the sample feed."""
    return build_pricing_table(pricing_bytes)


@pytest.fixture
def service(pricing_bytes: bytes) -> PricingService:
    """Pricing service over the sample feed, no refresher."""
    return new_service_from_bytes(pricing_bytes)


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at a known instant."""
    return FixedClock(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def client(service: PricingService) -> Generator[TestClient, None, None]:
    """Create test client serving the sample pricing service."""
    app = create_app(service=service)

    with TestClient(app) as c:
        yield c
