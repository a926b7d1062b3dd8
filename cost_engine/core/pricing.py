"""
Pricing Table
=============
Immutable snapshot of per-model token rates built from the community pricing
feed (LiteLLM ``model_prices_and_context_window.json`` schema), plus the
name resolution used to look models up in it.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cost_engine.core.errors import PricingDataError
from cost_engine.core.matching import (
    MODEL_ALIASES,
    normalize_name,
    strip_provider_prefix,
    strip_region_prefix,
)

logger = structlog.get_logger()

# Defaults for cache pricing when the feed omits it
CACHE_CREATION_MULTIPLIER = 1.25
CACHE_READ_MULTIPLIER = 0.1

LONG_CONTEXT_MARKER = "[1m]"
LONG_CONTEXT_THRESHOLD = 200_000

OPUS_1H_RATE = 0.00003
SONNET_1H_RATE = 0.000006
HAIKU_1H_RATE = 0.0000016

# Checked in order against the lower-cased model name
EPHEMERAL_1H_FAMILY_RATES = (
    ("opus", OPUS_1H_RATE),
    ("sonnet", SONNET_1H_RATE),
    ("haiku", HAIKU_1H_RATE),
)


class PricingEntry(BaseModel):
    """Per-token USD rates for one model, as published in the pricing feed."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    input_cost_per_token: float = 0.0
    output_cost_per_token: float = 0.0
    cache_creation_input_token_cost: float = 0.0
    cache_creation_input_token_cost_above_1hr: float = 0.0
    cache_creation_input_token_cost_above_200k_tokens: float = 0.0
    cache_read_input_token_cost: float = 0.0
    input_cost_per_token_above_128k_tokens: float = 0.0
    input_cost_per_token_above_200k_tokens: float = 0.0
    output_cost_per_token_above_200k_tokens: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def null_as_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    def with_cache_defaults(self) -> "PricingEntry":
        """Fill missing cache rates from the input rate (x1.25 create, x0.1 read)."""
        if self.input_cost_per_token <= 0:
            return self

        update: dict[str, float] = {}
        if self.cache_creation_input_token_cost == 0:
            update["cache_creation_input_token_cost"] = (
                self.input_cost_per_token * CACHE_CREATION_MULTIPLIER
            )
        if self.cache_read_input_token_cost == 0:
            update["cache_read_input_token_cost"] = self.input_cost_per_token * CACHE_READ_MULTIPLIER

        return self.model_copy(update=update) if update else self


class LongContextPricing(BaseModel):
    """Input/output rates for models running with the 1M-token context window."""

    model_config = ConfigDict(frozen=True)

    input: float
    output: float


def default_ephemeral_1h_pricing() -> dict[str, float]:
    """1-hour cache-creation rates for Claude models."""
    return {
        "claude-opus-4-1": OPUS_1H_RATE,
        "claude-opus-4-1-20250805": OPUS_1H_RATE,
        "claude-opus-4": OPUS_1H_RATE,
        "claude-opus-4-20250514": OPUS_1H_RATE,
        "claude-opus-4-5-20251101": OPUS_1H_RATE,
        "claude-3-opus": OPUS_1H_RATE,
        "claude-3-opus-latest": OPUS_1H_RATE,
        "claude-3-opus-20240229": OPUS_1H_RATE,
        "claude-3-5-sonnet": SONNET_1H_RATE,
        "claude-3-5-sonnet-latest": SONNET_1H_RATE,
        "claude-3-5-sonnet-20241022": SONNET_1H_RATE,
        "claude-3-5-sonnet-20240620": SONNET_1H_RATE,
        "claude-3-sonnet": SONNET_1H_RATE,
        "claude-3-sonnet-20240307": SONNET_1H_RATE,
        "claude-sonnet-3": SONNET_1H_RATE,
        "claude-sonnet-3-5": SONNET_1H_RATE,
        "claude-sonnet-3-7": SONNET_1H_RATE,
        "claude-sonnet-4": SONNET_1H_RATE,
        "claude-sonnet-4-20250514": SONNET_1H_RATE,
        "claude-3-5-haiku": HAIKU_1H_RATE,
        "claude-3-5-haiku-latest": HAIKU_1H_RATE,
        "claude-3-5-haiku-20241022": HAIKU_1H_RATE,
        "claude-3-haiku": HAIKU_1H_RATE,
        "claude-3-haiku-20240307": HAIKU_1H_RATE,
        "claude-haiku-3": HAIKU_1H_RATE,
        "claude-haiku-3-5": HAIKU_1H_RATE,
    }


def default_long_context_pricing() -> dict[str, LongContextPricing]:
    """Long-context tier rates keyed by the ``[1m]``-tagged model name."""
    return {
        "claude-sonnet-4-20250514[1m]": LongContextPricing(input=0.000006, output=0.0000225),
    }


def has_long_context_marker(model: str) -> bool:
    return LONG_CONTEXT_MARKER in model.lower()


@dataclass(frozen=True)
class PricingTable:
    """
    One generation of pricing data.

    Built once per load/refresh and never mutated; a refresh replaces the
    whole table. All mappings are read-only views.
    """

    entries: Mapping[str, PricingEntry]
    normalized: Mapping[str, str]
    ephemeral_1h: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(default_ephemeral_1h_pricing())
    )
    long_contexts: Mapping[str, LongContextPricing] = field(
        default_factory=lambda: MappingProxyType(default_long_context_pricing())
    )
    # (normalized key, raw key) pairs sorted by raw key, for the substring scan
    scan_index: tuple[tuple[str, str], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, model: object) -> bool:
        return model in self.entries

    def resolve(self, model: str) -> tuple[Optional[PricingEntry], bool]:
        """
        Find the pricing entry for a free-form model name.

        Tried in order, first hit wins:
            1. exact key
            2. alias (gpt-5-codex -> gpt-5)
            3. region prefix stripped (us./eu./apac.)
            4. region and ``anthropic.`` prefixes stripped
            5. normalized name index
            6. substring match on normalized names, closest length first,
               ties broken by key

        Returns:
            Tuple of (entry, found); entry is None when not found
        """
        if not model:
            return None, False

        entry = self.entries.get(model)
        if entry is not None:
            return entry, True

        alias = MODEL_ALIASES.get(model)
        if alias is not None and alias in self.entries:
            return self.entries[alias], True

        without_region = strip_region_prefix(model)
        entry = self.entries.get(without_region)
        if entry is not None:
            return entry, True

        entry = self.entries.get(strip_provider_prefix(without_region))
        if entry is not None:
            return entry, True

        target = normalize_name(model)
        key = self.normalized.get(target)
        if key is not None:
            return self.entries[key], True

        key = self._closest_substring_key(target)
        if key is not None:
            logger.debug("Model matched by substring", model=model, matched=key)
            return self.entries[key], True

        logger.debug("Model not found in pricing table", model=model)
        return None, False

    def _closest_substring_key(self, target: str) -> Optional[str]:
        if not target:
            return None

        best: Optional[tuple[int, str]] = None
        for norm_key, key in self.scan_index:
            if not norm_key:
                continue
            if target in norm_key or norm_key in target:
                rank = (abs(len(norm_key) - len(target)), key)
                if best is None or rank < best:
                    best = rank

        return best[1] if best is not None else None

    def long_context_tier(self, model: str, total_input_tokens: int) -> Optional[LongContextPricing]:
        """Long-context rates if the model is ``[1m]``-tagged and over the threshold."""
        if not has_long_context_marker(model):
            return None
        if total_input_tokens <= LONG_CONTEXT_THRESHOLD or not self.long_contexts:
            return None

        tier = self.long_contexts.get(model)
        if tier is not None:
            return tier
        return next(iter(self.long_contexts.values()))

    def ephemeral_1h_rate(self, model: str) -> float:
        """Per-token rate for 1-hour cache-creation tokens."""
        rate = self.ephemeral_1h.get(model)
        if rate is not None:
            return rate

        name = model.lower()
        for family, family_rate in EPHEMERAL_1H_FAMILY_RATES:
            if family in name:
                return family_rate
        return 0.0


def build_pricing_table(
    data: Union[bytes, str, Mapping[str, Any]],
    ephemeral_1h: Optional[Mapping[str, float]] = None,
    long_contexts: Optional[Mapping[str, LongContextPricing]] = None,
) -> PricingTable:
    """
    Build a pricing table from raw pricing JSON.

    Entries that are not objects or fail validation are skipped. Missing cache
    rates are derived here, once.

    Raises:
        PricingDataError: data is not a JSON object
    """
    if isinstance(data, (bytes, str)):
        try:
            raw = json.loads(data)
        except ValueError as e:
            raise PricingDataError(f"Invalid pricing JSON: {e}") from e
    else:
        raw = data

    if not isinstance(raw, Mapping):
        raise PricingDataError("Pricing data must be a JSON object keyed by model name")

    entries: dict[str, PricingEntry] = {}
    normalized: dict[str, str] = {}
    skipped = 0

    for key, value in raw.items():
        if not isinstance(value, Mapping):
            skipped += 1
            continue
        try:
            entry = PricingEntry.model_validate(value)
        except ValidationError as e:
            logger.debug("Skipping invalid pricing entry", model=key, error=str(e))
            skipped += 1
            continue

        entries[key] = entry.with_cache_defaults()
        # First key wins on a normalized collision
        normalized.setdefault(normalize_name(key), key)

    logger.debug("Built pricing table", models=len(entries), skipped=skipped)

    return PricingTable(
        entries=MappingProxyType(entries),
        normalized=MappingProxyType(normalized),
        ephemeral_1h=MappingProxyType(
            dict(ephemeral_1h) if ephemeral_1h is not None else default_ephemeral_1h_pricing()
        ),
        long_contexts=MappingProxyType(
            dict(long_contexts) if long_contexts is not None else default_long_context_pricing()
        ),
        scan_index=tuple((normalize_name(key), key) for key in sorted(entries)),
    )
