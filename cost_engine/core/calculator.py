"""
Token Cost Engine
=================
Turns a token usage snapshot into a USD cost breakdown against a pricing table.
"""

from cost_engine.core.pricing import PricingEntry, PricingTable, has_long_context_marker
from cost_engine.schemas.usage import CostBreakdown, UsageSnapshot

_ZERO_RATES = PricingEntry()


def resolve_cache_tokens(usage: UsageSnapshot) -> tuple[int, int]:
    """
    Split cache-creation tokens into (5-minute, 1-hour) counts.

    Without a detailed split everything is billed as 5-minute tokens. With a
    split, tokens the split does not account for are added to the 5-minute
    tier. Counts never go negative.
    """
    if usage.cache_creation is None:
        return max(usage.cache_create_tokens, 0), 0

    five_min = usage.cache_creation.ephemeral_5m_tokens
    one_hour = usage.cache_creation.ephemeral_1h_tokens
    remaining = usage.cache_create_tokens - five_min - one_hour
    if remaining > 0:
        five_min += remaining

    return max(five_min, 0), max(one_hour, 0)


def calculate_cost(table: PricingTable, model: str, usage: UsageSnapshot) -> CostBreakdown:
    """
    Calculate the cost of one request.

    Never raises and performs no I/O. Unknown models yield a zero breakdown
    with ``has_pricing=False``.

    Args:
        table: Pricing table to price against
        model: Model identifier as reported by the provider
        usage: Token usage of the request

    Returns:
        Cost breakdown in USD
    """
    if not model:
        return CostBreakdown()

    entry, found = table.resolve(model)
    if entry is None:
        if not has_long_context_marker(model):
            return CostBreakdown(has_pricing=found)
        entry = _ZERO_RATES

    tier = table.long_context_tier(model, usage.total_input_tokens)
    if tier is not None:
        input_cost = usage.input_tokens * tier.input
        output_cost = usage.output_tokens * tier.output
    else:
        input_cost = usage.input_tokens * entry.input_cost_per_token
        output_cost = usage.output_tokens * entry.output_cost_per_token

    cache_5m_tokens, cache_1h_tokens = resolve_cache_tokens(usage)
    ephemeral_5m_cost = cache_5m_tokens * entry.cache_creation_input_token_cost
    ephemeral_1h_cost = cache_1h_tokens * table.ephemeral_1h_rate(model)
    cache_create_cost = ephemeral_5m_cost + ephemeral_1h_cost
    cache_read_cost = max(usage.cache_read_tokens, 0) * entry.cache_read_input_token_cost

    total_cost = input_cost + output_cost + cache_create_cost + cache_read_cost

    return CostBreakdown(
        input_cost=input_cost,
        output_cost=output_cost,
        cache_create_cost=cache_create_cost,
        cache_read_cost=cache_read_cost,
        ephemeral_5m_cost=ephemeral_5m_cost,
        ephemeral_1h_cost=ephemeral_1h_cost,
        total_cost=total_cost,
        has_pricing=found or total_cost > 0,
        is_long_context=tier is not None,
    )
