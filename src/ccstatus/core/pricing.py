"""Fallback per-model pricing used when the host reports no cost."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PricingTier:
    """USD per million tokens for one model family."""

    name: str
    input_cost_per_mtok: float
    output_cost_per_mtok: float


# ---------------------------------------------------------------------------
# Pricing table (first substring match wins)
# ---------------------------------------------------------------------------

PRICING: tuple[PricingTier, ...] = (
    PricingTier("opus", input_cost_per_mtok=15.00, output_cost_per_mtok=75.00),
    PricingTier("sonnet", input_cost_per_mtok=3.00, output_cost_per_mtok=15.00),
    PricingTier("haiku", input_cost_per_mtok=0.25, output_cost_per_mtok=1.25),
)

DEFAULT_TIER = PricingTier("default", input_cost_per_mtok=3.00, output_cost_per_mtok=15.00)


def resolve_tier(model: str | None) -> PricingTier:
    """Find the tier whose name occurs in *model*, case-insensitively."""
    label = (model or "").lower()
    for tier in PRICING:
        if tier.name in label:
            return tier
    return DEFAULT_TIER


def estimate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    """Estimate a session's cost in USD from its token totals."""
    tier = resolve_tier(model)
    input_cost = input_tokens * tier.input_cost_per_mtok / 1_000_000
    output_cost = output_tokens * tier.output_cost_per_mtok / 1_000_000
    return input_cost + output_cost
