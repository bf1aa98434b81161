from __future__ import annotations

from billing_bridge.domain.entities.plan import PriceMapping
from billing_bridge.domain.exceptions import InvalidTierError


def resolve_price_id(
    identifier_or_tier: str | None,
    *,
    price_mapping: PriceMapping,
    allow_passthrough: bool,
) -> str:
    """Map a tier name, or a raw price id when passthrough is allowed, to a Stripe price id."""
    if not identifier_or_tier:
        raise InvalidTierError("Tier or price id is required.")

    price_id = price_mapping.price_for(identifier_or_tier)
    if price_id:
        return price_id

    if allow_passthrough:
        return identifier_or_tier

    raise InvalidTierError(f"Unknown tier: {identifier_or_tier}")
