from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Tier(str, Enum):
    STARTER = "starter"
    PRO = "pro"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True)
class PriceMapping:
    """Tier -> Stripe price id, fixed for the process lifetime."""

    prices: Mapping[Tier, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    @classmethod
    def from_config(cls, prices: Mapping[Tier, str | None]) -> PriceMapping:
        # Unconfigured tiers are left out so they resolve as invalid.
        return cls({tier: price_id for tier, price_id in prices.items() if price_id})

    def price_for(self, tier_name: str) -> str | None:
        try:
            tier = Tier(tier_name)
        except ValueError:
            return None
        return self.prices.get(tier)
