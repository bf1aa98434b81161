from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from billing_bridge.domain.entities.plan import PriceMapping, Tier


load_dotenv()


CHECKOUT_VARIANT_TIER = "tier"
CHECKOUT_VARIANT_PRICE_ID = "price_id"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str) -> tuple[str, ...]:
    value = _env(name)
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _checkout_variant(name: str) -> str:
    value = (_env(name, CHECKOUT_VARIANT_TIER) or CHECKOUT_VARIANT_TIER).strip().lower()
    if value not in {CHECKOUT_VARIANT_TIER, CHECKOUT_VARIANT_PRICE_ID}:
        raise ValueError(f"{name} must be '{CHECKOUT_VARIANT_TIER}' or '{CHECKOUT_VARIANT_PRICE_ID}'.")
    return value


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: str
    stripe_webhook_secret: str
    stripe_api_version: str
    stripe_timeout_seconds: float
    stripe_webhook_tolerance_seconds: int
    price_mapping: PriceMapping
    checkout_variant: str
    frontend_url: str
    cors_allowed_origins: tuple[str, ...]
    host: str
    port: int
    log_level: str

    @property
    def allows_price_passthrough(self) -> bool:
        return self.checkout_variant == CHECKOUT_VARIANT_PRICE_ID


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    prices = {
        Tier.STARTER: _env("STRIPE_STARTER_PRICE_ID", ""),
        Tier.PRO: _env("STRIPE_PRO_PRICE_ID", ""),
        Tier.ENTERPRISE: _env("STRIPE_ENTERPRISE_PRICE_ID", ""),
    }
    return Settings(
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET", ""),
        stripe_api_version=_env("STRIPE_API_VERSION", "2023-08-16"),
        stripe_timeout_seconds=float(_env("STRIPE_TIMEOUT_SECONDS", "10")),
        stripe_webhook_tolerance_seconds=int(_env("STRIPE_WEBHOOK_TOLERANCE_SECONDS", "300")),
        price_mapping=PriceMapping.from_config(prices),
        checkout_variant=_checkout_variant("CHECKOUT_REQUEST_VARIANT"),
        frontend_url=_env("FRONTEND_URL", ""),
        cors_allowed_origins=_csv("CORS_ALLOWED_ORIGINS"),
        host=_env("HOST", "0.0.0.0"),
        port=int(_env("PORT", "3000")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
