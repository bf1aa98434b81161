from __future__ import annotations

from functools import lru_cache

from billing_bridge.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from billing_bridge.application.use_cases.dispatch_webhook_event import DispatchWebhookEventUseCase
from billing_bridge.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from billing_bridge.domain.exceptions import ConfigurationError
from billing_bridge.infrastructure.clients.stripe_client import StripeClient
from billing_bridge.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_stripe_client() -> StripeClient:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise ConfigurationError("STRIPE_SECRET_KEY is required.")
    if not settings.stripe_webhook_secret:
        raise ConfigurationError("STRIPE_WEBHOOK_SECRET is required.")
    return StripeClient(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        api_version=settings.stripe_api_version,
        timeout_seconds=settings.stripe_timeout_seconds,
        webhook_tolerance_seconds=settings.stripe_webhook_tolerance_seconds,
    )


def get_create_checkout_session_use_case() -> CreateCheckoutSessionUseCase:
    settings = get_settings()
    if not settings.frontend_url:
        raise ConfigurationError("FRONTEND_URL is required.")
    return CreateCheckoutSessionUseCase(
        stripe_port=_get_stripe_client(),
        price_mapping=settings.price_mapping,
        allow_passthrough=settings.allows_price_passthrough,
        frontend_url=settings.frontend_url,
    )


def get_process_stripe_webhook_use_case() -> ProcessStripeWebhookUseCase:
    return ProcessStripeWebhookUseCase(
        stripe_port=_get_stripe_client(),
        dispatch_use_case=DispatchWebhookEventUseCase(),
    )


def get_checkout_variant() -> str:
    return get_settings().checkout_variant
