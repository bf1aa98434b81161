from __future__ import annotations

from typing import Protocol

from billing_bridge.application.dto.billing import (
    StripeCheckoutSessionRequest,
    StripeCheckoutSessionResult,
    VerifiedWebhookEvent,
)


class StripePort(Protocol):
    def create_checkout_session(self, *, request: StripeCheckoutSessionRequest) -> StripeCheckoutSessionResult:
        ...

    def verify_webhook(self, *, signature: str | None, payload: bytes) -> VerifiedWebhookEvent:
        ...
