from __future__ import annotations

import json
import logging

import stripe

from billing_bridge.application.dto.billing import (
    StripeCheckoutSessionRequest,
    StripeCheckoutSessionResult,
    VerifiedWebhookEvent,
)
from billing_bridge.application.ports.stripe_port import StripePort
from billing_bridge.domain.exceptions import ProviderUnavailableError, SignatureInvalidError


logger = logging.getLogger(__name__)


class StripeClient(StripePort):
    def __init__(
        self,
        *,
        secret_key: str,
        webhook_secret: str,
        api_version: str,
        timeout_seconds: float,
        webhook_tolerance_seconds: int,
    ):
        stripe.api_key = secret_key
        stripe.api_version = api_version
        # Checkout creation is not idempotent, so the SDK must not retry on its own.
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.new_default_http_client(timeout=timeout_seconds)
        self._webhook_secret = webhook_secret
        self._webhook_tolerance_seconds = webhook_tolerance_seconds

    def create_checkout_session(self, *, request: StripeCheckoutSessionRequest) -> StripeCheckoutSessionResult:
        try:
            session = stripe.checkout.Session.create(
                mode=request.mode,
                payment_method_types=list(request.payment_method_types),
                line_items=[{"price": item.price, "quantity": item.quantity} for item in request.line_items],
                success_url=request.success_url,
                cancel_url=request.cancel_url,
            )
        except Exception as exc:
            raise ProviderUnavailableError("Failed to create Stripe checkout session.") from exc

        session_id = getattr(session, "id", None)
        if not session_id:
            raise ProviderUnavailableError("Stripe checkout session id is missing.")

        session_url = getattr(session, "url", None)
        return StripeCheckoutSessionResult(
            id=str(session_id),
            url=str(session_url) if session_url else None,
        )

    def verify_webhook(self, *, signature: str | None, payload: bytes) -> VerifiedWebhookEvent:
        if not signature:
            raise SignatureInvalidError("No stripe-signature header value was provided.")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SignatureInvalidError("Webhook payload is not valid UTF-8.") from exc

        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self._webhook_secret,
                tolerance=self._webhook_tolerance_seconds,
            )
        except stripe.SignatureVerificationError as exc:
            raise SignatureInvalidError(str(exc)) from exc

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise SignatureInvalidError("Webhook payload is not valid JSON.") from exc

        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise SignatureInvalidError("Webhook payload is missing the event type.")

        envelope = data.get("data")
        data_object = envelope.get("object") if isinstance(envelope, dict) else None
        logger.debug("stripe_client: verified event_id=%s event_type=%s", data.get("id"), data["type"])
        return VerifiedWebhookEvent(
            id=data.get("id"),
            event_type=data["type"],
            data_object=data_object if isinstance(data_object, dict) else {},
        )
