from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from billing_bridge.application.dto.billing import StripeWebhookOutput, VerifiedWebhookEvent
from billing_bridge.domain.entities.webhook_event import WebhookEventType, parse_event_type


logger = logging.getLogger(__name__)

WebhookHandler = Callable[[VerifiedWebhookEvent], None]


def handle_checkout_session_completed(event: VerifiedWebhookEvent) -> None:
    session = event.data_object
    logger.info(
        "webhook: checkout_session_completed session_id=%s customer=%s subscription=%s",
        session.get("id"),
        session.get("customer"),
        session.get("subscription"),
    )


def handle_invoice_payment_succeeded(event: VerifiedWebhookEvent) -> None:
    invoice = event.data_object
    logger.info(
        "webhook: payment_succeeded invoice_id=%s customer=%s amount_paid=%s",
        invoice.get("id"),
        invoice.get("customer"),
        invoice.get("amount_paid"),
    )


def handle_subscription_deleted(event: VerifiedWebhookEvent) -> None:
    subscription = event.data_object
    logger.info(
        "webhook: subscription_canceled subscription_id=%s customer=%s",
        subscription.get("id"),
        subscription.get("customer"),
    )


DEFAULT_HANDLERS: Mapping[WebhookEventType, WebhookHandler] = {
    WebhookEventType.CHECKOUT_SESSION_COMPLETED: handle_checkout_session_completed,
    WebhookEventType.INVOICE_PAYMENT_SUCCEEDED: handle_invoice_payment_succeeded,
    WebhookEventType.SUBSCRIPTION_DELETED: handle_subscription_deleted,
}


class DispatchWebhookEventUseCase:
    """Route a verified event to its handler.

    Handlers are where provisioning or entitlement updates plug in. A failing
    handler is logged and the event is still acknowledged, so Stripe does not
    redeliver an event that already passed verification.
    """

    def __init__(self, *, handlers: Mapping[WebhookEventType, WebhookHandler] | None = None):
        self._handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def execute(self, event: VerifiedWebhookEvent) -> StripeWebhookOutput:
        event_type = parse_event_type(event.event_type)
        handler = self._handlers.get(event_type) if event_type is not None else None
        if handler is None:
            logger.info("webhook: unhandled event_type=%s event_id=%s", event.event_type, event.id)
            return StripeWebhookOutput(event_type=event.event_type, handled=False)

        try:
            handler(event)
        except Exception:
            logger.exception(
                "webhook: handler_failed event_type=%s event_id=%s",
                event.event_type,
                event.id,
            )
            return StripeWebhookOutput(event_type=event.event_type, handled=False)

        return StripeWebhookOutput(event_type=event.event_type, handled=True)
