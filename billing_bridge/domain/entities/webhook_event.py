from __future__ import annotations

from enum import Enum


class WebhookEventType(str, Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"


def parse_event_type(value: str) -> WebhookEventType | None:
    try:
        return WebhookEventType(value)
    except ValueError:
        return None
