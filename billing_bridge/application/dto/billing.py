from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CreateCheckoutSessionInput:
    identifier_or_tier: str | None


@dataclass(frozen=True)
class CreateCheckoutSessionOutput:
    session_id: str


@dataclass(frozen=True)
class CheckoutLineItem:
    price: str
    quantity: int = 1


@dataclass(frozen=True)
class StripeCheckoutSessionRequest:
    line_items: tuple[CheckoutLineItem, ...]
    success_url: str
    cancel_url: str
    mode: str = "subscription"
    payment_method_types: tuple[str, ...] = ("card",)


@dataclass(frozen=True)
class StripeCheckoutSessionResult:
    id: str
    url: str | None


@dataclass(frozen=True)
class StripeWebhookInput:
    signature: str | None
    payload: bytes


@dataclass(frozen=True)
class StripeWebhookOutput:
    event_type: str
    handled: bool


@dataclass(frozen=True)
class VerifiedWebhookEvent:
    id: str | None
    event_type: str
    data_object: dict[str, Any] = field(default_factory=dict)
