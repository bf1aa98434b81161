from __future__ import annotations

import hashlib
import hmac
import json
import time
from types import SimpleNamespace

import pytest
import stripe

from billing_bridge.application.dto.billing import CheckoutLineItem, StripeCheckoutSessionRequest
from billing_bridge.domain.exceptions import ProviderUnavailableError, SignatureInvalidError
from billing_bridge.infrastructure.clients.stripe_client import StripeClient


WEBHOOK_SECRET = "whsec_test_secret"


def _sign(payload: bytes, *, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    signature = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def _payload(event_type: str = "checkout.session.completed") -> bytes:
    return json.dumps(
        {
            "id": "evt_1",
            "object": "event",
            "type": event_type,
            "data": {"object": {"id": "cs_test_xyz", "customer": "cus_1"}},
        }
    ).encode("utf-8")


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> StripeClient:
    # StripeClient configures the module-level SDK; restore it after each test.
    for name in ("api_key", "api_version", "max_network_retries", "default_http_client"):
        monkeypatch.setattr(stripe, name, getattr(stripe, name, None))
    return StripeClient(
        secret_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        api_version="2023-08-16",
        timeout_seconds=10,
        webhook_tolerance_seconds=300,
    )


def _checkout_request(price_id: str = "price_abc123") -> StripeCheckoutSessionRequest:
    return StripeCheckoutSessionRequest(
        line_items=(CheckoutLineItem(price=price_id, quantity=1),),
        success_url="https://app.example.com/success?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="https://app.example.com/cancel",
    )


def test_client_configures_sdk_without_automatic_retries(client: StripeClient):
    _ = client
    assert stripe.api_key == "sk_test_123"
    assert stripe.api_version == "2023-08-16"
    assert stripe.max_network_retries == 0
    assert stripe.default_http_client._timeout == 10


def test_create_checkout_session_sends_subscription_payload(client: StripeClient, monkeypatch: pytest.MonkeyPatch):
    calls: list[dict] = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(id="cs_test_xyz", url="https://checkout.stripe.com/c/pay/cs_test_xyz")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    result = client.create_checkout_session(request=_checkout_request())

    assert result.id == "cs_test_xyz"
    assert result.url == "https://checkout.stripe.com/c/pay/cs_test_xyz"
    assert calls == [
        {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [{"price": "price_abc123", "quantity": 1}],
            "success_url": "https://app.example.com/success?session_id={CHECKOUT_SESSION_ID}",
            "cancel_url": "https://app.example.com/cancel",
        }
    ]


def test_create_checkout_session_wraps_stripe_errors(client: StripeClient, monkeypatch: pytest.MonkeyPatch):
    def fake_create(**_kwargs):
        raise stripe.APIConnectionError("Network error")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    with pytest.raises(ProviderUnavailableError) as exc_info:
        client.create_checkout_session(request=_checkout_request())

    assert isinstance(exc_info.value.__cause__, stripe.APIConnectionError)


def test_create_checkout_session_requires_session_id(client: StripeClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(stripe.checkout.Session, "create", lambda **_kwargs: SimpleNamespace(id=None, url=None))

    with pytest.raises(ProviderUnavailableError):
        client.create_checkout_session(request=_checkout_request())


@pytest.mark.parametrize(
    "event_type",
    ["checkout.session.completed", "invoice.payment_succeeded", "customer.subscription.deleted", "customer.created"],
)
def test_verify_webhook_accepts_correctly_signed_payload(client: StripeClient, event_type: str):
    payload = _payload(event_type)

    event = client.verify_webhook(signature=_sign(payload), payload=payload)

    assert event.id == "evt_1"
    assert event.event_type == event_type
    assert event.data_object == {"id": "cs_test_xyz", "customer": "cus_1"}


def test_verify_webhook_rejects_other_secret(client: StripeClient):
    payload = _payload()

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=_sign(payload, secret="whsec_other"), payload=payload)


def test_verify_webhook_rejects_mutated_body(client: StripeClient):
    payload = _payload()
    signature = _sign(payload)
    tampered = payload.replace(b"cus_1", b"cus_2")

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=signature, payload=tampered)


def test_verify_webhook_rejects_reserialized_body(client: StripeClient):
    payload = _payload()
    signature = _sign(payload)
    reserialized = json.dumps(json.loads(payload), indent=2).encode("utf-8")

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=signature, payload=reserialized)


def test_verify_webhook_rejects_stale_timestamp(client: StripeClient):
    payload = _payload()
    signature = _sign(payload, timestamp=int(time.time()) - 3600)

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=signature, payload=payload)


@pytest.mark.parametrize("signature", [None, "", "garbage", "t=abc,v1=123"])
def test_verify_webhook_rejects_missing_or_malformed_header(client: StripeClient, signature):
    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=signature, payload=_payload())


def test_verify_webhook_rejects_signed_non_json_body(client: StripeClient):
    payload = b"not json"

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=_sign(payload), payload=payload)


def test_verify_webhook_rejects_signed_body_without_type(client: StripeClient):
    payload = json.dumps({"id": "evt_1", "data": {"object": {}}}).encode("utf-8")

    with pytest.raises(SignatureInvalidError):
        client.verify_webhook(signature=_sign(payload), payload=payload)


def test_client_applies_configured_request_timeout(monkeypatch: pytest.MonkeyPatch):
    for name in ("api_key", "api_version", "max_network_retries", "default_http_client"):
        monkeypatch.setattr(stripe, name, getattr(stripe, name, None))

    StripeClient(
        secret_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        api_version="2023-08-16",
        timeout_seconds=3,
        webhook_tolerance_seconds=300,
    )

    assert stripe.default_http_client._timeout == 3
