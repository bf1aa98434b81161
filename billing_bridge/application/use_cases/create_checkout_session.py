from __future__ import annotations

import logging

from billing_bridge.application.dto.billing import (
    CheckoutLineItem,
    CreateCheckoutSessionInput,
    CreateCheckoutSessionOutput,
    StripeCheckoutSessionRequest,
)
from billing_bridge.application.ports.stripe_port import StripePort
from billing_bridge.domain.entities.plan import PriceMapping
from billing_bridge.domain.exceptions import ProviderUnavailableError
from billing_bridge.domain.services.tier_resolver import resolve_price_id


logger = logging.getLogger(__name__)

# Stripe substitutes this placeholder with the real session id on redirect.
CHECKOUT_SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def build_checkout_session_request(*, price_id: str, frontend_url: str) -> StripeCheckoutSessionRequest:
    base_url = frontend_url.rstrip("/")
    return StripeCheckoutSessionRequest(
        line_items=(CheckoutLineItem(price=price_id, quantity=1),),
        success_url=f"{base_url}/success?session_id={CHECKOUT_SESSION_ID_PLACEHOLDER}",
        cancel_url=f"{base_url}/cancel",
    )


class CreateCheckoutSessionUseCase:
    def __init__(
        self,
        *,
        stripe_port: StripePort,
        price_mapping: PriceMapping,
        allow_passthrough: bool,
        frontend_url: str,
    ):
        self._stripe_port = stripe_port
        self._price_mapping = price_mapping
        self._allow_passthrough = allow_passthrough
        self._frontend_url = frontend_url

    def execute(self, command: CreateCheckoutSessionInput) -> CreateCheckoutSessionOutput:
        price_id = resolve_price_id(
            command.identifier_or_tier,
            price_mapping=self._price_mapping,
            allow_passthrough=self._allow_passthrough,
        )
        request = build_checkout_session_request(price_id=price_id, frontend_url=self._frontend_url)

        try:
            result = self._stripe_port.create_checkout_session(request=request)
        except ProviderUnavailableError:
            raise
        except Exception as exc:
            raise ProviderUnavailableError("Stripe checkout session request failed.") from exc

        logger.info(
            "create_checkout_session: created session_id=%s price_id=%s url=%s",
            result.id,
            price_id,
            result.url,
        )
        return CreateCheckoutSessionOutput(session_id=result.id)
