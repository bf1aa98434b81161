from __future__ import annotations

from billing_bridge.application.dto.billing import StripeWebhookInput, StripeWebhookOutput
from billing_bridge.application.ports.stripe_port import StripePort
from billing_bridge.application.use_cases.dispatch_webhook_event import DispatchWebhookEventUseCase


class ProcessStripeWebhookUseCase:
    def __init__(
        self,
        *,
        stripe_port: StripePort,
        dispatch_use_case: DispatchWebhookEventUseCase,
    ):
        self._stripe_port = stripe_port
        self._dispatch_use_case = dispatch_use_case

    def execute(self, command: StripeWebhookInput) -> StripeWebhookOutput:
        # Raises SignatureInvalidError before anything reads the payload.
        event = self._stripe_port.verify_webhook(signature=command.signature, payload=command.payload)
        return self._dispatch_use_case.execute(event)
