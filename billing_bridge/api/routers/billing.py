from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from billing_bridge.api.deps import (
    get_checkout_variant,
    get_create_checkout_session_use_case,
    get_process_stripe_webhook_use_case,
)
from billing_bridge.api.schemas.billing import (
    CreateCheckoutSessionRequest,
    CreateCheckoutSessionResponse,
    ErrorResponse,
    StripeWebhookResponse,
)
from billing_bridge.application.dto.billing import CreateCheckoutSessionInput, StripeWebhookInput
from billing_bridge.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from billing_bridge.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from billing_bridge.domain.exceptions import (
    InvalidTierError,
    ProviderUnavailableError,
    SignatureInvalidError,
)
from billing_bridge.shared.config import CHECKOUT_VARIANT_PRICE_ID


router = APIRouter()
logger = logging.getLogger(__name__)


def _parse_checkout_request(body: bytes) -> CreateCheckoutSessionRequest:
    # Unusable bodies fall through to the same 400 as an unknown tier.
    try:
        return CreateCheckoutSessionRequest.model_validate_json(body or b"{}")
    except ValidationError as exc:
        logger.info("billing_router: unparseable_checkout_body errors=%s", exc.error_count())
        return CreateCheckoutSessionRequest()


@router.post(
    "/create-checkout-session",
    response_model=CreateCheckoutSessionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": CreateCheckoutSessionRequest.model_json_schema()}},
        }
    },
)
async def create_checkout_session(
    request: Request,
    checkout_variant: str = Depends(get_checkout_variant),
    use_case: CreateCheckoutSessionUseCase = Depends(get_create_checkout_session_use_case),
):
    req = _parse_checkout_request(await request.body())
    if checkout_variant == CHECKOUT_VARIANT_PRICE_ID:
        requested = req.price_id
        invalid_message = "Missing priceId"
    else:
        requested = req.tier
        invalid_message = "Invalid tier"

    try:
        output = await run_in_threadpool(
            use_case.execute,
            CreateCheckoutSessionInput(identifier_or_tier=requested),
        )
    except InvalidTierError as exc:
        logger.info("billing_router: invalid_checkout_request variant=%s detail=%s", checkout_variant, exc)
        return JSONResponse(status_code=400, content={"error": invalid_message})
    except ProviderUnavailableError:
        logger.exception("billing_router: checkout_session_failed variant=%s", checkout_variant)
        return JSONResponse(status_code=500, content={"error": "Failed to create session"})

    return CreateCheckoutSessionResponse(session_id=output.session_id)


@router.post(
    "/webhook",
    response_model=StripeWebhookResponse,
    responses={400: {"content": {"text/plain": {}}}},
)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    use_case: ProcessStripeWebhookUseCase = Depends(get_process_stripe_webhook_use_case),
):
    # Signature covers the exact bytes, so the body is never parsed here.
    payload = await request.body()
    try:
        # Dispatch handlers may block, keep them off the event loop.
        output = await run_in_threadpool(
            use_case.execute,
            StripeWebhookInput(signature=stripe_signature, payload=payload),
        )
    except SignatureInvalidError as exc:
        logger.warning("billing_router: webhook_verification_failed detail=%s", exc)
        return PlainTextResponse(f"Webhook Error: {exc}", status_code=400)

    logger.info(
        "billing_router: webhook_received event_type=%s handled=%s",
        output.event_type,
        output.handled,
    )
    return StripeWebhookResponse(received=True)
