from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateCheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tier: str | None = None
    price_id: str | None = Field(default=None, alias="priceId")


class CreateCheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")


class ErrorResponse(BaseModel):
    error: str


class StripeWebhookResponse(BaseModel):
    received: bool = True
