from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class CreatePaymentRequest(BaseModel):
    service_id: str | None = Field(default=None, max_length=64)
    amount: Decimal | None = None
    currency: str | None = Field(default=None, max_length=8)
    description: str | None = Field(default=None, max_length=500)
    metadata: dict[str, str] = Field(default_factory=dict)


class CreateSubscriptionRequest(BaseModel):
    plan_id: str = Field(..., min_length=1, max_length=64)
    metadata: dict[str, str] = Field(default_factory=dict)


class PaymentResponse(BaseModel):
    payment_id: str
    checkout_url: str
    status: str


class SubscriptionResponse(BaseModel):
    subscription_id: str
    checkout_url: str
    status: str
