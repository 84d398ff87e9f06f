from __future__ import annotations

from pydantic import BaseModel


class PricingPlanResponse(BaseModel):
    id: str
    name: str
    price: int
    currency: str
    interval: str
    features: list[str]


class OneTimeServiceResponse(BaseModel):
    id: str
    name: str
    price: int
    currency: str
    description: str
