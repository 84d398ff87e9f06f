from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


PlanInterval = Literal["month"]


@dataclass(frozen=True)
class PricingPlan:
    id: str
    name: str
    price: int
    currency: str
    interval: PlanInterval
    features: tuple[str, ...]


@dataclass(frozen=True)
class OneTimeService:
    id: str
    name: str
    price: int
    currency: str
    description: str
