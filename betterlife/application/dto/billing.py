from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal


# Open string-keyed map. Known optional keys: serviceId, userId, planName.
Metadata = dict[str, str]

TransactionKind = Literal["payment", "subscription"]


def normalize_metadata(raw: dict | None) -> Metadata:
    if not raw:
        return {}
    return {str(key): str(value) for key, value in raw.items() if value is not None}


@dataclass(frozen=True)
class PaymentRequest:
    amount: Decimal
    currency: str
    description: str
    customer_email: str
    customer_name: str
    metadata: Metadata = field(default_factory=dict)


@dataclass(frozen=True)
class SubscriptionRequest:
    plan_id: str
    customer_email: str
    customer_name: str
    metadata: Metadata = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderCustomer:
    email: str
    name: str


@dataclass(frozen=True)
class ProviderPaymentPayload:
    amount_minor: int
    currency: str
    description: str
    customer: ProviderCustomer
    metadata: Metadata
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class ProviderSubscriptionPayload:
    plan_id: str
    plan_name: str
    price_minor: int
    currency: str
    interval: str
    customer: ProviderCustomer
    metadata: Metadata
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class ProviderCheckout:
    id: str
    status: str
    checkout_url: str
    metadata: Metadata = field(default_factory=dict)


@dataclass(frozen=True)
class PendingTransaction:
    provider_id: str
    kind: TransactionKind
    customer_email: str
    reference: str
    created_at: datetime
