from __future__ import annotations

from typing import Protocol

from betterlife.application.dto.billing import (
    ProviderCheckout,
    ProviderPaymentPayload,
    ProviderSubscriptionPayload,
)


class PaymentProviderPort(Protocol):
    def create_payment(self, payload: ProviderPaymentPayload) -> ProviderCheckout:
        ...

    def create_subscription(self, payload: ProviderSubscriptionPayload) -> ProviderCheckout:
        ...

    def retrieve_payment(self, payment_id: str) -> ProviderCheckout:
        ...

    def retrieve_subscription(self, subscription_id: str) -> ProviderCheckout:
        ...

    def cancel_subscription(self, subscription_id: str) -> ProviderCheckout:
        ...
