from __future__ import annotations

import logging

from betterlife.application.dto.billing import (
    ProviderCustomer,
    ProviderSubscriptionPayload,
    SubscriptionRequest,
    normalize_metadata,
)
from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort
from betterlife.domain.entities.outcome import SubscriptionOutcome, SubscriptionSuccess
from betterlife.domain.exceptions import BillingValidationError
from betterlife.domain.services.catalog import get_plan

from .billing_common import (
    provider_failure,
    redirect_urls,
    remember_pending,
    require_customer,
    validation_failure,
)


logger = logging.getLogger(__name__)


class CreateSubscriptionUseCase:
    def __init__(
        self,
        *,
        provider: PaymentProviderPort,
        pending_transactions: PendingTransactionPort | None = None,
    ):
        self._provider = provider
        self._pending = pending_transactions

    def execute(self, request: SubscriptionRequest, *, origin: str) -> SubscriptionOutcome:
        try:
            email, name = require_customer(request.customer_email, request.customer_name)
            plan = get_plan(request.plan_id or "")
        except BillingValidationError as exc:
            return validation_failure(exc)

        metadata = normalize_metadata(request.metadata)
        metadata.setdefault("planName", plan.name)
        success_url, cancel_url = redirect_urls(origin, "subscription")
        payload = ProviderSubscriptionPayload(
            plan_id=plan.id,
            plan_name=plan.name,
            price_minor=plan.price,
            currency=plan.currency,
            interval=plan.interval,
            customer=ProviderCustomer(email=email, name=name),
            metadata=metadata,
            success_url=success_url,
            cancel_url=cancel_url,
        )

        try:
            checkout = self._provider.create_subscription(payload)
        except Exception as exc:  # noqa: BLE001
            return provider_failure(
                exc,
                operation="create_subscription",
                default_reason="Subscription failed. Please try again.",
            )

        remember_pending(
            self._pending,
            checkout=checkout,
            kind="subscription",
            customer_email=email,
            reference=plan.id,
        )
        logger.info("billing: subscription_created id=%s plan=%s", checkout.id, plan.id)
        return SubscriptionSuccess(
            subscription_id=checkout.id,
            checkout_url=checkout.checkout_url,
            status=checkout.status,
        )
