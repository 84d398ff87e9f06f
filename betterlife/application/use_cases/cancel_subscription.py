from __future__ import annotations

import logging

from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort
from betterlife.domain.entities.outcome import SubscriptionOutcome, SubscriptionSuccess
from betterlife.domain.exceptions import BillingValidationError

from .billing_common import ownership_failure, provider_failure, reconcile_pending, validation_failure


logger = logging.getLogger(__name__)


class CancelSubscriptionUseCase:
    def __init__(
        self,
        *,
        provider: PaymentProviderPort,
        pending_transactions: PendingTransactionPort | None = None,
    ):
        self._provider = provider
        self._pending = pending_transactions

    def execute(self, subscription_id: str, *, user_id: str) -> SubscriptionOutcome:
        subscription_id = (subscription_id or "").strip()
        if not subscription_id:
            return validation_failure(BillingValidationError("Subscription id is required."))

        try:
            current = self._provider.retrieve_subscription(subscription_id)
        except Exception as exc:  # noqa: BLE001
            return provider_failure(
                exc,
                operation="retrieve_subscription",
                default_reason="Failed to cancel subscription.",
            )

        failure = ownership_failure(current, user_id, not_found="Subscription not found.")
        if failure is not None:
            return failure

        try:
            checkout = self._provider.cancel_subscription(subscription_id)
        except Exception as exc:  # noqa: BLE001
            return provider_failure(
                exc,
                operation="cancel_subscription",
                default_reason="Failed to cancel subscription.",
            )

        reconcile_pending(self._pending, checkout)
        logger.info("billing: subscription_canceled id=%s status=%s", checkout.id, checkout.status)
        return SubscriptionSuccess(
            subscription_id=checkout.id,
            checkout_url=checkout.checkout_url,
            status=checkout.status,
        )
