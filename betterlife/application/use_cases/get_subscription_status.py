from __future__ import annotations

from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort
from betterlife.domain.entities.outcome import SubscriptionOutcome, SubscriptionSuccess
from betterlife.domain.exceptions import BillingValidationError

from .billing_common import ownership_failure, provider_failure, reconcile_pending, validation_failure


class GetSubscriptionStatusUseCase:
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
            checkout = self._provider.retrieve_subscription(subscription_id)
        except Exception as exc:  # noqa: BLE001
            return provider_failure(
                exc,
                operation="retrieve_subscription",
                default_reason="Failed to get subscription status.",
            )

        failure = ownership_failure(checkout, user_id, not_found="Subscription not found.")
        if failure is not None:
            return failure

        reconcile_pending(self._pending, checkout)
        return SubscriptionSuccess(
            subscription_id=checkout.id,
            checkout_url=checkout.checkout_url,
            status=checkout.status,
        )
