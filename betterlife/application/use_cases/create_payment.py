from __future__ import annotations

import logging

from betterlife.application.dto.billing import (
    PaymentRequest,
    ProviderCustomer,
    ProviderPaymentPayload,
    normalize_metadata,
)
from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort
from betterlife.domain.entities.outcome import PaymentOutcome, PaymentSuccess
from betterlife.domain.exceptions import BillingValidationError

from .billing_common import (
    provider_failure,
    redirect_urls,
    remember_pending,
    require_customer,
    to_minor_units,
    validation_failure,
)


logger = logging.getLogger(__name__)


class CreatePaymentUseCase:
    def __init__(
        self,
        *,
        provider: PaymentProviderPort,
        pending_transactions: PendingTransactionPort | None = None,
    ):
        self._provider = provider
        self._pending = pending_transactions

    def execute(self, request: PaymentRequest, *, origin: str) -> PaymentOutcome:
        try:
            email, name = require_customer(request.customer_email, request.customer_name)
            currency = (request.currency or "").strip()
            if not currency:
                raise BillingValidationError("Currency is required.")
            amount_minor = to_minor_units(request.amount)
        except BillingValidationError as exc:
            return validation_failure(exc)

        success_url, cancel_url = redirect_urls(origin, "payment")
        payload = ProviderPaymentPayload(
            amount_minor=amount_minor,
            currency=currency,
            description=request.description,
            customer=ProviderCustomer(email=email, name=name),
            metadata=normalize_metadata(request.metadata),
            success_url=success_url,
            cancel_url=cancel_url,
        )

        try:
            checkout = self._provider.create_payment(payload)
        except Exception as exc:  # noqa: BLE001
            return provider_failure(
                exc,
                operation="create_payment",
                default_reason="Payment failed. Please try again.",
            )

        remember_pending(
            self._pending,
            checkout=checkout,
            kind="payment",
            customer_email=email,
            reference=payload.metadata.get("serviceId", request.description),
        )
        logger.info(
            "billing: payment_created id=%s amount_minor=%s currency=%s",
            checkout.id,
            amount_minor,
            currency,
        )
        return PaymentSuccess(
            payment_id=checkout.id,
            checkout_url=checkout.checkout_url,
            status=checkout.status,
        )
