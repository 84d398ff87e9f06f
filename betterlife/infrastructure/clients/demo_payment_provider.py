from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable
from uuid import uuid4

from betterlife.application.dto.billing import (
    ProviderCheckout,
    ProviderPaymentPayload,
    ProviderSubscriptionPayload,
)
from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.domain.exceptions import PaymentProviderError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoRecord:
    checkout: ProviderCheckout
    kind: str
    amount_minor: int
    currency: str
    customer_email: str


class DemoPaymentProvider(PaymentProviderPort):
    """In-memory payment simulator.

    Every create succeeds after ``delay_seconds`` with a fresh id; the
    checkout URL ends with that id.
    """

    def __init__(
        self,
        *,
        checkout_base: str,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._checkout_base = checkout_base.rstrip("/")
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._records: dict[str, DemoRecord] = {}
        self._lock = Lock()

    def create_payment(self, payload: ProviderPaymentPayload) -> ProviderCheckout:
        self._simulate_latency()
        checkout = self._new_checkout("pay", metadata=dict(payload.metadata))
        self._store(
            DemoRecord(
                checkout=checkout,
                kind="payment",
                amount_minor=payload.amount_minor,
                currency=payload.currency,
                customer_email=payload.customer.email,
            )
        )
        logger.info("demo_provider: payment_created id=%s amount_minor=%s", checkout.id, payload.amount_minor)
        return checkout

    def create_subscription(self, payload: ProviderSubscriptionPayload) -> ProviderCheckout:
        self._simulate_latency()
        checkout = self._new_checkout("sub", metadata={**payload.metadata, "planId": payload.plan_id})
        self._store(
            DemoRecord(
                checkout=checkout,
                kind="subscription",
                amount_minor=payload.price_minor,
                currency=payload.currency,
                customer_email=payload.customer.email,
            )
        )
        logger.info("demo_provider: subscription_created id=%s plan=%s", checkout.id, payload.plan_id)
        return checkout

    def retrieve_payment(self, payment_id: str) -> ProviderCheckout:
        return self._get(payment_id, kind="payment").checkout

    def retrieve_subscription(self, subscription_id: str) -> ProviderCheckout:
        return self._get(subscription_id, kind="subscription").checkout

    def cancel_subscription(self, subscription_id: str) -> ProviderCheckout:
        self._simulate_latency()
        with self._lock:
            record = self._records.get(subscription_id)
            if record is None or record.kind != "subscription":
                raise PaymentProviderError(f"Subscription not found: {subscription_id}")
            updated = replace(record, checkout=replace(record.checkout, status="canceled"))
            self._records[subscription_id] = updated
        return updated.checkout

    def complete(self, provider_id: str, *, status: str = "succeeded") -> ProviderCheckout:
        """Settle a record the way a completed hosted checkout would.

        Test helper: nothing in the service calls it, since demo checkouts
        never reach a real payment page.
        """
        with self._lock:
            record = self._records.get(provider_id)
            if record is None:
                raise PaymentProviderError(f"Record not found: {provider_id}")
            updated = replace(record, checkout=replace(record.checkout, status=status))
            self._records[provider_id] = updated
        return updated.checkout

    def checkout_id_from_url(self, checkout_url: str) -> str | None:
        """Test helper: recover the record id from a demo checkout URL."""
        prefix = f"{self._checkout_base}/checkout/"
        if not checkout_url.startswith(prefix):
            return None
        return checkout_url[len(prefix):] or None

    def _new_checkout(self, prefix: str, *, metadata: dict[str, str]) -> ProviderCheckout:
        checkout_id = f"{prefix}_{uuid4().hex[:24]}"
        return ProviderCheckout(
            id=checkout_id,
            status="pending",
            checkout_url=f"{self._checkout_base}/checkout/{checkout_id}",
            metadata=metadata,
        )

    def _store(self, record: DemoRecord) -> None:
        with self._lock:
            self._records[record.checkout.id] = record

    def _get(self, provider_id: str, *, kind: str) -> DemoRecord:
        with self._lock:
            record = self._records.get(provider_id)
        if record is None or record.kind != kind:
            raise PaymentProviderError(f"{kind.capitalize()} not found: {provider_id}")
        return record

    def _simulate_latency(self) -> None:
        if self._delay_seconds > 0:
            self._sleep(self._delay_seconds)
