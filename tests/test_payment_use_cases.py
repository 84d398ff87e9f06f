from __future__ import annotations

from decimal import Decimal

from betterlife.application.dto.billing import (
    PaymentRequest,
    ProviderCheckout,
    ProviderPaymentPayload,
    ProviderSubscriptionPayload,
    SubscriptionRequest,
)
from betterlife.application.use_cases.cancel_subscription import CancelSubscriptionUseCase
from betterlife.application.use_cases.create_payment import CreatePaymentUseCase
from betterlife.application.use_cases.create_subscription import CreateSubscriptionUseCase
from betterlife.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from betterlife.domain.entities.outcome import Failure, PaymentSuccess, SubscriptionSuccess
from betterlife.infrastructure.storage.key_value_store import InMemoryKeyValueStore
from betterlife.infrastructure.storage.pending_transaction_store import (
    KeyValuePendingTransactionStore,
)


ORIGIN = "https://app.betterlife.test"


class FakePaymentProvider:
    def __init__(
        self,
        *,
        error: Exception | None = None,
        status: str = "pending",
        owner_id: str = "mock-user-1",
    ):
        self.error = error
        self.status = status
        self.owner_id = owner_id
        self.payment_payloads: list[ProviderPaymentPayload] = []
        self.subscription_payloads: list[ProviderSubscriptionPayload] = []
        self.calls: list[str] = []

    def _checkout(self, provider_id: str) -> ProviderCheckout:
        return ProviderCheckout(
            id=provider_id,
            status=self.status,
            checkout_url=f"https://pay.test/checkout/{provider_id}",
            metadata={"userId": self.owner_id},
        )

    def create_payment(self, payload: ProviderPaymentPayload) -> ProviderCheckout:
        self.calls.append("create_payment")
        if self.error is not None:
            raise self.error
        self.payment_payloads.append(payload)
        return self._checkout("pay_1")

    def create_subscription(self, payload: ProviderSubscriptionPayload) -> ProviderCheckout:
        self.calls.append("create_subscription")
        if self.error is not None:
            raise self.error
        self.subscription_payloads.append(payload)
        return self._checkout("sub_1")

    def retrieve_payment(self, payment_id: str) -> ProviderCheckout:
        self.calls.append("retrieve_payment")
        if self.error is not None:
            raise self.error
        return self._checkout(payment_id)

    def retrieve_subscription(self, subscription_id: str) -> ProviderCheckout:
        self.calls.append("retrieve_subscription")
        if self.error is not None:
            raise self.error
        return self._checkout(subscription_id)

    def cancel_subscription(self, subscription_id: str) -> ProviderCheckout:
        self.calls.append("cancel_subscription")
        if self.error is not None:
            raise self.error
        return ProviderCheckout(
            id=subscription_id,
            status="canceled",
            checkout_url="",
            metadata={"userId": self.owner_id},
        )


def _payment_request(**overrides) -> PaymentRequest:
    values = {
        "amount": Decimal("15.00"),
        "currency": "KES",
        "description": "Expert Consultation",
        "customer_email": "wanjiru@example.com",
        "customer_name": "Wanjiru",
        "metadata": {"serviceId": "expert-consultation", "userId": "mock-user-1"},
    }
    values.update(overrides)
    return PaymentRequest(**values)


def test_create_payment_converts_to_minor_units_and_builds_redirects():
    provider = FakePaymentProvider()
    use_case = CreatePaymentUseCase(provider=provider)

    outcome = use_case.execute(_payment_request(), origin=ORIGIN + "/")

    assert outcome == PaymentSuccess(
        payment_id="pay_1",
        checkout_url="https://pay.test/checkout/pay_1",
        status="pending",
    )
    payload = provider.payment_payloads[0]
    assert payload.amount_minor == 1500
    assert payload.currency == "KES"
    assert payload.customer.email == "wanjiru@example.com"
    assert payload.customer.name == "Wanjiru"
    assert payload.metadata == {"serviceId": "expert-consultation", "userId": "mock-user-1"}
    assert payload.success_url == f"{ORIGIN}/payment/success"
    assert payload.cancel_url == f"{ORIGIN}/payment/cancel"


def test_create_payment_rounds_fractional_minor_units_half_up():
    provider = FakePaymentProvider()

    CreatePaymentUseCase(provider=provider).execute(_payment_request(amount=Decimal("9.995")), origin=ORIGIN)

    assert provider.payment_payloads[0].amount_minor == 1000


def test_create_payment_validation_failures_skip_provider():
    provider = FakePaymentProvider()
    use_case = CreatePaymentUseCase(provider=provider)

    for request in (
        _payment_request(amount=Decimal("0")),
        _payment_request(amount=Decimal("-5")),
        _payment_request(amount=Decimal("0.001")),
        _payment_request(currency="  "),
        _payment_request(customer_email=""),
    ):
        outcome = use_case.execute(request, origin=ORIGIN)
        assert isinstance(outcome, Failure)
        assert outcome.kind == "validation"
        assert outcome.reason

    assert provider.calls == []


def test_create_payment_provider_exception_becomes_failure_with_message():
    error = RuntimeError("Card declined")
    use_case = CreatePaymentUseCase(provider=FakePaymentProvider(error=error))

    outcome = use_case.execute(_payment_request(), origin=ORIGIN)

    assert outcome == Failure(reason="Card declined", kind="provider")
    assert outcome.cause is error


def test_create_payment_provider_exception_without_message_uses_default():
    use_case = CreatePaymentUseCase(provider=FakePaymentProvider(error=RuntimeError()))

    outcome = use_case.execute(_payment_request(), origin=ORIGIN)

    assert isinstance(outcome, Failure)
    assert outcome.reason == "Payment failed. Please try again."


def test_successful_payment_records_pending_transaction_until_terminal_status():
    pending = KeyValuePendingTransactionStore(InMemoryKeyValueStore())
    provider = FakePaymentProvider()

    CreatePaymentUseCase(provider=provider, pending_transactions=pending).execute(
        _payment_request(),
        origin=ORIGIN,
    )
    stored = pending.get("pay_1")

    assert stored is not None
    assert stored.kind == "payment"
    assert stored.reference == "expert-consultation"

    provider.status = "pending"
    status_use_case = GetPaymentStatusUseCase(provider=provider, pending_transactions=pending)
    status_use_case.execute("pay_1", user_id="mock-user-1")
    assert pending.get("pay_1") is not None

    provider.status = "succeeded"
    outcome = status_use_case.execute("pay_1", user_id="mock-user-1")
    assert isinstance(outcome, PaymentSuccess)
    assert outcome.status == "succeeded"
    assert pending.get("pay_1") is None


def test_get_payment_status_blank_id_and_provider_error():
    blank = GetPaymentStatusUseCase(provider=FakePaymentProvider()).execute("  ", user_id="mock-user-1")
    assert blank.kind == "validation"

    outcome = GetPaymentStatusUseCase(
        provider=FakePaymentProvider(error=LookupError("No such payment"))
    ).execute("pay_x", user_id="mock-user-1")

    assert outcome == Failure(reason="No such payment", kind="provider")


def test_create_subscription_resolves_plan_from_catalog():
    provider = FakePaymentProvider()
    use_case = CreateSubscriptionUseCase(provider=provider)

    outcome = use_case.execute(
        SubscriptionRequest(
            plan_id="premium",
            customer_email="wanjiru@example.com",
            customer_name="Wanjiru",
            metadata={"userId": "mock-user-1"},
        ),
        origin=ORIGIN,
    )

    assert isinstance(outcome, SubscriptionSuccess)
    assert outcome.subscription_id == "sub_1"
    payload = provider.subscription_payloads[0]
    assert payload.plan_id == "premium"
    assert payload.price_minor == 2999
    assert payload.currency == "KES"
    assert payload.interval == "month"
    assert payload.metadata == {"userId": "mock-user-1", "planName": "Premium Plan"}
    assert payload.success_url == f"{ORIGIN}/subscription/success"


def test_create_subscription_prices_follow_catalog_order():
    provider = FakePaymentProvider()
    use_case = CreateSubscriptionUseCase(provider=provider)

    for plan_id in ("basic", "premium", "pro"):
        use_case.execute(
            SubscriptionRequest(plan_id=plan_id, customer_email="a@b.co", customer_name="A"),
            origin=ORIGIN,
        )

    prices = [payload.price_minor for payload in provider.subscription_payloads]
    assert prices == sorted(prices)
    assert len(set(prices)) == 3


def test_create_subscription_unknown_plan_is_validation_failure():
    provider = FakePaymentProvider()

    outcome = CreateSubscriptionUseCase(provider=provider).execute(
        SubscriptionRequest(plan_id="gold", customer_email="a@b.co", customer_name="A"),
        origin=ORIGIN,
    )

    assert isinstance(outcome, Failure)
    assert outcome.kind == "validation"
    assert provider.calls == []


def test_cancel_subscription_wraps_provider_result():
    pending = KeyValuePendingTransactionStore(InMemoryKeyValueStore())
    provider = FakePaymentProvider()
    CreateSubscriptionUseCase(provider=provider, pending_transactions=pending).execute(
        SubscriptionRequest(plan_id="pro", customer_email="a@b.co", customer_name="A"),
        origin=ORIGIN,
    )

    outcome = CancelSubscriptionUseCase(provider=provider, pending_transactions=pending).execute(
        "sub_1",
        user_id="mock-user-1",
    )

    assert outcome == SubscriptionSuccess(subscription_id="sub_1", checkout_url="", status="canceled")
    assert pending.get("sub_1") is None


def test_cancel_subscription_provider_error_is_failure():
    outcome = CancelSubscriptionUseCase(
        provider=FakePaymentProvider(error=RuntimeError("Subscription not found: sub_9"))
    ).execute("sub_9", user_id="mock-user-1")

    assert isinstance(outcome, Failure)
    assert outcome.kind == "provider"
    assert "sub_9" in outcome.reason


def test_status_of_another_users_payment_is_not_found():
    provider = FakePaymentProvider(status="succeeded", owner_id="mock-user-2")
    pending = KeyValuePendingTransactionStore(InMemoryKeyValueStore())
    CreatePaymentUseCase(provider=provider, pending_transactions=pending).execute(
        _payment_request(),
        origin=ORIGIN,
    )

    outcome = GetPaymentStatusUseCase(provider=provider, pending_transactions=pending).execute(
        "pay_1",
        user_id="mock-user-1",
    )

    assert outcome == Failure(reason="Payment not found.", kind="validation")
    assert pending.get("pay_1") is not None


def test_cancel_of_another_users_subscription_never_reaches_provider():
    provider = FakePaymentProvider(owner_id="mock-user-2")

    outcome = CancelSubscriptionUseCase(provider=provider).execute("sub_1", user_id="mock-user-1")

    assert outcome == Failure(reason="Subscription not found.", kind="validation")
    assert provider.calls == ["retrieve_subscription"]
