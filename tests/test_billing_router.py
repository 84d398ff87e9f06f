from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from betterlife.api.deps import (
    get_cancel_subscription_use_case,
    get_create_payment_use_case,
    get_create_subscription_use_case,
    get_current_profile,
    get_optional_profile,
)
from betterlife.application.use_cases.cancel_subscription import CancelSubscriptionUseCase
from betterlife.application.use_cases.create_payment import CreatePaymentUseCase
from betterlife.application.use_cases.create_subscription import CreateSubscriptionUseCase
from betterlife.domain.entities.user import UserProfile
from betterlife.infrastructure.clients.demo_payment_provider import DemoPaymentProvider
from betterlife.main import app


PROFILE = UserProfile(id="mock-user-1", email="wanjiru@example.com", full_name="Wanjiru")


class RecordingCreatePaymentUseCase:
    def __init__(self, inner: CreatePaymentUseCase):
        self.inner = inner
        self.requests = []

    def execute(self, request, *, origin):
        self.requests.append((request, origin))
        return self.inner.execute(request, origin=origin)


@pytest.fixture
def provider():
    return DemoPaymentProvider(checkout_base="https://checkout.demo.test", delay_seconds=0)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_payment_requires_login(client, provider):
    app.dependency_overrides[get_optional_profile] = lambda: None
    app.dependency_overrides[get_create_payment_use_case] = lambda: CreatePaymentUseCase(provider=provider)

    response = client.post("/v1/payments", json={"amount": "15", "currency": "KES", "description": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == {"reason": "Please log in to make a payment", "kind": "validation"}


def test_service_payment_uses_catalog_price_and_user_metadata(client, provider):
    use_case = RecordingCreatePaymentUseCase(CreatePaymentUseCase(provider=provider))
    app.dependency_overrides[get_optional_profile] = lambda: PROFILE
    app.dependency_overrides[get_create_payment_use_case] = lambda: use_case

    response = client.post(
        "/v1/payments",
        json={"service_id": "expert-consultation"},
        headers={"Origin": "https://app.betterlife.test"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "pending"
    assert payload["checkout_url"].endswith(payload["payment_id"])
    request, origin = use_case.requests[0]
    assert origin == "https://app.betterlife.test"
    assert request.customer_email == "wanjiru@example.com"
    assert request.metadata["userId"] == "mock-user-1"
    assert request.metadata["serviceId"] == "expert-consultation"


def test_unknown_service_is_rejected(client, provider):
    app.dependency_overrides[get_optional_profile] = lambda: PROFILE
    app.dependency_overrides[get_create_payment_use_case] = lambda: CreatePaymentUseCase(provider=provider)

    response = client.post("/v1/payments", json={"service_id": "massage"})

    assert response.status_code == 400
    assert response.json()["detail"]["kind"] == "validation"


def test_invalid_amount_is_validation_failure(client, provider):
    app.dependency_overrides[get_optional_profile] = lambda: PROFILE
    app.dependency_overrides[get_create_payment_use_case] = lambda: CreatePaymentUseCase(provider=provider)

    response = client.post("/v1/payments", json={"amount": "0", "currency": "KES", "description": "x"})

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "Amount must be greater than zero."


def test_subscription_requires_login(client, provider):
    app.dependency_overrides[get_optional_profile] = lambda: None
    app.dependency_overrides[get_create_subscription_use_case] = (
        lambda: CreateSubscriptionUseCase(provider=provider)
    )

    response = client.post("/v1/subscriptions", json={"plan_id": "basic"})

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "Please log in to subscribe"


def test_subscribe_then_cancel(client, provider):
    app.dependency_overrides[get_optional_profile] = lambda: PROFILE
    app.dependency_overrides[get_current_profile] = lambda: PROFILE
    app.dependency_overrides[get_create_subscription_use_case] = (
        lambda: CreateSubscriptionUseCase(provider=provider)
    )
    app.dependency_overrides[get_cancel_subscription_use_case] = (
        lambda: CancelSubscriptionUseCase(provider=provider)
    )

    created = client.post("/v1/subscriptions", json={"plan_id": "pro"})
    subscription_id = created.json()["subscription_id"]
    canceled = client.post(f"/v1/subscriptions/{subscription_id}/cancel")

    assert created.status_code == 200
    assert subscription_id.startswith("sub_")
    assert canceled.status_code == 200
    assert canceled.json()["status"] == "canceled"


def test_other_user_cannot_cancel_subscription(client, provider):
    intruder = UserProfile(id="mock-user-2", email="mallory@example.com", full_name="Mallory")
    app.dependency_overrides[get_optional_profile] = lambda: PROFILE
    app.dependency_overrides[get_create_subscription_use_case] = (
        lambda: CreateSubscriptionUseCase(provider=provider)
    )
    app.dependency_overrides[get_cancel_subscription_use_case] = (
        lambda: CancelSubscriptionUseCase(provider=provider)
    )
    subscription_id = client.post("/v1/subscriptions", json={"plan_id": "pro"}).json()["subscription_id"]

    app.dependency_overrides[get_current_profile] = lambda: intruder
    response = client.post(f"/v1/subscriptions/{subscription_id}/cancel")

    assert response.status_code == 400
    assert response.json()["detail"] == {"reason": "Subscription not found.", "kind": "validation"}
    assert provider.retrieve_subscription(subscription_id).status == "pending"


def test_cancel_unknown_subscription_is_provider_failure(client, provider):
    app.dependency_overrides[get_current_profile] = lambda: PROFILE
    app.dependency_overrides[get_cancel_subscription_use_case] = (
        lambda: CancelSubscriptionUseCase(provider=provider)
    )

    response = client.post("/v1/subscriptions/sub_missing/cancel")

    assert response.status_code == 502
    assert response.json()["detail"]["kind"] == "provider"


def test_status_requires_bearer_token(client):
    response = client.get("/v1/payments/pay_1")

    assert response.status_code == 401
