from __future__ import annotations

from decimal import Decimal
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException

from betterlife.api.deps import (
    get_cancel_subscription_use_case,
    get_create_payment_use_case,
    get_create_subscription_use_case,
    get_current_profile,
    get_optional_profile,
    get_payment_status_use_case,
    get_request_origin,
    get_subscription_status_use_case,
)
from betterlife.api.schemas.billing import (
    CreatePaymentRequest,
    CreateSubscriptionRequest,
    PaymentResponse,
    SubscriptionResponse,
)
from betterlife.application.dto.billing import PaymentRequest, SubscriptionRequest
from betterlife.application.use_cases.cancel_subscription import CancelSubscriptionUseCase
from betterlife.application.use_cases.create_payment import CreatePaymentUseCase
from betterlife.application.use_cases.create_subscription import CreateSubscriptionUseCase
from betterlife.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from betterlife.application.use_cases.get_subscription_status import GetSubscriptionStatusUseCase
from betterlife.domain.entities.outcome import Failure, PaymentOutcome, SubscriptionOutcome
from betterlife.domain.entities.user import UserProfile
from betterlife.domain.services.catalog import get_service


router = APIRouter()

FAILURE_STATUS = {"validation": 400, "provider": 502, "transport": 502}


def _raise_failure(failure: Failure) -> NoReturn:
    raise HTTPException(
        status_code=FAILURE_STATUS.get(failure.kind, 400),
        detail={"reason": failure.reason, "kind": failure.kind},
    )


def _payment_response(outcome: PaymentOutcome) -> PaymentResponse:
    if isinstance(outcome, Failure):
        _raise_failure(outcome)
    return PaymentResponse(
        payment_id=outcome.payment_id,
        checkout_url=outcome.checkout_url,
        status=outcome.status,
    )


def _subscription_response(outcome: SubscriptionOutcome) -> SubscriptionResponse:
    if isinstance(outcome, Failure):
        _raise_failure(outcome)
    return SubscriptionResponse(
        subscription_id=outcome.subscription_id,
        checkout_url=outcome.checkout_url,
        status=outcome.status,
    )


def _login_required(message: str) -> NoReturn:
    _raise_failure(Failure(reason=message, kind="validation"))


@router.post("/v1/payments", response_model=PaymentResponse)
def create_payment(
    req: CreatePaymentRequest,
    profile: UserProfile | None = Depends(get_optional_profile),
    origin: str = Depends(get_request_origin),
    use_case: CreatePaymentUseCase = Depends(get_create_payment_use_case),
):
    if profile is None:
        _login_required("Please log in to make a payment")

    metadata = dict(req.metadata)
    metadata["userId"] = profile.id
    amount, currency, description = req.amount, req.currency, req.description
    if req.service_id:
        service = get_service(req.service_id)
        if service is None:
            _raise_failure(Failure(reason=f"Unknown service: {req.service_id}", kind="validation"))
        amount = Decimal(service.price) / Decimal(100)
        currency = service.currency
        description = service.description
        metadata["serviceId"] = service.id

    outcome = use_case.execute(
        PaymentRequest(
            amount=amount,
            currency=currency or "",
            description=description or "",
            customer_email=profile.email,
            customer_name=profile.full_name,
            metadata=metadata,
        ),
        origin=origin,
    )
    return _payment_response(outcome)


@router.get("/v1/payments/{payment_id}", response_model=PaymentResponse)
def get_payment_status(
    payment_id: str,
    profile: UserProfile = Depends(get_current_profile),
    use_case: GetPaymentStatusUseCase = Depends(get_payment_status_use_case),
):
    return _payment_response(use_case.execute(payment_id, user_id=profile.id))


@router.post("/v1/subscriptions", response_model=SubscriptionResponse)
def create_subscription(
    req: CreateSubscriptionRequest,
    profile: UserProfile | None = Depends(get_optional_profile),
    origin: str = Depends(get_request_origin),
    use_case: CreateSubscriptionUseCase = Depends(get_create_subscription_use_case),
):
    if profile is None:
        _login_required("Please log in to subscribe")

    outcome = use_case.execute(
        SubscriptionRequest(
            plan_id=req.plan_id,
            customer_email=profile.email,
            customer_name=profile.full_name,
            metadata={**req.metadata, "userId": profile.id},
        ),
        origin=origin,
    )
    return _subscription_response(outcome)


@router.get("/v1/subscriptions/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription_status(
    subscription_id: str,
    profile: UserProfile = Depends(get_current_profile),
    use_case: GetSubscriptionStatusUseCase = Depends(get_subscription_status_use_case),
):
    return _subscription_response(use_case.execute(subscription_id, user_id=profile.id))


@router.post("/v1/subscriptions/{subscription_id}/cancel", response_model=SubscriptionResponse)
def cancel_subscription(
    subscription_id: str,
    profile: UserProfile = Depends(get_current_profile),
    use_case: CancelSubscriptionUseCase = Depends(get_cancel_subscription_use_case),
):
    return _subscription_response(use_case.execute(subscription_id, user_id=profile.id))
