from __future__ import annotations

import stripe

from betterlife.application.dto.billing import (
    ProviderCheckout,
    ProviderPaymentPayload,
    ProviderSubscriptionPayload,
)
from betterlife.application.ports.payment_provider_port import PaymentProviderPort
from betterlife.domain.exceptions import PaymentProviderError


class StripePaymentProvider(PaymentProviderPort):
    """Hosted Stripe Checkout with inline prices; ids are checkout session ids."""

    def __init__(self, *, secret_key: str):
        stripe.api_key = secret_key

    def create_payment(self, payload: ProviderPaymentPayload) -> ProviderCheckout:
        params = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": payload.currency.lower(),
                        "unit_amount": payload.amount_minor,
                        "product_data": {"name": payload.description or "Payment"},
                    },
                    "quantity": 1,
                }
            ],
            "customer_email": payload.customer.email,
            "success_url": payload.success_url,
            "cancel_url": payload.cancel_url,
            "metadata": {**payload.metadata, "customerName": payload.customer.name},
        }
        try:
            session = stripe.checkout.Session.create(**params)
        except Exception as exc:  # pragma: no cover - external API
            raise PaymentProviderError(_stripe_message(exc, "Failed to create Stripe payment.")) from exc
        return _session_checkout(session)

    def create_subscription(self, payload: ProviderSubscriptionPayload) -> ProviderCheckout:
        metadata = {**payload.metadata, "planId": payload.plan_id, "customerName": payload.customer.name}
        params = {
            "mode": "subscription",
            "line_items": [
                {
                    "price_data": {
                        "currency": payload.currency.lower(),
                        "unit_amount": payload.price_minor,
                        "recurring": {"interval": payload.interval},
                        "product_data": {"name": payload.plan_name},
                    },
                    "quantity": 1,
                }
            ],
            "customer_email": payload.customer.email,
            "success_url": payload.success_url,
            "cancel_url": payload.cancel_url,
            "metadata": metadata,
            "subscription_data": {"metadata": metadata},
        }
        try:
            session = stripe.checkout.Session.create(**params)
        except Exception as exc:  # pragma: no cover - external API
            raise PaymentProviderError(_stripe_message(exc, "Failed to create Stripe subscription.")) from exc
        return _session_checkout(session)

    def retrieve_payment(self, payment_id: str) -> ProviderCheckout:
        try:
            session = stripe.checkout.Session.retrieve(payment_id)
        except Exception as exc:  # pragma: no cover - external API
            raise PaymentProviderError(_stripe_message(exc, "Failed to get payment status.")) from exc
        return _session_checkout(session)

    def retrieve_subscription(self, subscription_id: str) -> ProviderCheckout:
        try:
            session = stripe.checkout.Session.retrieve(subscription_id)
            stripe_subscription_id = _get(session, "subscription")
            if not stripe_subscription_id:
                return _session_checkout(session)
            subscription = stripe.Subscription.retrieve(str(stripe_subscription_id))
        except Exception as exc:  # pragma: no cover - external API
            raise PaymentProviderError(_stripe_message(exc, "Failed to get subscription status.")) from exc
        return ProviderCheckout(
            id=subscription_id,
            status=str(_get(subscription, "status") or "unknown"),
            checkout_url=str(_get(session, "url") or ""),
            metadata=_metadata(session),
        )

    def cancel_subscription(self, subscription_id: str) -> ProviderCheckout:
        try:
            session = stripe.checkout.Session.retrieve(subscription_id)
            stripe_subscription_id = _get(session, "subscription")
            if not stripe_subscription_id:
                # Checkout never completed; expiring the session is the cancel.
                expired = stripe.checkout.Session.expire(subscription_id)
                return _session_checkout(expired)
            subscription = stripe.Subscription.cancel(str(stripe_subscription_id))
        except Exception as exc:  # pragma: no cover - external API
            raise PaymentProviderError(_stripe_message(exc, "Failed to cancel subscription.")) from exc
        return ProviderCheckout(
            id=subscription_id,
            status=str(_get(subscription, "status") or "canceled"),
            checkout_url=str(_get(session, "url") or ""),
            metadata=_metadata(session),
        )


def _get(obj, name: str):
    return getattr(obj, name, None)


def _session_checkout(session) -> ProviderCheckout:
    session_id = _get(session, "id")
    if not session_id:
        raise PaymentProviderError("Stripe checkout session response is incomplete.")
    status = _get(session, "status") or "open"
    if _get(session, "payment_status") == "paid":
        status = "paid"
    return ProviderCheckout(
        id=str(session_id),
        status=str(status),
        checkout_url=str(_get(session, "url") or ""),
        metadata=_metadata(session),
    )


def _metadata(session) -> dict[str, str]:
    metadata = _get(session, "metadata") or {}
    return {str(key): str(value) for key, value in metadata.items()}


def _stripe_message(exc: Exception, default: str) -> str:
    return str(getattr(exc, "user_message", None) or str(exc) or default)
