from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from betterlife.application.dto.billing import PendingTransaction, ProviderCheckout, TransactionKind
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort
from betterlife.domain.entities.outcome import Failure
from betterlife.domain.exceptions import BillingValidationError


logger = logging.getLogger(__name__)


TERMINAL_STATUSES = frozenset({"succeeded", "paid", "complete", "canceled", "failed", "expired"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_minor_units(amount: Decimal) -> int:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise BillingValidationError("Amount must be a number.") from exc
    if not value.is_finite() or value <= 0:
        raise BillingValidationError("Amount must be greater than zero.")
    minor = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minor <= 0:
        raise BillingValidationError("Amount is below the smallest currency unit.")
    return minor


def redirect_urls(origin: str, section: str) -> tuple[str, str]:
    base = origin.rstrip("/")
    return f"{base}/{section}/success", f"{base}/{section}/cancel"


def require_customer(email: str, name: str) -> tuple[str, str]:
    email = (email or "").strip()
    if not email:
        raise BillingValidationError("Please log in to continue.")
    return email, (name or "").strip()


def validation_failure(exc: BillingValidationError) -> Failure:
    return Failure(reason=str(exc), kind="validation", cause=exc)


def provider_failure(exc: Exception, *, operation: str, default_reason: str) -> Failure:
    logger.exception("billing: provider_error operation=%s error=%s", operation, exc)
    reason = str(exc).strip() or default_reason
    return Failure(reason=reason, kind="provider", cause=exc)


def ownership_failure(checkout: ProviderCheckout, user_id: str, *, not_found: str) -> Failure | None:
    """Return a Failure unless the record was created for ``user_id``.

    Foreign records are reported exactly like missing ones.
    """
    if checkout.metadata.get("userId") == user_id:
        return None
    logger.warning("billing: ownership_mismatch provider_id=%s user=%s", checkout.id, user_id)
    return Failure(reason=not_found, kind="validation")


def remember_pending(
    pending: PendingTransactionPort | None,
    *,
    checkout: ProviderCheckout,
    kind: TransactionKind,
    customer_email: str,
    reference: str,
) -> None:
    if pending is None:
        return
    try:
        pending.save(
            PendingTransaction(
                provider_id=checkout.id,
                kind=kind,
                customer_email=customer_email,
                reference=reference,
                created_at=utcnow(),
            )
        )
        pending.purge_expired(now=utcnow())
    except Exception as exc:  # noqa: BLE001
        logger.warning("billing: pending_save_failed provider_id=%s error=%s", checkout.id, exc)


def reconcile_pending(pending: PendingTransactionPort | None, checkout: ProviderCheckout) -> None:
    if pending is None or checkout.status.lower() not in TERMINAL_STATUSES:
        return
    try:
        pending.remove(checkout.id)
    except Exception as exc:  # noqa: BLE001
        logger.warning("billing: pending_remove_failed provider_id=%s error=%s", checkout.id, exc)
        return
    logger.info("billing: pending_reconciled provider_id=%s status=%s", checkout.id, checkout.status)
