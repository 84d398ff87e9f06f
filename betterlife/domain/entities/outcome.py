from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


ErrorKind = Literal["validation", "provider", "transport"]


@dataclass(frozen=True)
class PaymentSuccess:
    payment_id: str
    checkout_url: str
    status: str


@dataclass(frozen=True)
class SubscriptionSuccess:
    subscription_id: str
    checkout_url: str
    status: str


@dataclass(frozen=True)
class Failure:
    """Recoverable failure with a user-facing reason.

    ``cause`` keeps the original exception for logs and never reaches the UI.
    """

    reason: str
    kind: ErrorKind
    cause: BaseException | None = field(default=None, compare=False, repr=False)


PaymentOutcome = Union[PaymentSuccess, Failure]
SubscriptionOutcome = Union[SubscriptionSuccess, Failure]
