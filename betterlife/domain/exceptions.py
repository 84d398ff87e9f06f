from __future__ import annotations

from typing import Literal


InferenceFailureCause = Literal["timeout", "network", "http_status", "malformed"]


class DomainError(Exception):
    """Base for domain errors."""


class BillingValidationError(DomainError):
    """Payment or subscription request rejected before reaching the provider."""


class PlanNotFoundError(BillingValidationError):
    """Plan id does not exist in the catalog."""


class PaymentProviderError(DomainError):
    """The payment provider failed to create, retrieve or cancel a record."""


class InferenceError(DomainError):
    """The inference endpoint gave no usable generated text."""

    def __init__(self, message: str, *, cause: InferenceFailureCause):
        super().__init__(message)
        self.cause = cause


class ChatSessionNotFoundError(DomainError):
    """Chat session is closed or never existed."""


class ChatSessionBusyError(DomainError):
    """A reply is already pending for this chat session."""