from __future__ import annotations

from datetime import datetime
from typing import Protocol

from betterlife.application.dto.billing import PendingTransaction


class PendingTransactionPort(Protocol):
    def save(self, transaction: PendingTransaction) -> None:
        ...

    def get(self, provider_id: str) -> PendingTransaction | None:
        ...

    def remove(self, provider_id: str) -> None:
        ...

    def purge_expired(self, *, now: datetime) -> int:
        """Drop records older than the store's TTL; return how many went."""
        ...
