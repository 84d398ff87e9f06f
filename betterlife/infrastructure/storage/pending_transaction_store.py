from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta

from betterlife.application.dto.billing import PendingTransaction
from betterlife.application.ports.key_value_store_port import KeyValueStorePort
from betterlife.application.ports.pending_transaction_port import PendingTransactionPort


logger = logging.getLogger(__name__)


KEY_PREFIX = "pending-transaction:"


class KeyValuePendingTransactionStore(PendingTransactionPort):
    def __init__(self, store: KeyValueStorePort, *, ttl: timedelta = timedelta(hours=24)):
        self._store = store
        self._ttl = ttl

    def save(self, transaction: PendingTransaction) -> None:
        self._store.set(
            KEY_PREFIX + transaction.provider_id,
            json.dumps(
                {
                    "provider_id": transaction.provider_id,
                    "kind": transaction.kind,
                    "customer_email": transaction.customer_email,
                    "reference": transaction.reference,
                    "created_at": transaction.created_at.isoformat(),
                }
            ),
        )

    def get(self, provider_id: str) -> PendingTransaction | None:
        raw = self._store.get(KEY_PREFIX + provider_id)
        if raw is None:
            return None
        return _load(raw)

    def remove(self, provider_id: str) -> None:
        self._store.remove(KEY_PREFIX + provider_id)

    def purge_expired(self, *, now: datetime) -> int:
        cutoff = now - self._ttl
        purged = 0
        for key in self._store.keys(KEY_PREFIX):
            raw = self._store.get(key)
            if raw is None:
                continue
            try:
                expired = _load(raw).created_at < cutoff
            except (KeyError, TypeError, ValueError):
                logger.warning("pending_store: unreadable_record key=%s, dropping", key)
                expired = True
            if expired:
                self._store.remove(key)
                purged += 1
        if purged:
            logger.info("pending_store: purged count=%s cutoff=%s", purged, cutoff.isoformat())
        return purged


def _load(raw: str) -> PendingTransaction:
    data = json.loads(raw)
    return PendingTransaction(
        provider_id=data["provider_id"],
        kind=data["kind"],
        customer_email=data["customer_email"],
        reference=data["reference"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )
