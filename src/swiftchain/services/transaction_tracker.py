"""
Transaction tracker for crypto sends.

Follows a submitted transaction hash toward confirmation. Confirmation is
simulated: every status poll of a pending transaction counts as one more
confirmation, and once the threshold is reached the transaction is marked
confirmed and given a synthetic block number.

Reads through ``poll`` therefore change state. Use ``get`` for a read that
does not advance the counter.

The store is an explicit object (empty on creation, dropped with the
process) so the API layer can inject it instead of sharing a module global.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Dict, List, Optional

from swiftchain.config import Config
from swiftchain.core.errors import DuplicateHash, InvalidAmount, MissingField, NotFound
from swiftchain.models.transaction import TransactionRecord, TransactionStatus
from swiftchain.utils.helpers import log_transaction, to_decimal

logger = logging.getLogger(__name__)

BLOCK_NUMBER_MIN = 1_000_000
BLOCK_NUMBER_MAX = 2_000_000


class TransactionTracker:
    def __init__(
        self,
        confirmation_threshold: int = Config.CONFIRMATION_THRESHOLD,
        rng: Optional[random.Random] = None,
    ) -> None:
        if confirmation_threshold < 1:
            raise ValueError("confirmation_threshold must be at least 1.")
        self.confirmation_threshold = confirmation_threshold
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._transactions: Dict[str, TransactionRecord] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def register(self, tx_hash: str, **fields: Any) -> TransactionRecord:
        """
        Start tracking ``tx_hash`` as a pending transaction.

        ``fields`` may carry from_address, to_address, amount, currency,
        gas_used and gas_price. Unknown keys are rejected by the record.
        """
        tx_hash = (tx_hash or "").strip()
        if not tx_hash:
            raise MissingField("hash")

        if fields.get("amount") is not None:
            amount = to_decimal(fields["amount"])
            if amount is None:
                raise InvalidAmount("Invalid amount. Amount must be a number.")
            fields["amount"] = amount
        record = TransactionRecord(hash=tx_hash, **fields)

        with self._lock:
            if tx_hash in self._transactions:
                raise DuplicateHash(f"Transaction {tx_hash} is already tracked.")
            self._transactions[tx_hash] = record
            snapshot = record.copy()

        log_transaction({"hash": tx_hash, "status": snapshot.status.value})
        return snapshot

    def poll(self, tx_hash: str) -> TransactionRecord:
        """
        Return the current state of ``tx_hash``, advancing it by one confirmation
        if it is still pending.
        """
        with self._lock:
            record = self._get_locked(tx_hash)
            if record.status == TransactionStatus.PENDING:
                record.confirmations = min(
                    record.confirmations + 1, self.confirmation_threshold
                )
                if record.confirmations >= self.confirmation_threshold:
                    record.status = TransactionStatus.CONFIRMED
                    record.block_number = self._rng.randrange(
                        BLOCK_NUMBER_MIN, BLOCK_NUMBER_MAX
                    )
                    logger.info(
                        "Transaction %s confirmed in block %s", tx_hash, record.block_number
                    )
            return record.copy()

    def get(self, tx_hash: str) -> TransactionRecord:
        with self._lock:
            return self._get_locked(tx_hash).copy()

    def mark_failed(self, tx_hash: str) -> TransactionRecord:
        """
        Record an externally reported failure.

        Only pending transactions can fail; settled ones are returned as-is.
        """
        with self._lock:
            record = self._get_locked(tx_hash)
            if record.status == TransactionStatus.PENDING:
                record.status = TransactionStatus.FAILED
                logger.info("Transaction %s marked failed", tx_hash)
            return record.copy()

    def list_transactions(self) -> List[TransactionRecord]:
        with self._lock:
            return [record.copy() for record in self._transactions.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def _get_locked(self, tx_hash: str) -> TransactionRecord:
        record = self._transactions.get(tx_hash)
        if record is None:
            raise NotFound(f"Transaction {tx_hash} not found.")
        return record
