from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from swiftchain.utils.helpers import isoformat, parse_isoformat, utc_now


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class TransactionRecord:
    """
    A crypto send being followed toward confirmation.

    Only ``TransactionTracker`` mutates a record, and only while holding its
    lock; callers receive snapshots via ``copy()``.
    """
    hash: str
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: str = "USDT"
    gas_used: Optional[str] = None
    gas_price: Optional[str] = None
    status: TransactionStatus = TransactionStatus.PENDING
    confirmations: int = 0
    block_number: Optional[int] = None
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def is_settled(self) -> bool:
        return self.status != TransactionStatus.PENDING

    def copy(self) -> "TransactionRecord":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "status": self.status.value,
            "from": self.from_address,
            "to": self.to_address,
            "amount": None if self.amount is None else str(self.amount),
            "currency": self.currency,
            "gasUsed": self.gas_used,
            "gasPrice": self.gas_price,
            "confirmations": self.confirmations,
            "blockNumber": self.block_number,
            "timestamp": isoformat(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionRecord":
        """Inverse of ``to_dict``, for API clients."""
        amount = data.get("amount")
        timestamp = data.get("timestamp")
        return cls(
            hash=data["hash"],
            from_address=data.get("from"),
            to_address=data.get("to"),
            amount=None if amount is None else Decimal(str(amount)),
            currency=data.get("currency", "USDT"),
            gas_used=data.get("gasUsed"),
            gas_price=data.get("gasPrice"),
            status=TransactionStatus(data.get("status", "pending")),
            confirmations=int(data.get("confirmations", 0)),
            block_number=data.get("blockNumber"),
            timestamp=parse_isoformat(timestamp) if timestamp else utc_now(),
        )
