from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from swiftchain.utils.helpers import isoformat, utc_now


class WithdrawalStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BankDetails:
    account_number: str
    ifsc_code: str
    account_holder: str

    def to_dict(self) -> dict:
        return {
            "accountNumber": self.account_number,
            "ifscCode": self.ifsc_code,
            "accountHolder": self.account_holder,
        }


@dataclass
class WithdrawalRequest:
    id: str
    amount: Decimal
    bank_details: BankDetails
    fee: Decimal
    currency: str = "INR"
    status: WithdrawalStatus = WithdrawalStatus.PROCESSING
    estimated_time: str = "2-3 business days"
    timestamp: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None

    def copy(self) -> "WithdrawalRequest":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "currency": self.currency,
            "bankDetails": self.bank_details.to_dict(),
            "status": self.status.value,
            "fee": str(self.fee),
            "estimatedTime": self.estimated_time,
            "timestamp": isoformat(self.timestamp),
            "completedAt": isoformat(self.completed_at) if self.completed_at else None,
        }
