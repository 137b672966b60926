import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional

from swiftchain.config import Config, FeeSchedule
from swiftchain.core.errors import InvalidAmount, MissingField, NotFound
from swiftchain.models.withdrawal import BankDetails, WithdrawalRequest, WithdrawalStatus
from swiftchain.utils.helpers import MAX_AMOUNT, round_fiat, to_decimal, utc_now

logger = logging.getLogger(__name__)

BANK_FIELDS = (
    ("account_number", "accountNumber"),
    ("ifsc_code", "ifscCode"),
    ("account_holder", "accountHolder"),
)


def parse_bank_details(raw: Optional[Mapping[str, Any]]) -> BankDetails:
    """Accepts either snake_case or the API's camelCase keys."""
    if not raw:
        raise MissingField("bankDetails")
    values = {}
    for name, alias in BANK_FIELDS:
        value = raw.get(name, raw.get(alias))
        if value is None or not str(value).strip():
            raise MissingField(alias)
        values[name] = str(value).strip()
    return BankDetails(**values)


class WithdrawalSimulator:
    """
    Simulated INR bank payout.

    A submitted withdrawal starts ``processing`` and a background timer moves
    it to ``completed`` after ``delay`` seconds; nobody has to poll for that
    to happen.
    """

    def __init__(
        self,
        delay: float = Config.WITHDRAWAL_DELAY,
        fees: Optional[FeeSchedule] = None,
    ):
        self.delay = delay
        self.fees = fees or FeeSchedule()
        self._lock = threading.Lock()
        self._withdrawals: Dict[str, WithdrawalRequest] = {}
        self._timers: Dict[str, threading.Timer] = {}

    def submit(self, amount: Any, bank_details: Optional[Mapping[str, Any]]) -> WithdrawalRequest:
        if amount is None or amount == "":
            raise MissingField("amount")
        value = to_decimal(amount)
        if value is None or value <= 0:
            raise InvalidAmount("Invalid amount. Amount must be a positive number.")
        if value > MAX_AMOUNT:
            raise InvalidAmount(f"Invalid amount. Amount must not exceed ₹{MAX_AMOUNT:,}.")
        details = parse_bank_details(bank_details)

        fee = round_fiat(value * self.fees.withdrawal_fee_rate)

        with self._lock:
            withdrawal = WithdrawalRequest(
                id=self._next_id_locked(),
                amount=value,
                bank_details=details,
                fee=fee,
            )
            timer = threading.Timer(self.delay, self._complete, args=(withdrawal.id,))
            timer.daemon = True
            self._withdrawals[withdrawal.id] = withdrawal
            self._timers[withdrawal.id] = timer
            snapshot = withdrawal.copy()
        timer.start()

        logger.info("Withdrawal %s of %s INR submitted", withdrawal.id, value)
        return snapshot

    def get(self, withdrawal_id: str) -> WithdrawalRequest:
        with self._lock:
            withdrawal = self._withdrawals.get(withdrawal_id)
            if withdrawal is None:
                raise NotFound(f"Withdrawal {withdrawal_id} not found.")
            return withdrawal.copy()

    def list_withdrawals(self) -> List[WithdrawalRequest]:
        with self._lock:
            return [w.copy() for w in self._withdrawals.values()]

    def shutdown(self) -> None:
        """Cancel timers that have not fired yet."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _complete(self, withdrawal_id: str) -> None:
        with self._lock:
            self._timers.pop(withdrawal_id, None)
            withdrawal = self._withdrawals.get(withdrawal_id)
            if withdrawal is None or withdrawal.status == WithdrawalStatus.COMPLETED:
                return
            withdrawal.status = WithdrawalStatus.COMPLETED
            withdrawal.completed_at = utc_now()
        logger.info("Withdrawal %s completed", withdrawal_id)

    def _next_id_locked(self) -> str:
        # WD + epoch millis, bumped on collision within the same millisecond
        millis = int(time.time() * 1000)
        while f"WD{millis}" in self._withdrawals:
            millis += 1
        return f"WD{millis}"
