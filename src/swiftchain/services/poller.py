import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from swiftchain.models.transaction import TransactionRecord

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 3.0
DEFAULT_TIMEOUT = 120.0


@dataclass
class PollOutcome:
    record: Optional[TransactionRecord]
    timed_out: bool
    attempts: int


def poll_until_settled(
    fetch: Callable[[str], TransactionRecord],
    tx_hash: str,
    interval: float = DEFAULT_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollOutcome:
    """
    Call ``fetch(tx_hash)`` every ``interval`` seconds until the transaction
    leaves ``pending`` or ``timeout`` seconds have passed, whichever comes
    first. Errors raised by ``fetch`` propagate.

    The caller always gets control back: on timeout ``timed_out`` is True and
    ``record`` is the last state seen.
    """
    if interval <= 0:
        raise ValueError("interval must be positive.")

    deadline = clock() + timeout
    record: Optional[TransactionRecord] = None
    attempts = 0

    while True:
        record = fetch(tx_hash)
        attempts += 1
        if record.is_settled:
            return PollOutcome(record=record, timed_out=False, attempts=attempts)

        remaining = deadline - clock()
        if remaining <= 0:
            break
        sleep(min(interval, remaining))
        if clock() >= deadline:
            break

    logger.warning(
        "Stopped polling %s after %s attempts; last status %s",
        tx_hash,
        attempts,
        record.status.value,
    )
    return PollOutcome(record=record, timed_out=True, attempts=attempts)
