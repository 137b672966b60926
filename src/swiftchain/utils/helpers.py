import logging
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

FIAT_PLACES = Decimal("0.01")
CRYPTO_PLACES = Decimal("0.000001")
# largest accepted INR amount; keeps quantize() inside the default 28-digit context
MAX_AMOUNT = Decimal("1000000000000000")

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(ts: datetime) -> str:
    return ts.isoformat().replace("+00:00", "Z")


def parse_isoformat(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a JSON/query value into a Decimal, or None when it isn't a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        # floats go through str() so 0.1 stays 0.1
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def round_fiat(amount: Decimal) -> Decimal:
    return amount.quantize(FIAT_PLACES, rounding=ROUND_HALF_UP)


def round_crypto(amount: Decimal) -> Decimal:
    return amount.quantize(CRYPTO_PLACES, rounding=ROUND_HALF_UP)


def is_address(value) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_transaction(transaction_details):
    logging.getLogger("swiftchain.transactions").info(
        "Transaction logged: %s", transaction_details
    )
