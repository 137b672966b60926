import os
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict


def _env(name, default):
    return os.environ.get(f"SWIFTCHAIN_{name}", default)


class Config:
    RATE_API_URL = _env("RATE_API_URL", "https://api.coingecko.com/api/v3")
    RATE_API_TIMEOUT = float(_env("RATE_API_TIMEOUT", "10"))  # seconds
    CONFIRMATION_THRESHOLD = int(_env("CONFIRMATION_THRESHOLD", "12"))
    WITHDRAWAL_DELAY = float(_env("WITHDRAWAL_DELAY", "5"))  # seconds until completed
    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    DEBUG = _env("DEBUG", "false").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class FeeSchedule:
    """
    Business rules for platform and bank pricing.

    Rates are fractions (0.01 == 1 %). Network fees are expressed in units
    of the crypto asset and converted to fiat at quote time.
    """
    platform_fee_rate: Decimal = Decimal("0.01")
    network_fee_fixed: Dict[str, Decimal] = field(
        default_factory=lambda: {"USDT": Decimal("0.5"), "ETH": Decimal("0.001")}
    )
    bank_swift_rate: Decimal = Decimal("0.05")
    bank_spread_rate: Decimal = Decimal("0.03")
    bank_flat_fee: Decimal = Decimal("500")
    # INR per USDT used by the fee comparison, independent of live rates
    reference_rate: Decimal = Decimal("83")
    withdrawal_fee_rate: Decimal = Decimal("0.005")
