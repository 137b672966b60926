import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from swiftchain.config import FeeSchedule
from swiftchain.core.errors import InvalidAmount
from swiftchain.models.quote import (
    BankCostBreakdown,
    FeeComparisonReport,
    PlatformCostBreakdown,
)
from swiftchain.utils.helpers import MAX_AMOUNT, round_fiat, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_TRANSFER_AMOUNT = Decimal("10000")
PERCENT_PLACES = Decimal("0.1")


class FeeComparator:
    """
    Compares a SWIFT-style bank transfer with a SwiftChain transfer.

    The platform's network fee is priced at the schedule's fixed
    ``reference_rate`` so reports stay stable when live rates move.
    """

    def __init__(self, fees: Optional[FeeSchedule] = None):
        self.fees = fees or FeeSchedule()

    def compare(self, amount: Any = None) -> FeeComparisonReport:
        transfer_amount = self._parse(amount)
        fees = self.fees

        swift = transfer_amount * fees.bank_swift_rate
        spread = transfer_amount * fees.bank_spread_rate
        bank_total = swift + spread + fees.bank_flat_fee

        platform = transfer_amount * fees.platform_fee_rate
        network = fees.network_fee_fixed["USDT"] * fees.reference_rate
        platform_total = platform + network

        savings = bank_total - platform_total
        if bank_total == 0:
            percentage = Decimal("0.0")
        else:
            percentage = (savings / bank_total * 100).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)

        report = FeeComparisonReport(
            transfer_amount=transfer_amount,
            traditional_bank=BankCostBreakdown(
                swift=round_fiat(swift),
                currency_conversion=round_fiat(spread),
                processing=round_fiat(fees.bank_flat_fee),
                total=round_fiat(bank_total),
            ),
            platform=PlatformCostBreakdown(
                platform=round_fiat(platform),
                network=round_fiat(network),
                total=round_fiat(platform_total),
            ),
            savings=round_fiat(savings),
            savings_percentage=percentage,
        )
        logger.debug("Fee comparison for %s INR: saves %s", transfer_amount, report.savings)
        return report

    @staticmethod
    def _parse(amount: Any) -> Decimal:
        if amount is None or amount == "":
            return DEFAULT_TRANSFER_AMOUNT
        value = to_decimal(amount)
        if value is None or value < 0:
            raise InvalidAmount("Invalid amount. Amount must be a non-negative number.")
        if value > MAX_AMOUNT:
            raise InvalidAmount(f"Invalid amount. Amount must not exceed ₹{MAX_AMOUNT:,}.")
        return value
