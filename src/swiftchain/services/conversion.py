"""
INR to crypto conversion with SwiftChain's fee model.

A quote shows how much USDT/ETH the sender's rupees buy and what the
transfer costs:

- platform fee: a percentage of the fiat amount
- network fee: a fixed amount of the target asset, priced in fiat at the
  same rate used for the conversion

Fiat values are rounded half-up to 2 places, crypto values to 6.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from swiftchain.config import FeeSchedule
from swiftchain.core.errors import InvalidAmount, UnsupportedCurrency
from swiftchain.models.quote import ConversionFees, ConversionQuote
from swiftchain.services.rate_service import RateSource
from swiftchain.utils.helpers import MAX_AMOUNT, round_crypto, round_fiat, to_decimal

logger = logging.getLogger(__name__)

MIN_AMOUNT = Decimal("0.01")

# convertible currency -> rate source asset id
ASSET_IDS = {
    "USDT": "tether",
    "ETH": "ethereum",
}


def parse_amount(value: Any, minimum: Decimal = MIN_AMOUNT) -> Decimal:
    amount = to_decimal(value)
    if amount is None:
        raise InvalidAmount("Invalid amount. Amount must be a number.")
    if amount < minimum:
        raise InvalidAmount(f"Invalid amount. Amount must be at least ₹{minimum}.")
    if amount > MAX_AMOUNT:
        raise InvalidAmount(f"Invalid amount. Amount must not exceed ₹{MAX_AMOUNT:,}.")
    return amount


def parse_currency(value: Any) -> str:
    currency = str(value or "").strip().upper()
    if currency not in ASSET_IDS:
        raise UnsupportedCurrency(
            f"Invalid currency. Must be one of: {', '.join(sorted(ASSET_IDS))}."
        )
    return currency


class ConversionCalculator:
    def __init__(self, rate_source: RateSource, fees: Optional[FeeSchedule] = None):
        self.rate_source = rate_source
        self.fees = fees or FeeSchedule()

    def convert(self, fiat_amount: Any, target_currency: Any = "USDT") -> ConversionQuote:
        amount = parse_amount(fiat_amount)
        currency = parse_currency(target_currency)

        rate = self.rate_source.get_rate(ASSET_IDS[currency])
        quote = self.quote(amount, currency, rate.inr, is_fallback=rate.is_fallback, note=rate.note)
        logger.info(
            "Quoted %s INR -> %s %s at %s%s",
            amount,
            quote.converted_amount,
            currency,
            rate.inr,
            " (fallback rate)" if rate.is_fallback else "",
        )
        return quote

    def quote(
        self,
        amount: Decimal,
        currency: str,
        rate: Decimal,
        is_fallback: bool = False,
        note: Optional[str] = None,
    ) -> ConversionQuote:
        """Price ``amount`` INR in ``currency`` at ``rate`` INR per unit."""
        platform_fee = round_fiat(amount * self.fees.platform_fee_rate)
        network_fee = self.fees.network_fee_fixed[currency]
        network_fee_fiat = round_fiat(network_fee * rate)
        total_fee = platform_fee + network_fee_fiat

        return ConversionQuote(
            original_amount=amount,
            original_currency="INR",
            converted_amount=round_crypto(amount / rate),
            converted_currency=currency,
            exchange_rate=rate,
            fees=ConversionFees(
                platform_fee=platform_fee,
                network_fee=round_crypto(network_fee),
                network_fee_fiat=network_fee_fiat,
                total_fee=total_fee,
            ),
            net_amount=round_fiat(amount - total_fee),
            is_fallback_rate=is_fallback,
            note=note,
        )
