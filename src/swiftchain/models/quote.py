# src/swiftchain/models/quote.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from swiftchain.utils.helpers import isoformat, utc_now


@dataclass(frozen=True)
class ConversionFees:
    platform_fee: Decimal          # fiat
    network_fee: Decimal           # crypto units
    network_fee_fiat: Decimal      # network_fee at the quote rate
    total_fee: Decimal             # fiat

    def to_dict(self) -> dict:
        return {
            "platformFee": str(self.platform_fee),
            "networkFee": str(self.network_fee),
            "networkFeeFiat": str(self.network_fee_fiat),
            "totalFee": str(self.total_fee),
        }


@dataclass(frozen=True)
class ConversionQuote:
    original_amount: Decimal
    original_currency: str
    converted_amount: Decimal
    converted_currency: str
    exchange_rate: Decimal
    fees: ConversionFees
    net_amount: Decimal
    is_fallback_rate: bool = False
    note: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        data = {
            "originalAmount": str(self.original_amount),
            "originalCurrency": self.original_currency,
            "convertedAmount": str(self.converted_amount),
            "convertedCurrency": self.converted_currency,
            "exchangeRate": str(self.exchange_rate),
            "fees": self.fees.to_dict(),
            "netAmount": str(self.net_amount),
            "isFallbackRate": self.is_fallback_rate,
            "timestamp": isoformat(self.timestamp),
        }
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class BankCostBreakdown:
    swift: Decimal
    currency_conversion: Decimal
    processing: Decimal
    total: Decimal


@dataclass(frozen=True)
class PlatformCostBreakdown:
    platform: Decimal
    network: Decimal
    total: Decimal


@dataclass(frozen=True)
class FeeComparisonReport:
    transfer_amount: Decimal
    traditional_bank: BankCostBreakdown
    platform: PlatformCostBreakdown
    savings: Decimal
    savings_percentage: Decimal
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def traditional_bank_cost(self) -> Decimal:
        return self.traditional_bank.total

    @property
    def platform_cost(self) -> Decimal:
        return self.platform.total

    def to_dict(self) -> dict:
        bank = self.traditional_bank
        return {
            "transferAmount": str(self.transfer_amount),
            "traditionalBank": {
                "fees": {
                    "swift": str(bank.swift),
                    "currencyConversion": str(bank.currency_conversion),
                    "processing": str(bank.processing),
                },
                "totalCost": str(bank.total),
            },
            "swiftChain": {
                "fees": {
                    "platform": str(self.platform.platform),
                    "network": str(self.platform.network),
                },
                "totalCost": str(self.platform.total),
            },
            "traditionalBankCost": str(self.traditional_bank_cost),
            "platformCost": str(self.platform_cost),
            "savings": str(self.savings),
            "savingsPercentage": str(self.savings_percentage),
            "timestamp": isoformat(self.timestamp),
        }
