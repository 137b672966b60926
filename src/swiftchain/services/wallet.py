# src/swiftchain/services/wallet.py
"""
Wallet connector seam.

Real deployments sign and broadcast through a browser wallet or an RPC
provider; this module only defines the capability the rest of the system
relies on and ships a demo connector that fabricates Sepolia-style
transactions without touching a chain.
"""

import logging
import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Protocol

from swiftchain.core.errors import (
    InsufficientBalance,
    InvalidAddress,
    InvalidAmount,
    UnsupportedCurrency,
)
from swiftchain.utils.helpers import is_address, to_decimal

logger = logging.getLogger(__name__)

SEPOLIA_CHAIN_ID = 11155111
DEFAULT_GAS_LIMIT = "21000"
DEFAULT_GAS_PRICE = "20000000000"  # 20 gwei in wei


@dataclass(frozen=True)
class SendReceipt:
    hash: str
    from_address: str
    to_address: str
    amount: Decimal
    asset: str
    gas_used: str = DEFAULT_GAS_LIMIT
    gas_price: str = DEFAULT_GAS_PRICE
    chain_id: int = SEPOLIA_CHAIN_ID


class WalletConnector(Protocol):
    def connect(self) -> str:
        ...

    def get_balance(self, address: str, asset: str) -> Decimal:
        ...

    def send_transaction(self, to: str, amount, asset: str) -> SendReceipt:
        ...


class MockWalletConnector:
    """
    Demo wallet with fixed balances.

    Every address reports the same balances; sends are checked against the
    connected account's balance but never debit it.
    """

    DEFAULT_BALANCES = {"USDT": Decimal("1000"), "ETH": Decimal("0.5")}

    def __init__(
        self,
        address: Optional[str] = None,
        balances: Optional[Dict[str, Decimal]] = None,
    ):
        self.address = address or "0x" + secrets.token_hex(20)
        self.balances = dict(balances or self.DEFAULT_BALANCES)

    def connect(self) -> str:
        return self.address

    def get_balance(self, address: str, asset: str) -> Decimal:
        if not is_address(address):
            raise InvalidAddress(f"Invalid Ethereum address: {address}")
        asset = str(asset or "").upper()
        if asset not in self.balances:
            raise UnsupportedCurrency(f"Unsupported asset: {asset}")
        return self.balances[asset]

    def send_transaction(self, to: str, amount, asset: str = "USDT") -> SendReceipt:
        if not is_address(to):
            raise InvalidAddress(f"Invalid Ethereum address: {to}")
        value = to_decimal(amount)
        if value is None or value <= 0:
            raise InvalidAmount("Invalid amount. Amount must be a positive number.")
        balance = self.get_balance(self.address, asset)
        if value > balance:
            raise InsufficientBalance(
                f"Insufficient {str(asset).upper()} balance: {balance} < {value}"
            )

        receipt = SendReceipt(
            hash="0x" + secrets.token_hex(32),
            from_address=self.address,
            to_address=to,
            amount=value,
            asset=str(asset).upper(),
        )
        logger.info("Mock send %s %s to %s: %s", value, receipt.asset, to, receipt.hash)
        return receipt
