"""
HTTP client for the SwiftChain API.

Mirrors what the web front end does after a send: register the hash, then
poll its status every few seconds and give up after an overall timeout.
"""

from typing import Any, Dict, Optional

import requests

from swiftchain.models.transaction import TransactionRecord
from swiftchain.services.poller import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEOUT,
    PollOutcome,
    poll_until_settled,
)


class SwiftChainClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        resp = self.session.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        resp.raise_for_status()
        return resp.json()

    def convert(self, amount, currency: str = "USDT") -> Dict[str, Any]:
        return self._request("POST", "/convert", json={"amount": amount, "currency": currency})

    def fee_comparison(self, amount=None) -> Dict[str, Any]:
        params = {} if amount is None else {"amount": amount}
        return self._request("GET", "/fee-comparison", params=params)

    def register_transaction(self, tx_hash: str, **fields) -> TransactionRecord:
        data = self._request("POST", "/transactions/register", json={"hash": tx_hash, **fields})
        return TransactionRecord.from_dict(data["transaction"])

    def get_transaction(self, tx_hash: str) -> TransactionRecord:
        data = self._request("GET", f"/transactions/{tx_hash}")
        return TransactionRecord.from_dict(data["transaction"])

    def wait_for_confirmation(
        self,
        tx_hash: str,
        interval: float = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> PollOutcome:
        return poll_until_settled(self.get_transaction, tx_hash, interval=interval, timeout=timeout)

    def withdraw(self, amount, bank_details: Dict[str, str]) -> Dict[str, Any]:
        data = self._request(
            "POST", "/withdrawals", json={"amount": amount, "bankDetails": bank_details}
        )
        return data["withdrawal"]
