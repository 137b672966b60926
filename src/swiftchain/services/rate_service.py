# src/swiftchain/services/rate_service.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional, Protocol

import requests

from swiftchain.config import Config
from swiftchain.core.errors import UnsupportedCurrency, UpstreamUnavailable
from swiftchain.utils.helpers import isoformat, to_decimal, utc_now

logger = logging.getLogger(__name__)

FALLBACK_NOTE = "Using fallback rates due to API connectivity issues"

# HTTP statuses that mean "try again later" rather than "your request is wrong"
RECOVERABLE_STATUSES = frozenset({403, 429})

DEFAULT_ASSETS = ("tether", "bitcoin", "ethereum")

FALLBACK_RATES: Dict[str, Dict[str, Decimal]] = {
    "tether": {"inr": Decimal("83"), "usd": Decimal("1")},
    "bitcoin": {"inr": Decimal("2500000"), "usd": Decimal("30000")},
    "ethereum": {"inr": Decimal("150000"), "usd": Decimal("1800")},
}


@dataclass(frozen=True)
class RateQuote:
    asset_id: str
    inr: Decimal
    usd: Decimal
    is_fallback: bool = False
    note: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class RateTable:
    rates: Dict[str, Dict[str, Decimal]]
    is_fallback: bool = False
    note: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    def quote(self, asset_id: str) -> RateQuote:
        prices = self.rates[asset_id]
        return RateQuote(
            asset_id=asset_id,
            inr=prices["inr"],
            usd=prices["usd"],
            is_fallback=self.is_fallback,
            note=self.note,
            timestamp=self.timestamp,
        )

    def to_dict(self) -> dict:
        data = {
            "rates": {
                asset: {cur: float(price) for cur, price in prices.items()}
                for asset, prices in self.rates.items()
            },
            "timestamp": isoformat(self.timestamp),
        }
        if self.note:
            data["note"] = self.note
        return data


class RateStrategy(Protocol):
    def fetch(self, asset_ids: Iterable[str]) -> RateTable:
        ...


def is_upstream_unavailable(exc: BaseException) -> bool:
    """
    True when ``exc`` means the price feed is temporarily out of reach.

    Covers timeouts, connection failures (DNS, TLS, resets), throttling or
    blocking (403/429), server errors (5xx) and unusable payloads.
    """
    if isinstance(exc, UpstreamUnavailable):
        return True
    if isinstance(exc, requests.HTTPError):
        status = getattr(exc.response, "status_code", None)
        return status is None or status in RECOVERABLE_STATUSES or status >= 500
    return isinstance(exc, (requests.Timeout, requests.ConnectionError))


class LiveRateStrategy:
    """
    CoinGecko ``/simple/price`` client.

    No API key is needed for the public tier; requests are bounded by
    ``timeout`` seconds.
    """

    def __init__(
        self,
        base_url: str = Config.RATE_API_URL,
        timeout: float = Config.RATE_API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "SwiftChain/1.0"})

    def fetch(self, asset_ids: Iterable[str]) -> RateTable:
        ids = list(asset_ids)
        resp = self.session.get(
            f"{self.base_url}/simple/price",
            params={"ids": ",".join(ids), "vs_currencies": "inr,usd"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"Rate API returned invalid JSON: {e}") from e
        return RateTable(rates=self._parse(data, ids))

    @staticmethod
    def _parse(data, asset_ids) -> Dict[str, Dict[str, Decimal]]:
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Unexpected rate format from rate API")
        rates = {}
        for asset in asset_ids:
            prices = data.get(asset)
            if not isinstance(prices, dict):
                raise UpstreamUnavailable(f"Rate API returned no price for '{asset}'")
            inr = to_decimal(prices.get("inr"))
            usd = to_decimal(prices.get("usd"))
            if inr is None or inr <= 0 or usd is None:
                raise UpstreamUnavailable(f"Rate API returned an invalid price for '{asset}'")
            rates[asset] = {"inr": inr, "usd": usd}
        return rates


class StaticRateStrategy:
    def __init__(self, table: Optional[Dict[str, Dict[str, Decimal]]] = None):
        self.table = table or FALLBACK_RATES

    def fetch(self, asset_ids: Iterable[str]) -> RateTable:
        rates = {}
        for asset in asset_ids:
            if asset not in self.table:
                raise UnsupportedCurrency(f"No rate available for asset '{asset}'")
            rates[asset] = dict(self.table[asset])
        return RateTable(rates=rates, is_fallback=True, note=FALLBACK_NOTE)


class RateSource:
    """
    Spot prices for crypto assets in INR and USD.

    Tries the live strategy first and substitutes the static table on any
    transport or payload failure. ``is_upstream_unavailable`` only decides
    whether the failure is logged as an outage or as a misconfiguration.
    Callers always get a rate; degraded results carry ``is_fallback=True``.
    """

    def __init__(
        self,
        live: Optional[RateStrategy] = None,
        fallback: Optional[RateStrategy] = None,
    ):
        self.live = live or LiveRateStrategy()
        self.fallback = fallback or StaticRateStrategy()

    def get_rate(self, asset_id: str) -> RateQuote:
        asset_id = asset_id.lower()
        return self.get_rates([asset_id]).quote(asset_id)

    def get_rates(self, asset_ids: Iterable[str] = DEFAULT_ASSETS) -> RateTable:
        ids = [a.lower() for a in asset_ids]
        try:
            return self.live.fetch(ids)
        except requests.RequestException as e:
            if is_upstream_unavailable(e):
                logger.warning("Rate API unavailable (%s); using fallback rates", e)
            else:
                # a rejected request means bad config, not an outage
                logger.error("Rate API rejected the request (%s); using fallback rates", e)
        except UpstreamUnavailable as e:
            logger.warning("Rate API unusable (%s); using fallback rates", e)
        return self.fallback.fetch(ids)
