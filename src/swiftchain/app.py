from dataclasses import dataclass
from typing import Optional

from flask import Flask

from swiftchain.api.routes import register_routes
from swiftchain.config import Config, FeeSchedule
from swiftchain.services.conversion import ConversionCalculator
from swiftchain.services.fee_comparator import FeeComparator
from swiftchain.services.rate_service import LiveRateStrategy, RateSource
from swiftchain.services.transaction_tracker import TransactionTracker
from swiftchain.services.wallet import MockWalletConnector, WalletConnector
from swiftchain.services.withdrawal_service import WithdrawalSimulator
from swiftchain.utils.helpers import configure_logging


@dataclass
class Services:
    """Process-wide service objects shared by the request handlers."""
    rate_source: RateSource
    calculator: ConversionCalculator
    fee_comparator: FeeComparator
    tracker: TransactionTracker
    withdrawals: WithdrawalSimulator
    wallet: WalletConnector


def build_services(
    config=Config,
    fees: Optional[FeeSchedule] = None,
    rate_source: Optional[RateSource] = None,
    wallet: Optional[WalletConnector] = None,
) -> Services:
    fees = fees or FeeSchedule()
    rate_source = rate_source or RateSource(
        live=LiveRateStrategy(config.RATE_API_URL, config.RATE_API_TIMEOUT)
    )
    return Services(
        rate_source=rate_source,
        calculator=ConversionCalculator(rate_source, fees),
        fee_comparator=FeeComparator(fees),
        tracker=TransactionTracker(config.CONFIRMATION_THRESHOLD),
        withdrawals=WithdrawalSimulator(config.WITHDRAWAL_DELAY, fees),
        wallet=wallet or MockWalletConnector(),
    )


def create_app(config=Config, services: Optional[Services] = None):
    app = Flask(__name__)
    app.config.from_object(config)
    app.json.sort_keys = False
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    app.extensions["swiftchain"] = services or build_services(config)
    register_routes(app)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=Config.DEBUG)
