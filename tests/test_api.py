import unittest
from decimal import Decimal

import requests

from swiftchain.app import build_services, create_app
from swiftchain.config import Config
from swiftchain.services.rate_service import LiveRateStrategy, RateSource
from swiftchain.services.wallet import MockWalletConnector
from tests.stubs import FakeResponse, FakeSession, StubRateStrategy

SENDER = "0x" + "a" * 40
RECIPIENT = "0x" + "b" * 40


class ApiTestConfig(Config):
    TESTING = True
    WITHDRAWAL_DELAY = 0.05
    LOG_LEVEL = "WARNING"


def make_client(rate_source=None):
    services = build_services(
        ApiTestConfig,
        rate_source=rate_source or RateSource(live=StubRateStrategy()),
        wallet=MockWalletConnector(address=SENDER),
    )
    app = create_app(ApiTestConfig, services=services)
    return app.test_client(), services


class TestConversionRoutes(unittest.TestCase):

    def setUp(self):
        self.client, self.services = make_client()

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["status"], "OK")

    def test_convert(self):
        resp = self.client.post("/api/convert", json={"amount": 10000, "currency": "USDT"})

        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["originalCurrency"], "INR")
        self.assertEqual(data["fees"]["totalFee"], "141.50")
        self.assertEqual(data["netAmount"], "9858.50")

    def test_convert_invalid_amount(self):
        resp = self.client.post("/api/convert", json={"amount": 0.005, "currency": "USDT"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "invalid_amount")

    def test_convert_unsupported_currency(self):
        resp = self.client.post("/api/convert", json={"amount": 100, "currency": "XRP"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "unsupported_currency")

    def test_convert_amount_too_large(self):
        resp = self.client.post("/api/convert", json={"amount": 1e27, "currency": "USDT"})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "invalid_amount")

    def test_convert_null_currency(self):
        resp = self.client.post("/api/convert", json={"amount": 100, "currency": None})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "unsupported_currency")

    def test_unexpected_error_is_json(self):
        # a near-zero price overflows the crypto rounding
        rates = {"tether": {"inr": Decimal("1e-30"), "usd": Decimal("1")}}
        services = build_services(
            ApiTestConfig, rate_source=RateSource(live=StubRateStrategy(rates=rates))
        )
        app = create_app(ApiTestConfig, services=services)
        app.config["TESTING"] = False
        resp = app.test_client().post("/api/convert", json={"amount": 100, "currency": "USDT"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()["error"], "internal_error")

    def test_convert_without_body(self):
        resp = self.client.post("/api/convert")
        self.assertEqual(resp.status_code, 400)

    def test_convert_during_outage(self):
        session = FakeSession(error=requests.Timeout())
        client, _ = make_client(RateSource(live=LiveRateStrategy(session=session)))
        resp = client.post("/api/convert", json={"amount": 1000, "currency": "ETH"})

        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertTrue(data["isFallbackRate"])
        self.assertEqual(data["exchangeRate"], "150000")
        self.assertIn("note", data)

    def test_rates(self):
        data = self.client.get("/api/rates").get_json()
        self.assertEqual(data["rates"]["tether"], {"inr": 83.0, "usd": 1.0})
        self.assertNotIn("note", data)

    def test_rates_during_outage(self):
        session = FakeSession(error=requests.ConnectionError())
        client, _ = make_client(RateSource(live=LiveRateStrategy(session=session)))
        data = client.get("/api/rates").get_json()

        self.assertIn("note", data)
        self.assertEqual(set(data["rates"]), {"tether", "bitcoin", "ethereum"})

    def test_rates_when_upstream_rejects_request(self):
        session = FakeSession(FakeResponse(status_code=404))
        client, _ = make_client(RateSource(live=LiveRateStrategy(session=session)))
        resp = client.get("/api/rates")

        self.assertEqual(resp.status_code, 200)
        self.assertIn("note", resp.get_json())

    def test_fee_comparison(self):
        data = self.client.get("/api/fee-comparison?amount=10000").get_json()

        self.assertEqual(data["traditionalBankCost"], "1300.00")
        self.assertEqual(data["platformCost"], "141.50")
        self.assertEqual(data["savings"], "1158.50")
        self.assertEqual(data["savingsPercentage"], "89.1")

    def test_fee_comparison_default_and_invalid(self):
        data = self.client.get("/api/fee-comparison").get_json()
        self.assertEqual(data["transferAmount"], "10000")

        resp = self.client.get("/api/fee-comparison?amount=-10")
        self.assertEqual(resp.status_code, 400)

    def test_unknown_route(self):
        resp = self.client.get("/api/nowhere")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"], "not_found")


class TestTransactionRoutes(unittest.TestCase):

    def setUp(self):
        self.client, self.services = make_client()

    def _register(self, tx_hash="0xabc"):
        return self.client.post(
            "/api/transactions/register",
            json={
                "hash": tx_hash,
                "from": SENDER,
                "to": RECIPIENT,
                "amount": 120.5,
                "currency": "USDT",
                "gasUsed": 21000,
                "gasPrice": "20000000000",
            },
        )

    def test_register(self):
        resp = self._register()

        self.assertEqual(resp.status_code, 201)
        tx = resp.get_json()["transaction"]
        self.assertEqual(tx["status"], "pending")
        self.assertEqual(tx["gasUsed"], "21000")
        self.assertEqual(tx["from"], SENDER)

    def test_register_duplicate(self):
        self._register()
        resp = self._register()
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()["error"], "duplicate_hash")

    def test_register_non_numeric_amount(self):
        resp = self.client.post(
            "/api/transactions/register", json={"hash": "0xbad", "amount": "lots"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "invalid_amount")

    def test_register_without_hash(self):
        resp = self.client.post("/api/transactions/register", json={"amount": 1})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "missing_field")

    def test_status_polling_confirms(self):
        self._register()
        for expected in range(1, 13):
            tx = self.client.get("/api/transactions/0xabc").get_json()["transaction"]
            self.assertEqual(tx["confirmations"], expected)

        self.assertEqual(tx["status"], "confirmed")
        self.assertIsNotNone(tx["blockNumber"])

    def test_status_unknown(self):
        resp = self.client.get("/api/transactions/0xmissing")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"], "not_found")

    def test_fail(self):
        self._register()
        tx = self.client.post("/api/transactions/0xabc/fail").get_json()["transaction"]
        self.assertEqual(tx["status"], "failed")

    def test_send_registers_transaction(self):
        resp = self.client.post(
            "/api/crypto/send", json={"toAddress": RECIPIENT, "amount": "10", "asset": "USDT"}
        )

        self.assertEqual(resp.status_code, 201)
        tx = resp.get_json()["transaction"]
        self.assertEqual(tx["from"], SENDER)
        self.assertEqual(tx["gasPrice"], "20000000000")
        self.assertEqual(len(tx["hash"]), 66)
        self.assertEqual(self.services.tracker.get(tx["hash"]).confirmations, 0)

    def test_send_validation(self):
        resp = self.client.post("/api/crypto/send", json={"amount": 10})
        self.assertEqual(resp.get_json()["error"], "missing_field")

        resp = self.client.post("/api/crypto/send", json={"toAddress": "0x123", "amount": 10})
        self.assertEqual(resp.get_json()["error"], "invalid_address")

        resp = self.client.post("/api/crypto/send", json={"toAddress": RECIPIENT, "amount": 5000})
        self.assertEqual(resp.get_json()["error"], "insufficient_balance")

    def test_balance(self):
        data = self.client.get(f"/api/crypto/balance/{RECIPIENT}").get_json()
        self.assertEqual(data["balances"], {"ETH": "0.5", "USDT": "1000"})

        resp = self.client.get("/api/crypto/balance/not-an-address")
        self.assertEqual(resp.status_code, 400)


class TestWithdrawalRoutes(unittest.TestCase):

    def setUp(self):
        self.client, self.services = make_client()

    def tearDown(self):
        self.services.withdrawals.shutdown()

    def test_submit_and_lookup(self):
        resp = self.client.post(
            "/api/withdrawals",
            json={
                "amount": 5000,
                "bankDetails": {
                    "accountNumber": "0011223344",
                    "ifscCode": "ICIC0000001",
                    "accountHolder": "Dev Patel",
                },
            },
        )

        self.assertEqual(resp.status_code, 201)
        withdrawal = resp.get_json()["withdrawal"]
        self.assertEqual(withdrawal["status"], "processing")
        self.assertEqual(withdrawal["fee"], "25.00")

        data = self.client.get(f"/api/withdrawals/{withdrawal['id']}").get_json()
        self.assertEqual(data["withdrawal"]["id"], withdrawal["id"])

    def test_missing_account_number(self):
        resp = self.client.post(
            "/api/withdrawals",
            json={"amount": 5000, "bankDetails": {"ifscCode": "X", "accountHolder": "Y"}},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "missing_field")
        self.assertIn("accountNumber", resp.get_json()["message"])

    def test_unknown_withdrawal(self):
        self.assertEqual(self.client.get("/api/withdrawals/WD1").status_code, 404)


if __name__ == '__main__':
    unittest.main()
