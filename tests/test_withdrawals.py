import time
import unittest
from decimal import Decimal

from swiftchain.core.errors import InvalidAmount, MissingField, NotFound
from swiftchain.models.withdrawal import WithdrawalStatus
from swiftchain.services.withdrawal_service import WithdrawalSimulator

BANK_DETAILS = {
    "accountNumber": "123456789012",
    "ifscCode": "HDFC0001234",
    "accountHolder": "Asha Verma",
}


def wait_for(predicate, timeout=2.0, step=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


class TestWithdrawalSimulator(unittest.TestCase):

    def setUp(self):
        self.simulator = WithdrawalSimulator(delay=0.05)

    def tearDown(self):
        self.simulator.shutdown()

    def test_submit(self):
        withdrawal = self.simulator.submit(10000, BANK_DETAILS)

        self.assertTrue(withdrawal.id.startswith("WD"))
        self.assertEqual(withdrawal.status, WithdrawalStatus.PROCESSING)
        self.assertEqual(withdrawal.currency, "INR")
        self.assertEqual(withdrawal.fee, Decimal("50.00"))
        self.assertEqual(withdrawal.estimated_time, "2-3 business days")
        self.assertEqual(withdrawal.bank_details.ifsc_code, "HDFC0001234")

    def test_completes_without_further_calls(self):
        withdrawal = self.simulator.submit("2500.50", BANK_DETAILS)

        completed = wait_for(
            lambda: self.simulator.get(withdrawal.id).status == WithdrawalStatus.COMPLETED
        )
        self.assertTrue(completed)
        self.assertIsNotNone(self.simulator.get(withdrawal.id).completed_at)

    def test_snake_case_bank_details(self):
        withdrawal = self.simulator.submit(
            100,
            {"account_number": "1", "ifsc_code": "SBIN0000001", "account_holder": "R K"},
        )
        self.assertEqual(withdrawal.bank_details.account_number, "1")

    def test_missing_account_number(self):
        details = dict(BANK_DETAILS)
        del details["accountNumber"]
        with self.assertRaises(MissingField) as ctx:
            self.simulator.submit(1000, details)
        self.assertEqual(ctx.exception.field_name, "accountNumber")

    def test_missing_amount_or_details(self):
        with self.assertRaises(MissingField):
            self.simulator.submit(None, BANK_DETAILS)
        with self.assertRaises(MissingField):
            self.simulator.submit(1000, None)
        with self.assertRaises(MissingField):
            self.simulator.submit(1000, {**BANK_DETAILS, "accountHolder": "  "})

    def test_invalid_amount(self):
        for amount in (0, -5, "lots", "1e27"):
            with self.assertRaises(InvalidAmount):
                self.simulator.submit(amount, BANK_DETAILS)

    def test_unique_ids(self):
        ids = {self.simulator.submit(100, BANK_DETAILS).id for _ in range(20)}
        self.assertEqual(len(ids), 20)
        self.assertEqual(len(self.simulator.list_withdrawals()), 20)

    def test_unknown_withdrawal(self):
        with self.assertRaises(NotFound):
            self.simulator.get("WD0")

    def test_shutdown_cancels_pending_completion(self):
        slow = WithdrawalSimulator(delay=60)
        withdrawal = slow.submit(100, BANK_DETAILS)
        slow.shutdown()
        self.assertEqual(slow.get(withdrawal.id).status, WithdrawalStatus.PROCESSING)


if __name__ == '__main__':
    unittest.main()
