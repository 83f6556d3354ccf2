import threading
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase

from ..models import Account, Invoice, InvoiceSequence
from ..services import (adjust_balance, create_account, create_client,
                        create_invoice, create_product)

User = get_user_model()


def run_in_threads(target, count):
    """Run target in `count` threads, each on its own DB connection."""
    results, errors = [], []
    lock = threading.Lock()

    def worker():
        try:
            value = target()
            with lock:
                results.append(value)
        except Exception as exc:  # reported by the caller
            with lock:
                errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results, errors


class ConcurrentWriteTests(TransactionTestCase):
    """Real commits, so the counter and balance rows are shared like in production."""

    def setUp(self):
        self.owner = User.objects.create_user(
            username="alice", email="alice@example.com", password="pw")
        self.client_obj = create_client(self.owner, name="Acme")
        self.product = create_product(self.owner, name="Widget", barcode="W-1", price="1")

    def new_invoice(self):
        return create_invoice(
            self.owner, self.client_obj.pk, [{"product_id": self.product.pk}])

    def test_missing_counter_row_is_recreated(self):
        # TransactionTestCase flushes the row the data migration seeded
        InvoiceSequence.objects.all().delete()
        self.assertEqual(self.new_invoice().invoice_number, 1001)
        self.assertEqual(self.new_invoice().invoice_number, 1002)

    def test_concurrent_creates_get_distinct_sequential_numbers(self):
        first = self.new_invoice().invoice_number

        numbers, errors = run_in_threads(lambda: self.new_invoice().invoice_number, 8)

        self.assertEqual(errors, [])
        # no duplicates and no gaps after the first number
        self.assertEqual(sorted(numbers), list(range(first + 1, first + 9)))
        self.assertEqual(Invoice.objects.count(), 9)

    def test_concurrent_adjustments_are_not_lost(self):
        account = create_account(self.owner, "A1", "Main bank", "100.00")

        def deposit_five_times():
            for _ in range(5):
                adjust_balance(account.pk, self.owner, Decimal("1.25"))

        _, errors = run_in_threads(deposit_five_times, 6)

        self.assertEqual(errors, [])
        account = Account.objects.get(pk=account.pk)
        # opening balance plus every delta: 100 + 6 * 5 * 1.25
        self.assertEqual(account.balance, Decimal("137.50"))
