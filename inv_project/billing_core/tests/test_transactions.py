import datetime
import warnings
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import NotFound, StaleReferenceWarning
from ..models import Account, Transaction
from ..services import (create_account, create_client, create_transaction,
                        delete_account, delete_transaction, list_transactions)

User = get_user_model()


class TransactionBalanceTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            username="alice", email="alice@example.com", password="pw")
        self.account = create_account(self.owner, "A1", "Main bank", Decimal("100.00"))

    def balance(self):
        self.account.refresh_from_db()
        return self.account.balance

    def test_income_then_delete_restores_balance(self):
        tx = create_transaction(
            self.owner, "Income", Decimal("50.00"), self.account.pk, "Shop", "Cash")
        self.assertEqual(self.balance(), Decimal("150.00"))

        reversal = delete_transaction(tx.pk, self.owner)
        self.assertTrue(reversal.applied)
        self.assertEqual(reversal.delta, Decimal("-50.00"))
        self.assertEqual(self.balance(), Decimal("100.00"))
        self.assertFalse(Transaction.objects.filter(pk=tx.pk).exists())

    def test_expense_lowers_balance_and_delete_adds_back(self):
        tx = create_transaction(
            self.owner, "Expense", 19.99, self.account.pk, "Landlord", "BankTransfer")
        self.assertEqual(tx.amount, Decimal("19.99"))
        self.assertEqual(self.balance(), Decimal("80.01"))

        delete_transaction(tx.pk, self.owner)
        self.assertEqual(self.balance(), Decimal("100.00"))

    def test_validation_leaves_balance_untouched(self):
        bad_calls = [
            dict(type="Refund", amount="5"),
            dict(type="Income", amount="0"),
            dict(type="Income", amount="-3"),
            dict(type="Income", amount="abc"),
            dict(type="Income", amount="5", source=" "),
            dict(type="Income", amount="5", payment_method="Barter"),
        ]
        for kwargs in bad_calls:
            params = dict(account_id=self.account.pk, source="Shop", payment_method="Cash")
            params.update(kwargs)
            with self.subTest(**kwargs):
                with self.assertRaises(ValidationError):
                    create_transaction(self.owner, **params)
        self.assertEqual(Transaction.objects.count(), 0)
        self.assertEqual(self.balance(), Decimal("100.00"))

    def test_other_owners_account_is_not_found(self):
        other = User.objects.create_user(
            username="bob", email="bob@example.com", password="pw")
        theirs = create_account(other, "B1", "Their bank", "10")
        with self.assertRaises(NotFound):
            create_transaction(self.owner, "Income", "5", theirs.pk, "Shop", "Cash")
        theirs.refresh_from_db()
        self.assertEqual(theirs.balance, Decimal("10.00"))

    def test_client_is_linked(self):
        client = create_client(self.owner, name="Acme")
        tx = create_transaction(
            self.owner, "Income", "5", self.account.pk, "Acme", "Card", client_id=client.pk)
        self.assertEqual(tx.client, client)

    def test_delete_after_orphaning_warns_and_still_deletes(self):
        tx = create_transaction(self.owner, "Income", "5", self.account.pk, "Shop", "Cash")
        delete_account(self.account.pk, self.owner, orphan=True)

        reversal = delete_transaction(tx.pk, self.owner)
        self.assertFalse(reversal.applied)
        self.assertIsInstance(reversal.warning, StaleReferenceWarning)
        self.assertFalse(Transaction.objects.filter(pk=tx.pk).exists())

    def test_delete_when_account_row_vanished_warns(self):
        tx = create_transaction(self.owner, "Income", "5", self.account.pk, "Shop", "Cash")
        # simulate a reference to an account that no longer resolves
        other = User.objects.create_user(
            username="bob", email="bob@example.com", password="pw")
        Account.objects.filter(pk=self.account.pk).update(owner=other)

        reversal = delete_transaction(tx.pk, self.owner)
        self.assertIsInstance(reversal.warning, StaleReferenceWarning)
        self.assertEqual(reversal.account_id, self.account.pk)
        self.assertFalse(Transaction.objects.filter(pk=tx.pk).exists())

    def test_stale_warning_is_a_user_warning(self):
        # callers can surface it through the warnings module
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            warnings.warn(StaleReferenceWarning("gone"))
        self.assertEqual(caught[0].category, StaleReferenceWarning)

    def test_listing_is_newest_first(self):
        old = create_transaction(
            self.owner, "Income", "1", self.account.pk, "Shop", "Cash",
            date=datetime.date(2024, 1, 1))
        new = create_transaction(
            self.owner, "Income", "2", self.account.pk, "Shop", "Cash",
            date=datetime.date(2024, 6, 1))
        self.assertEqual([t.pk for t in list_transactions(self.owner)], [new.pk, old.pk])

    def test_delete_missing_transaction(self):
        with self.assertRaises(NotFound):
            delete_transaction(123456, self.owner)
