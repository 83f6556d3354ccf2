import json
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from billing_core.exceptions import NotFound
from billing_core.models import Account, Client, Invoice
from billing_core.services import (create_account, create_client,
                                   create_invoice, create_product,
                                   delete_transaction, get_invoice)
from billing_core.views import invoices_collection

User = get_user_model()


class OwnedManagerTests(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(
            username="alice", email="alice@example.com", password="pw")
        self.bob = User.objects.create_user(
            username="bob", email="bob@example.com", password="pw")
        self.acct_a = create_account(self.alice, "A1", "Alice bank", "10")
        self.acct_b = create_account(self.bob, "B1", "Bob bank", "10")

    def test_for_owner_returns_only_that_owners_rows(self):
        """Compare account primary keys"""
        self.assertListEqual(
            list(Account.objects.for_owner(self.alice).values_list("pk", flat=True)),
            [self.acct_a.pk],
        )
        self.assertListEqual(
            list(Account.objects.for_owner(self.bob).values_list("pk", flat=True)),
            [self.acct_b.pk],
        )

    def test_get_owned_hides_other_owners_rows(self):
        # someone else's row looks exactly like a missing one
        with self.assertRaises(NotFound) as foreign:
            Account.objects.get_owned(self.alice, self.acct_b.pk)
        with self.assertRaises(NotFound) as missing:
            Account.objects.get_owned(self.alice, 999999)
        self.assertEqual(str(foreign.exception), str(missing.exception))

    def test_get_owned_rejects_malformed_ids(self):
        for bad in ("abc", None):
            with self.subTest(bad=bad):
                with self.assertRaises(NotFound):
                    Client.objects.get_owned(self.alice, bad)

    def test_cross_owner_invoice_and_transaction_access(self):
        client = create_client(self.bob, name="Bob's client")
        product = create_product(self.bob, name="Thing", barcode="T-1", price="1")
        invoice = create_invoice(self.bob, client.pk, [{"product_id": product.pk}])

        with self.assertRaises(NotFound):
            get_invoice(invoice.pk, self.alice)
        # alice can't put bob's product on her invoice either
        mine = create_client(self.alice, name="Alice's client")
        with self.assertRaises(NotFound):
            create_invoice(self.alice, mine.pk, [{"product_id": product.pk}])
        with self.assertRaises(NotFound):
            delete_transaction(1, self.alice)


@pytest.mark.django_db
def test_invoice_list_returns_only_owner_data(django_user_model):
    u1 = django_user_model.objects.create_user(
        username="alice", email="alice@example.com", password="pw")
    u2 = django_user_model.objects.create_user(
        username="bob", email="bob@example.com", password="pw")
    for user, name in ((u1, "Mine"), (u2, "Theirs")):
        client = create_client(user, name=name)
        product = create_product(user, name="Thing", barcode="T-1", price="100")
        create_invoice(user, client.pk, [{"product_id": product.pk}])
    assert Invoice.objects.count() == 2

    # Bypass client & call view with a RequestFactory
    request = RequestFactory().get("/api/invoices/")
    request.user = u1

    response = invoices_collection(request)
    data = json.loads(response.content)

    assert data["success"] is True
    assert data["count"] == 1
    assert [inv["client"]["name"] for inv in data["data"]] == ["Mine"]
    assert data["data"][0]["total"] == "100.00"


@pytest.mark.django_db
def test_foreign_account_looks_missing_over_http(client, owner, other_owner):
    theirs = create_account(other_owner, "B1", "Their bank", "10")
    client.force_login(owner)

    response = client.put(
        f"/api/accounts/{theirs.pk}/",
        data=json.dumps({"name": "Mine"}),
        content_type="application/json",
    )
    assert response.status_code == 404
    theirs.refresh_from_db()
    assert theirs.name == "Their bank"
    assert theirs.balance == Decimal("10.00")
