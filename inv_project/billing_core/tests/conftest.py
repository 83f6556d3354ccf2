from decimal import Decimal

import pytest

from billing_core import services


@pytest.fixture
def owner(django_user_model):
    return django_user_model.objects.create_user(
        username="alice", email="alice@example.com", password="pw")


@pytest.fixture
def other_owner(django_user_model):
    return django_user_model.objects.create_user(
        username="bob", email="bob@example.com", password="pw")


@pytest.fixture
def account(owner):
    return services.create_account(owner, "A1", "Main bank", Decimal("100.00"))


@pytest.fixture
def acme(owner):
    return services.create_client(owner, name="Acme", email="ap@acme.example")


@pytest.fixture
def products(owner):
    return (
        services.create_product(owner, name="Widget", barcode="w-1", price="10.00"),
        services.create_product(owner, name="Gadget", barcode="g-1", price="5.00"),
    )


@pytest.fixture
def invoice(owner, acme, products):
    widget, gadget = products
    return services.create_invoice(owner, acme.pk, [
        {"product_id": widget.pk, "quantity": 2},
        {"product_id": gadget.pk, "quantity": 3, "discount_percent": "10"},
    ])
