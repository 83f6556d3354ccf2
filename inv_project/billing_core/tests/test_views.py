import json
from decimal import Decimal

import pytest

from billing_core.models import Account, Transaction
from billing_core.services import create_transaction, delete_account


def send(client, method, url, payload=None):
    return getattr(client, method)(
        url, data=json.dumps(payload or {}), content_type="application/json")


@pytest.fixture
def api(client, owner):
    client.force_login(owner)
    return client


@pytest.mark.django_db
def test_requires_login(client):
    response = client.get("/api/accounts/")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


@pytest.mark.django_db
def test_account_create_and_list(api):
    response = send(api, "post", "/api/accounts/", {
        "account_no": "A1", "name": "Main bank", "initial_balance": "100"})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["balance"] == "100.00"

    listing = api.get("/api/accounts/").json()
    assert listing["count"] == 1
    assert listing["data"][0]["account_no"] == "A1"


@pytest.mark.django_db
def test_account_errors_map_to_status_codes(api, account):
    duplicate = send(api, "post", "/api/accounts/", {
        "account_no": "A1", "name": "Again", "initial_balance": "1"})
    assert duplicate.status_code == 409

    negative = send(api, "post", "/api/accounts/", {
        "account_no": "A2", "name": "Neg", "initial_balance": "-5"})
    assert negative.status_code == 400

    balance_edit = send(api, "put", f"/api/accounts/{account.pk}/", {"balance": "1"})
    assert balance_edit.status_code == 400
    account.refresh_from_db()
    assert account.balance == Decimal("100.00")


@pytest.mark.django_db
def test_account_delete_and_orphan_mode(api, owner, account):
    create_transaction(owner, "Income", "5", account.pk, "Shop", "Cash")

    blocked = api.delete(f"/api/accounts/{account.pk}/")
    assert blocked.status_code == 409

    orphaned = api.delete(f"/api/accounts/{account.pk}/?orphan=true")
    assert orphaned.status_code == 200
    assert not Account.objects.filter(pk=account.pk).exists()


@pytest.mark.django_db
def test_transaction_create_and_delete_round_trip(api, account):
    response = send(api, "post", "/api/transactions/", {
        "type": "Income", "amount": "50.00", "account_id": account.pk,
        "source": "Shop", "payment_method": "Cash", "date": "2024-03-01"})
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["amount"] == "50.00"
    assert data["date"] == "2024-03-01"
    assert data["account"] == {"id": account.pk, "name": "Main bank", "account_no": "A1"}
    account.refresh_from_db()
    assert account.balance == Decimal("150.00")

    deleted = api.delete(f"/api/transactions/{data['id']}/")
    assert deleted.status_code == 200
    assert deleted.json()["warnings"] == []
    account.refresh_from_db()
    assert account.balance == Decimal("100.00")


@pytest.mark.django_db
def test_transaction_bad_date_is_400(api, account):
    response = send(api, "post", "/api/transactions/", {
        "type": "Income", "amount": "5", "account_id": account.pk,
        "source": "Shop", "payment_method": "Cash", "date": "yesterday"})
    assert response.status_code == 400
    assert not Transaction.objects.exists()


@pytest.mark.django_db
def test_orphaned_transaction_delete_reports_warning(api, owner, account):
    tx = create_transaction(owner, "Income", "5", account.pk, "Shop", "Cash")
    delete_account(account.pk, owner, orphan=True)

    response = api.delete(f"/api/transactions/{tx.pk}/")
    assert response.status_code == 200
    assert len(response.json()["warnings"]) == 1


@pytest.mark.django_db
def test_invoice_flow_over_http(api, acme, products, account):
    widget, gadget = products
    created = send(api, "post", "/api/invoices/", {
        "client_id": acme.pk,
        "line_items": [
            {"product_id": widget.pk, "quantity": 2},
            {"product_id": gadget.pk, "quantity": 3, "discount_percent": 10},
        ],
    })
    assert created.status_code == 201
    invoice = created.json()["data"]
    assert invoice["invoice_number"] == 1001
    assert invoice["total_without_vat"] == "33.50"
    assert [item["line_total"] for item in invoice["items"]] == ["20.00", "13.50"]

    url = f"/api/invoices/{invoice['id']}/"
    assert send(api, "put", url, {"status": "Not Paid"}).json()["data"]["status"] == "Not Paid"
    assert send(api, "put", url, {"status": "Paid"}).status_code == 400

    patched = send(api, "patch", url, {
        "line_items": [{"product_id": widget.pk, "quantity": 1}], "vat_percent": 20})
    assert patched.json()["data"]["total"] == "12.00"

    paid = send(api, "post", f"{url}payments/", {"account_id": account.pk})
    assert paid.status_code == 201
    body = paid.json()["data"]
    assert body["invoice"]["status"] == "Paid"
    assert body["transaction"]["amount"] == "12.00"

    assert send(api, "post", f"{url}payments/", {"account_id": account.pk}).status_code == 409
    assert api.delete(url).status_code == 409
    assert api.get(url).json()["data"]["status"] == "Paid"


@pytest.mark.django_db
def test_clients_and_products_crud(api):
    created = send(api, "post", "/api/clients/", {"name": "Acme", "email": "AP@Acme.Example"})
    assert created.status_code == 201
    client_id = created.json()["data"]["id"]
    assert created.json()["data"]["email"] == "ap@acme.example"

    clash = send(api, "post", "/api/clients/", {"name": "Other", "email": "ap@acme.example"})
    assert clash.status_code == 409

    updated = send(api, "put", f"/api/clients/{client_id}/", {"phone": "555"})
    assert updated.json()["data"]["phone"] == "555"

    product = send(api, "post", "/api/products/", {
        "name": "Widget", "barcode": "w-1", "price": "11.80"}).json()["data"]
    assert product["barcode"] == "W-1"
    assert product["price_without_vat"] == "10.00"

    unknown = send(api, "post", "/api/products/", {"name": "X", "barcode": "x", "colour": "red"})
    assert unknown.status_code == 400

    assert api.delete(f"/api/products/{product['id']}/").status_code == 200
    assert api.get(f"/api/products/{product['id']}/").status_code == 404


@pytest.mark.django_db
def test_wrong_method_is_405(api):
    assert api.delete("/api/accounts/").status_code == 405


@pytest.mark.django_db
@pytest.mark.parametrize("line_items", ["abc", ["abc"], [1, 2], {"product_id": 1}])
def test_malformed_line_items_are_400(api, acme, line_items):
    response = send(api, "post", "/api/invoices/", {
        "client_id": acme.pk, "line_items": line_items})
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.django_db
def test_exponent_amount_is_400_not_500(api, account):
    response = send(api, "post", "/api/transactions/", {
        "type": "Income", "amount": "1e30", "account_id": account.pk,
        "source": "Shop", "payment_method": "Cash"})
    assert response.status_code == 400
    account.refresh_from_db()
    assert account.balance == Decimal("100.00")
