""" Plain dict renderers for JsonResponse. Money always leaves as "0.00" strings. """
from .money import format_money


def _iso(value):
    return value.isoformat() if value else None


def account_to_dict(account):
    return {
        "id": account.pk,
        "account_no": account.account_no,
        "name": account.name,
        "opening_balance": format_money(account.opening_balance),
        "balance": format_money(account.balance),
        "note": account.note,
        "created_at": _iso(account.created_at),
    }


def client_to_dict(client):
    return {
        "id": client.pk,
        "name": client.name,
        "email": client.email,
        "business_number": client.business_number,
        "phone": client.phone,
        "address": client.address,
        "website": client.website,
        "updated_at": _iso(client.updated_at),
    }


def product_to_dict(product):
    return {
        "id": product.pk,
        "name": product.name,
        "barcode": product.barcode,
        "price": format_money(product.price),
        "vat_percent": format_money(product.vat_percent),
        "price_without_vat": format_money(product.price_without_vat),
    }


def invoice_line_to_dict(line):
    return {
        "product_id": line.product_id,
        "product_name": line.product_name,
        "price": format_money(line.price),
        "discount_percent": format_money(line.discount_percent),
        "quantity": line.quantity,
        "line_total": format_money(line.line_total),
    }


def invoice_to_dict(invoice, with_lines=True):
    data = {
        "id": invoice.pk,
        "invoice_number": invoice.invoice_number,
        "date": _iso(invoice.date),
        "client": {"id": invoice.client_id, "name": invoice.client.name},
        "notes": invoice.notes,
        "total_without_vat": format_money(invoice.total_without_vat),
        "total_vat": format_money(invoice.total_vat),
        "total": format_money(invoice.total),
        "status": invoice.status,
        "date_paid": _iso(invoice.date_paid),
    }
    if with_lines:
        data["items"] = [invoice_line_to_dict(line) for line in invoice.lines.all()]
    return data


def transaction_to_dict(tx):
    # account and client are denormalised for the transactions screen
    account = tx.account
    client = tx.client
    return {
        "id": tx.pk,
        "type": tx.type,
        "amount": format_money(tx.amount),
        "account": {"id": account.pk, "name": account.name, "account_no": account.account_no} if account else None,
        "client": {"id": client.pk, "name": client.name, "email": client.email} if client else None,
        "invoice_id": tx.invoice_id,
        "source": tx.source,
        "payment_method": tx.payment_method,
        "reference": tx.reference,
        "date": _iso(tx.date),
    }
