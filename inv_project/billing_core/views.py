import json
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_http_methods

from . import serializers, services
from .exceptions import AlreadyPaid, DuplicateKey, HasTransactions, NotFound
from .models import Client, Product

ACCOUNT_EDIT_FIELDS = ("account_no", "name", "note", "balance", "opening_balance")


# ----------------------------
# Helpers
# ----------------------------
def ok(data, status=200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return JsonResponse(body, status=status)


def error(message, status):
    return JsonResponse({"success": False, "error": message}, status=status)


def owner_api(view):
    """
    Require a logged-in owner and turn domain errors into JSON responses.
    The owner is always request.user; ids from other owners look missing.
    """
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error("Authentication required", 401)
        try:
            return view(request, *args, **kwargs)
        except ValidationError as e:
            return error("; ".join(e.messages), 400)
        except NotFound as e:
            return error(str(e), 404)
        except (DuplicateKey, AlreadyPaid, HasTransactions) as e:
            return error(str(e), 409)
    return wrapper


def read_json(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def read_date(payload, key="date"):
    raw = payload.get(key)
    if not raw:
        return None
    try:
        parsed = parse_date(str(raw)[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{key} must be a YYYY-MM-DD date")
    return parsed


def pick(payload, fields):
    return {k: payload[k] for k in fields if k in payload}


# ----------------------------
# Accounts
# ----------------------------
@require_http_methods(["GET", "POST"])
@owner_api
def accounts_collection(request):
    if request.method == "GET":
        accounts = [serializers.account_to_dict(a) for a in services.list_accounts(request.user)]
        return ok(accounts, count=len(accounts))

    payload = read_json(request)
    account = services.create_account(
        request.user,
        account_no=payload.get("account_no"),
        name=payload.get("name"),
        initial_balance=payload.get("initial_balance"),
        note=payload.get("note", ""),
    )
    return ok(serializers.account_to_dict(account), status=201)


@require_http_methods(["PUT", "DELETE"])
@owner_api
def account_detail(request, account_id):
    if request.method == "DELETE":
        orphan = request.GET.get("orphan", "").lower() in ("1", "true", "yes")
        services.delete_account(account_id, request.user, orphan=orphan)
        return ok({})

    fields = pick(read_json(request), ACCOUNT_EDIT_FIELDS)
    account = services.update_account(account_id, request.user, **fields)
    return ok(serializers.account_to_dict(account))


# ----------------------------
# Transactions
# ----------------------------
@require_http_methods(["GET", "POST"])
@owner_api
def transactions_collection(request):
    if request.method == "GET":
        txs = [serializers.transaction_to_dict(t) for t in services.list_transactions(request.user)]
        return ok(txs, count=len(txs))

    payload = read_json(request)
    tx = services.create_transaction(
        request.user,
        type=payload.get("type"),
        amount=payload.get("amount"),
        account_id=payload.get("account_id"),
        source=payload.get("source"),
        payment_method=payload.get("payment_method", "BankTransfer"),
        client_id=payload.get("client_id"),
        date=read_date(payload),
        reference=payload.get("reference", ""),
    )
    return ok(serializers.transaction_to_dict(tx), status=201)


@require_http_methods(["DELETE"])
@owner_api
def transaction_detail(request, transaction_id):
    reversal = services.delete_transaction(transaction_id, request.user)
    warnings = [str(reversal.warning)] if reversal.warning else []
    return ok({}, warnings=warnings)


# ----------------------------
# Invoices
# ----------------------------
@require_http_methods(["GET", "POST"])
@owner_api
def invoices_collection(request):
    if request.method == "GET":
        invoices = [
            serializers.invoice_to_dict(inv, with_lines=False)
            for inv in services.list_invoices(request.user)
        ]
        return ok(invoices, count=len(invoices))

    payload = read_json(request)
    invoice = services.create_invoice(
        request.user,
        client_id=payload.get("client_id"),
        line_items=payload.get("line_items") or [],
        notes=payload.get("notes", ""),
        total_vat=payload.get("total_vat"),
        vat_percent=payload.get("vat_percent"),
        date=read_date(payload),
    )
    return ok(serializers.invoice_to_dict(invoice), status=201)


@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@owner_api
def invoice_detail(request, invoice_id):
    if request.method == "GET":
        invoice = services.get_invoice(invoice_id, request.user)
        return ok(serializers.invoice_to_dict(invoice))

    if request.method == "DELETE":
        services.delete_invoice(invoice_id, request.user)
        return ok({})

    payload = read_json(request)
    if request.method == "PUT":
        # status edits only; lines go through PATCH
        if "status" not in payload:
            raise ValidationError("status is required")
        invoice = services.set_status(invoice_id, request.user, payload["status"])
    else:
        invoice = services.update_line_items(
            invoice_id,
            request.user,
            line_items=payload.get("line_items") or [],
            notes=payload.get("notes"),
            total_vat=payload.get("total_vat"),
            vat_percent=payload.get("vat_percent"),
        )
    return ok(serializers.invoice_to_dict(invoice))


@require_http_methods(["POST"])
@owner_api
def invoice_payments(request, invoice_id):
    payload = read_json(request)
    invoice, tx = services.record_payment(
        invoice_id,
        request.user,
        account_id=payload.get("account_id"),
        amount=payload.get("amount"),
        method=payload.get("payment_method", "BankTransfer"),
        date=read_date(payload),
        note=payload.get("note", ""),
    )
    return ok({
        "invoice": serializers.invoice_to_dict(invoice),
        "transaction": serializers.transaction_to_dict(tx),
    }, status=201)


# ----------------------------
# Clients & products
# ----------------------------
@require_http_methods(["GET", "POST"])
@owner_api
def clients_collection(request):
    if request.method == "GET":
        clients = [serializers.client_to_dict(c) for c in services.list_clients(request.user)]
        return ok(clients, count=len(clients))
    client = services.create_client(request.user, **read_json(request))
    return ok(serializers.client_to_dict(client), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@owner_api
def client_detail(request, client_id):
    if request.method == "GET":
        client = Client.objects.get_owned(request.user, client_id)
    elif request.method == "DELETE":
        services.delete_client(client_id, request.user)
        return ok({})
    else:
        client = services.update_client(client_id, request.user, **read_json(request))
    return ok(serializers.client_to_dict(client))


@require_http_methods(["GET", "POST"])
@owner_api
def products_collection(request):
    if request.method == "GET":
        products = [serializers.product_to_dict(p) for p in services.list_products(request.user)]
        return ok(products, count=len(products))
    product = services.create_product(request.user, **read_json(request))
    return ok(serializers.product_to_dict(product), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@owner_api
def product_detail(request, product_id):
    if request.method == "GET":
        product = Product.objects.get_owned(request.user, product_id)
    elif request.method == "DELETE":
        services.delete_product(product_id, request.user)
        return ok({})
    else:
        product = services.update_product(product_id, request.user, **read_json(request))
    return ok(serializers.product_to_dict(product))
