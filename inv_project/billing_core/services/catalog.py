import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError

from ..exceptions import DuplicateKey, HasTransactions
from ..models import Client, Product
from ..money import round2, to_decimal

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ("name", "email", "business_number", "phone", "address", "website")
PRODUCT_FIELDS = ("name", "barcode", "price", "vat_percent")


def _check_fields(fields, allowed):
    unknown = set(fields) - set(allowed)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")


def _save_unique(obj, clashes):
    """
    Save obj after checking its owner-scoped business keys.
    clashes: list of (field, label) pairs to check.
    """
    model = type(obj)
    for field, label in clashes:
        value = getattr(obj, field)
        if value is None:
            continue
        taken = (
            model.objects.for_owner(obj.owner)
            .filter(**{field: value})
            .exclude(pk=obj.pk)
        )
        if taken.exists():
            raise DuplicateKey(f"{label} already exists.")
    try:
        with transaction.atomic():
            obj.save()
    except IntegrityError:
        raise DuplicateKey(f"{model.__name__} with these details already exists.")
    return obj


def _delete_protected(obj):
    try:
        with transaction.atomic():
            obj.delete()
    except ProtectedError:
        raise HasTransactions(
            f"{type(obj).__name__} is used by invoices or transactions")


# ----------------------------
# Clients
# ----------------------------
def create_client(owner, **fields):
    _check_fields(fields, CLIENT_FIELDS)
    client = Client(owner=owner, **fields)
    client.full_clean(exclude=["owner"], validate_unique=False)
    return _save_unique(client, [("email", "Email"), ("business_number", "Business number")])


def update_client(client_id, owner, **fields):
    _check_fields(fields, CLIENT_FIELDS)
    with transaction.atomic():
        client = Client.objects.get_owned(owner, client_id, lock=True)
        for field, value in fields.items():
            setattr(client, field, value)
        client.full_clean(exclude=["owner"], validate_unique=False)
        return _save_unique(client, [("email", "Email"), ("business_number", "Business number")])


def delete_client(client_id, owner):
    _delete_protected(Client.objects.get_owned(owner, client_id))


def list_clients(owner):
    return Client.objects.for_owner(owner).order_by("-updated_at", "-id")


# ----------------------------
# Products
# ----------------------------
def _coerce_product(fields):
    if "price" in fields:
        fields["price"] = round2(to_decimal(fields["price"], "price"))
    if "vat_percent" in fields:
        fields["vat_percent"] = to_decimal(fields["vat_percent"], "vat_percent")
    return fields


def create_product(owner, **fields):
    _check_fields(fields, PRODUCT_FIELDS)
    product = Product(owner=owner, **_coerce_product(fields))
    product.full_clean(exclude=["owner"], validate_unique=False)
    product = _save_unique(product, [("barcode", "Barcode")])
    logger.info("Product %s (%s) created for owner %s", product.pk, product.barcode, owner.pk)
    return product


def update_product(product_id, owner, **fields):
    _check_fields(fields, PRODUCT_FIELDS)
    with transaction.atomic():
        product = Product.objects.get_owned(owner, product_id, lock=True)
        for field, value in _coerce_product(fields).items():
            setattr(product, field, value)
        product.full_clean(exclude=["owner"], validate_unique=False)
        return _save_unique(product, [("barcode", "Barcode")])


def delete_product(product_id, owner):
    # invoice lines keep their snapshot, so products are always deletable
    Product.objects.get_owned(owner, product_id).delete()


def list_products(owner):
    return Product.objects.for_owner(owner).order_by("name", "id")
