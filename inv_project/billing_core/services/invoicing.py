import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from ..exceptions import AlreadyPaid
from ..models import Client, Invoice, InvoiceLine, InvoiceSequence, Product
from ..models.invoice import compute_line_total, compute_totals
from ..models.sequence import INVOICE_SEQUENCE
from ..money import ZERO, round2, to_decimal

logger = logging.getLogger(__name__)


# ----------------------------
# Invoice numbering
# ----------------------------
def next_invoice_number():
    """
    Allocate the next global invoice number.
    Runs inside the caller's transaction: if the invoice insert fails the
    increment rolls back with it, so numbers have no gaps.
    """
    with transaction.atomic():
        seq = InvoiceSequence.objects.filter(name=INVOICE_SEQUENCE)
        if not seq.update(last_value=F("last_value") + 1):
            # first use on a database that skipped the seeding migration
            start = getattr(settings, "BILLING_INVOICE_NUMBER_START", 1001)
            InvoiceSequence.objects.get_or_create(
                name=INVOICE_SEQUENCE, defaults={"last_value": start - 1})
            seq.update(last_value=F("last_value") + 1)
        return seq.values_list("last_value", flat=True).get()


# ----------------------------
# Line items
# ----------------------------
def _build_lines(owner, line_items):
    """Validate raw line input and snapshot product name/price."""
    if not isinstance(line_items, (list, tuple)):
        raise ValidationError("line_items must be a list")
    if not line_items:
        raise ValidationError("At least one line item is required")

    lines = []
    for position, raw in enumerate(line_items, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"Line {position}: each line item must be an object")
        product_id = raw.get("product_id")
        if not product_id:
            raise ValidationError(f"Line {position}: product_id is required")
        product = Product.objects.get_owned(owner, product_id)

        # 2.7 must not quietly become 2
        quantity = to_decimal(raw.get("quantity", 1), "quantity")
        if quantity != quantity.to_integral_value():
            raise ValidationError(f"Line {position}: quantity must be a whole number")
        quantity = int(quantity)
        if quantity < 1:
            raise ValidationError(f"Line {position}: quantity must be at least 1")

        discount = to_decimal(raw.get("discount_percent") or 0, "discount_percent")
        if not (0 <= discount <= 100):
            raise ValidationError(
                f"Line {position}: discount must be between 0 and 100 percent")

        # explicit price overrides the catalog price, like the invoice form allows
        price = product.price
        if raw.get("price") not in (None, ""):
            price = round2(to_decimal(raw["price"], "price"))
        if price < 0:
            raise ValidationError(f"Line {position}: price cannot be negative")

        lines.append(InvoiceLine(
            product=product,
            position=position,
            product_name=product.name,
            price=price,
            discount_percent=discount,
            quantity=quantity,
            line_total=compute_line_total(price, quantity, discount),
        ))
    return lines


def _resolve_vat(total_without_vat, total_vat=None, vat_percent=None):
    """VAT is an explicit input; a rate is only a shortcut for computing it."""
    if total_vat not in (None, ""):
        vat = round2(to_decimal(total_vat, "total_vat"))
    elif vat_percent not in (None, ""):
        rate = to_decimal(vat_percent, "vat_percent")
        if not (0 <= rate <= 100):
            raise ValidationError("VAT percentage must be between 0 and 100")
        vat = round2(total_without_vat * rate / Decimal("100"))
    else:
        vat = ZERO
    if vat < 0:
        raise ValidationError("VAT cannot be negative")
    return vat


def _save_lines(invoice, lines, total_vat, vat_percent):
    for line in lines:
        line.invoice = invoice
        line.save()  # line_total recomputed on save
    without_vat, _, _ = compute_totals([line.line_total for line in lines])
    invoice.recalc_totals(_resolve_vat(without_vat, total_vat, vat_percent))
    # stored totals are Decimal(18, 2) too
    invoice.clean_fields(exclude=["owner", "client", "invoice_number"])


# ----------------------------
# Invoice workflows
# ----------------------------
def create_invoice(owner, client_id, line_items, notes="", total_vat=None,
                   vat_percent=None, date=None):
    if not client_id:
        raise ValidationError(
            "Missing required fields: clientId and at least one line item are mandatory.")
    client = Client.objects.get_owned(owner, client_id)
    lines = _build_lines(owner, line_items)

    # number allocation, invoice and lines commit together or not at all
    with transaction.atomic():
        invoice = Invoice(
            owner=owner,
            invoice_number=next_invoice_number(),
            client=client,
            notes=notes or "",
        )
        if date:
            invoice.date = date
        invoice.save()
        _save_lines(invoice, lines, total_vat, vat_percent)
        invoice.save(update_fields=["total_without_vat", "total_vat", "total", "updated_at"])

    logger.info("Invoice %s created for owner %s: total %s",
                invoice.invoice_number, owner.pk, invoice.total)
    return invoice


def update_line_items(invoice_id, owner, line_items, notes=None,
                      total_vat=None, vat_percent=None):
    """Replace all lines and recompute totals the same way create does."""
    lines = _build_lines(owner, line_items)
    with transaction.atomic():
        invoice = Invoice.objects.get_owned(owner, invoice_id, lock=True)
        if invoice.is_paid:
            raise AlreadyPaid(f"Cannot modify lines on paid invoice {invoice.invoice_number}")
        invoice.lines.all().delete()
        if notes is not None:
            invoice.notes = notes
        if total_vat is None and vat_percent is None:
            # keep the previous VAT amount when the caller doesn't restate it
            total_vat = invoice.total_vat
        _save_lines(invoice, lines, total_vat, vat_percent)
        invoice.save(update_fields=[
            "notes", "total_without_vat", "total_vat", "total", "updated_at"])
    return invoice


def set_status(invoice_id, owner, status):
    with transaction.atomic():
        invoice = Invoice.objects.get_owned(owner, invoice_id, lock=True)
        invoice.transition_to(status)
    logger.info("Invoice %s status set to %s", invoice.invoice_number, invoice.status)
    return invoice


def get_invoice(invoice_id, owner):
    return Invoice.objects.get_owned(owner, invoice_id)


def list_invoices(owner):
    return (
        Invoice.objects.for_owner(owner)
        .select_related("client")
        .order_by("-date", "-invoice_number")
    )


def delete_invoice(invoice_id, owner):
    with transaction.atomic():
        invoice = Invoice.objects.get_owned(owner, invoice_id, lock=True)
        # signals.prevent_delete_invoice_with_payments guards paid invoices
        invoice.delete()
    logger.info("Invoice %s deleted", invoice.invoice_number)
