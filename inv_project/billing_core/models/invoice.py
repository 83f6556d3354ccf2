from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from ..exceptions import AlreadyPaid
from ..managers import OwnedManager
from ..money import ZERO, round2
from .client import Client
from .product import Product

STATUS_DUE = "Due"
STATUS_NOT_PAID = "Not Paid"
STATUS_PAID = "Paid"

INV_STATUS_CHOICES = [
    (STATUS_DUE, "Due"),
    (STATUS_NOT_PAID, "Not Paid"),
    (STATUS_PAID, "Paid"),
]

# Status edits a user may make by hand.
# "Paid" is only reachable through payment.record_payment and only left
# when its payment transaction is deleted.
MANUAL_TRANSITIONS = {
    STATUS_DUE: [STATUS_NOT_PAID],
    STATUS_NOT_PAID: [STATUS_DUE],
    STATUS_PAID: [],
}


def compute_line_total(price, quantity, discount_percent=ZERO):
    """price * quantity * (1 - discount/100), rounded to cents."""
    discount = Decimal(discount_percent or 0)
    gross = Decimal(price) * Decimal(quantity)
    return round2(gross * (Decimal("1") - discount / Decimal("100")))


def compute_totals(line_totals, total_vat=ZERO):
    """Return (total_without_vat, total_vat, total), each rounded to cents."""
    without_vat = round2(sum((Decimal(t) for t in line_totals), ZERO))
    vat = round2(total_vat or ZERO)
    return without_vat, vat, round2(without_vat + vat)


class Invoice(models.Model):  # Represents an invoice sent to a client

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="invoices",
    )

    # Globally sequential, allocated by models.sequence.InvoiceSequence
    invoice_number = models.PositiveIntegerField(unique=True)
    date = models.DateField(default=timezone.localdate)  # issue date

    # prevent deleting a client who has an invoice
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name="invoices")
    notes = models.TextField(blank=True, default="")

    # Stored totals, always recomputed from the lines
    total_without_vat = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    total_vat = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default=STATUS_DUE
    )
    date_paid = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce owner scoping
    objects = OwnedManager()

    class Meta:
        ordering = ["-date", "-invoice_number"]
        indexes = [
            models.Index(fields=["owner", "date"], name="inv_owner_date_idx"),
            models.Index(fields=["owner", "client"], name="inv_owner_client_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_vat__gte=0),
                name="inv_non_negative_vat",
            ),
        ]

    def __str__(self):
        return f"Inv {self.invoice_number}"

    @property
    def is_paid(self):
        return self.status == STATUS_PAID

    """ Ensure invoice's stored totals are always in sync with its lines """

    def recalc_totals(self, total_vat=None):
        if total_vat is None:
            total_vat = self.total_vat
        line_totals = [line.line_total for line in self.lines.all()]
        self.total_without_vat, self.total_vat, self.total = compute_totals(
            line_totals, total_vat
        )

    def transition_to(self, new_status):
        """Apply a manual status edit and persist it."""
        if new_status not in MANUAL_TRANSITIONS:
            raise ValidationError(f"Unknown invoice status: {new_status}")
        if new_status == self.status:
            return self
        if self.status == STATUS_PAID:
            raise AlreadyPaid(
                f"Invoice {self.invoice_number} is paid; delete its payment to reopen it")
        if new_status == STATUS_PAID:
            raise ValidationError("Record a payment to mark an invoice as Paid")
        # If requested new_status isn’t allowed → block it
        if new_status not in MANUAL_TRANSITIONS[self.status]:
            raise ValidationError(
                f"Cannot go from {self.status} to {new_status}")
        self.status = new_status
        self.save(update_fields=["status", "updated_at"])
        return self

    def mark_paid(self, when=None):
        self.status = STATUS_PAID
        self.date_paid = when or timezone.now()
        self.save(update_fields=["status", "date_paid", "updated_at"])

    def reopen(self):
        """Undo a payment: back to Due."""
        self.status = STATUS_DUE
        self.date_paid = None
        self.save(update_fields=["status", "date_paid", "updated_at"])


class InvoiceLine(models.Model):  # One priced, quantified, discounted row

    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="lines")

    # Live link kept for reference only; name and price are snapshots
    product = models.ForeignKey(
        Product,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="invoice_lines",
    )
    position = models.PositiveIntegerField(default=0)
    product_name = models.CharField(max_length=200)

    # Core pricing logic: price × quantity × (1 - discount) = line_total
    price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    quantity = models.PositiveIntegerField(default=1)
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        ordering = ["position", "id"]

        # Ensure amounts are never negative and discounts stay in range
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0) &
                models.Q(discount_percent__gte=0) &
                models.Q(discount_percent__lte=100),
                name="invl_valid_amounts",
            ),
        ]

    def __str__(self):
        return f"Invoice: {self.invoice.invoice_number} - {self.product_name} - Total: {self.line_total}"

    def clean(self):
        if self.quantity is None or self.quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        if self.price is None or self.price < 0:
            raise ValidationError("Price must be >= 0")
        if self.discount_percent is None or not (0 <= self.discount_percent <= 100):
            raise ValidationError("Discount must be between 0 and 100 percent")

    """ Ensure no inconsistent invoice line can ever be persisted """

    def save(self, *args, **kwargs):
        # compute line_total always, before validation so its size is checked too
        if self.price is not None and self.quantity is not None:
            self.line_total = compute_line_total(
                self.price, self.quantity, self.discount_percent)
        self.full_clean(exclude=["invoice", "product"])
        return super().save(*args, **kwargs)
