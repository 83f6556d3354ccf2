from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from ..managers import OwnedManager


# ---------- Products (what the owner sells) ----------
class Product(models.Model):

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        # If the owner is deleted, their products are deleted too (CASCADE)
        on_delete=models.CASCADE,
        related_name="products",
    )
    name = models.CharField(max_length=200)

    # Scanned/typed code, always stored upper-cased
    barcode = models.CharField(max_length=80)

    # Unit price, VAT included
    price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    vat_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("18.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce owner scoping
    objects = OwnedManager()

    class Meta:
        ordering = ["name", "id"]
        indexes = [models.Index(fields=["owner", "name"], name="product_owner_name_idx")]

        # Ensure each barcode is unique within one owner's catalog
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "barcode"], name="uq_owner_product_barcode"
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="product_price_non_negative",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def price_without_vat(self):
        """Net unit price, derived from the VAT-inclusive price."""
        if self.vat_percent and self.vat_percent > 0:
            return self.price / (1 + self.vat_percent / Decimal("100"))
        return self.price

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError("Product name is required.")
        self.barcode = (self.barcode or "").strip().upper()
        if not self.barcode:
            raise ValidationError("Barcode is required.")
        if self.price is None or self.price < 0:
            raise ValidationError("Price cannot be negative.")
        vat = self.vat_percent
        if vat is None or vat < 0:
            raise ValidationError("VAT percentage cannot be negative.")
        if vat > 100:
            raise ValidationError("VAT percentage cannot exceed 100.")
