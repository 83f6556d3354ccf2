from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from ..managers import OwnedManager


class Account(models.Model):
    """
    A bank or cash account the owner keeps money in.
    - account_no is unique per owner
    - balance moves only through transactions (see services.ledger)
    - opening_balance is kept so the balance can be recomputed from the log
    """

    # Each account belongs to one user
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="accounts",
    )
    account_no = models.CharField(max_length=64)
    name = models.CharField(max_length=200)  # "Main bank", "Petty cash"

    # Balance at creation time, never changes afterwards
    opening_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Running balance, adjusted with atomic increments only
    balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce owner scoping
    objects = OwnedManager()

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["owner", "account_no"], name="acct_owner_no_idx")]

        """ Each owner numbers their own accounts.
               Numbers repeat across owners but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "account_no"], name="uq_owner_account_no"
            ),
            models.CheckConstraint(
                condition=models.Q(opening_balance__gte=0),
                name="account_opening_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.account_no} – {self.name}"

    def clean(self):
        if not (self.account_no or "").strip():
            raise ValidationError("Account number is required")
        if not (self.name or "").strip():
            raise ValidationError("Account name is required")
        if self.opening_balance is not None and self.opening_balance < 0:
            raise ValidationError("Initial balance cannot be negative")
