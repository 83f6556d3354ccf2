from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from ..managers import OwnedManager
from .account import Account
from .client import Client
from .invoice import Invoice

TX_INCOME = "Income"
TX_EXPENSE = "Expense"

TX_TYPES = [
    (TX_INCOME, "Income"),    # money in, balance goes up
    (TX_EXPENSE, "Expense"),  # money out, balance goes down
]

PAYMENT_METHODS = [
    # Keeps payment method standardized across records
    ("Cash", "Cash"),
    ("BankTransfer", "Bank Transfer"),
    ("Card", "Card"),
    ("Cheque", "Cheque"),
]


# ---------- Ledger entries ----------
class Transaction(models.Model):  # Represents single inflow/outflow on an account

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    type = models.CharField(max_length=10, choices=TX_TYPES)
    # always positive, `type` carries the sign
    amount = models.DecimalField(max_digits=18, decimal_places=2)

    # NULL only once the account was deleted in orphan mode
    account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transactions",
    )
    client = models.ForeignKey(
        Client,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    # Set when the transaction is the payment of an invoice
    invoice = models.ForeignKey(
        Invoice,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="payments",
    )

    source = models.CharField(max_length=200)  # who paid / who was paid
    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHODS, default="BankTransfer"
    )
    reference = models.CharField(max_length=200, blank=True, default="")
    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce owner scoping
    objects = OwnedManager()

    class Meta:
        ordering = ["-date", "-created_at", "-id"]
        indexes = [
            models.Index(fields=["owner", "date"], name="tx_owner_date_idx"),
            models.Index(fields=["owner", "account"], name="tx_owner_account_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.01")),
                name="tx_positive_amount",
            ),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} ({self.date})"

    @property
    def signed_amount(self):
        """Effect on the account balance when this entry is recorded."""
        return self.amount if self.type == TX_INCOME else -self.amount

    def clean(self):
        if self.type not in dict(TX_TYPES):
            raise ValidationError("Transaction type must be Income or Expense")
        if self.amount is None or self.amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        if self.payment_method not in dict(PAYMENT_METHODS):
            raise ValidationError(f"Unknown payment method: {self.payment_method}")
        if not (self.source or "").strip():
            raise ValidationError("Source/Payee is required")

        # Prevent cross-owner contamination
        for related in (self.account, self.client, self.invoice):
            if related is not None and related.owner_id != self.owner_id:
                raise ValidationError(
                    f"{related.__class__.__name__} must belong to the same owner.")
