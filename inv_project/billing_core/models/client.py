from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from ..managers import OwnedManager


# ---------- Client ----------
# Represents the customer who receives invoices and pays them
class Client(models.Model):
    # Every client belongs to a single owner
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="clients",
    )
    """ Example:
        User A can have its own clients separate from User B.
    """

    # The client’s legal or trade name
    name = models.CharField(max_length=200)

    # Optional identifiers, unique within one owner when present
    # (stored as NULL when blank so several clients can leave them empty)
    email = models.EmailField(null=True, blank=True)
    business_number = models.CharField(max_length=64, null=True, blank=True)

    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    website = models.URLField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce owner scoping
    objects = OwnedManager()

    class Meta:
        # Most recently touched first, like the client list screen
        ordering = ["-updated_at", "-id"]
        indexes = [models.Index(fields=["owner", "name"], name="client_owner_name_idx")]

        # Enforce uniqueness per owner
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "email"], name="uq_owner_client_email"
            ),
            models.UniqueConstraint(
                fields=["owner", "business_number"],
                name="uq_owner_client_business_number",
            ),
        ]

    # Display client name in admin/UI
    def __str__(self):
        return self.name

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError("Client name is required")
        # Blank optional keys become NULL so the unique constraints ignore them
        self.email = (self.email or "").strip().lower() or None
        self.business_number = (self.business_number or "").strip() or None
        self.phone = self.phone or ""
        self.address = self.address or ""
        self.website = self.website or ""
