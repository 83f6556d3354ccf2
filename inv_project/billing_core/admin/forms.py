from django import forms
from django.contrib.auth.forms import (
    UserChangeForm as DjangoUserChangeForm,
    UserCreationForm as DjangoUserCreationForm)

from billing_core.models import InvoiceLine, User

# -----------------------------
# Register custom admin forms
# ----------------------------


# Subclass `DjangoUserCreationForm` (form used when adding a new user)
class UserAdminCreationForm(DjangoUserCreationForm):
    class Meta(DjangoUserCreationForm.Meta):
        model = User  # Points `model` to custom User model
        fields = ("username", "email", "phone")


# Subclass `DjangoUserChangeForm` (form used when editing an existing user)
class UserAdminChangeForm(DjangoUserChangeForm):
    class Meta(DjangoUserChangeForm.Meta):
        model = User
        fields = (
            "username",
            "email",
            "phone",
            "is_active",
            "is_staff",
            "is_superuser",
        )


class InvoiceLineForm(forms.ModelForm):
    class Meta:
        model = InvoiceLine
        fields = ("product", "product_name", "price", "discount_percent", "quantity")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # filled from the product when left empty
        # paid invoices render these read-only, so they may be absent
        for name in ("product_name", "price"):
            if name in self.fields:
                self.fields[name].required = False

    def clean(self):
        cleaned = super().clean()
        product = cleaned.get("product")
        # snapshot name and price from the catalog, like the API does
        if product is not None:
            if not cleaned.get("product_name"):
                cleaned["product_name"] = product.name
            if cleaned.get("price") is None:
                cleaned["price"] = product.price
        if not cleaned.get("product_name"):
            raise forms.ValidationError("Pick a product or type a line name.")
        if cleaned.get("price") is None:
            raise forms.ValidationError({"price": "Price is required."})
        return cleaned
