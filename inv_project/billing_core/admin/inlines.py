from django.contrib import admin

from billing_core.models import InvoiceLine, Product, Transaction

from .forms import InvoiceLineForm


class InvoiceLineInline(admin.TabularInline):
    """Shows invoice lines under an Invoice page"""

    model = InvoiceLine
    form = InvoiceLineForm
    extra = 0
    fields = (
        "product", "product_name", "price",
        "discount_percent", "quantity", "line_total")
    readonly_fields = (
        "line_total",
    )  # `line_total` is computed automatically, so it’s read-only

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("product")

    # Only offer the owner's own products
    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        if db_field.name == "product" and not request.user.is_superuser:
            kwargs["queryset"] = Product.objects.for_owner(request.user)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def get_readonly_fields(self, request, obj=None):
        # Once the invoice is paid, its lines are locked
        if obj and obj.is_paid:
            return list(self.fields)
        return self.readonly_fields

    # Hide add new line option
    def has_add_permission(self, request, obj=None):
        if obj and obj.is_paid:
            return False
        return super().has_add_permission(request, obj)

    # Hide delete options
    def has_delete_permission(self, request, obj=None):
        if obj and obj.is_paid:
            return False
        return super().has_delete_permission(request, obj)


class PaymentInline(admin.TabularInline):
    """The payment transaction(s) recorded against an invoice."""

    model = Transaction
    fk_name = "invoice"
    extra = 0
    fields = ("date", "amount", "account", "payment_method", "reference")
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        # payments are recorded through record_payment only
        return False
