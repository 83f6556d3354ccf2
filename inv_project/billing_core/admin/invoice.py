from django.contrib import admin, messages
from django.db.models import Prefetch

from billing_core.models import Client, Invoice, InvoiceLine

from ..exceptions import HasTransactions
from ..services import delete_invoice, next_invoice_number
from .actions import mark_inv_as_due, mark_inv_as_not_paid
from .inlines import InvoiceLineInline, PaymentInline
from .mixins import OwnerAdminMixin


# Register `Invoice` model
@admin.register(Invoice)
class InvoiceAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "owner",
        "client",
        "date",
        "status",
        "total_without_vat",
        "total_vat",
        "total",
        "date_paid",
    )
    list_filter = ("status", "date")
    actions = [mark_inv_as_due, mark_inv_as_not_paid]
    search_fields = ("invoice_number", "client__name")
    inlines = [InvoiceLineInline, PaymentInline]
    fields = (
        "owner",
        "invoice_number",
        "client",
        "date",
        "notes",
        "total_vat",
        "total_without_vat",
        "total",
        "status",
        "date_paid",
    )
    # status moves through actions and payments, never the form
    readonly_fields = (
        "invoice_number",
        "total_without_vat",
        "total",
        "status",
        "date_paid",
    )

    """
        Prefetch each invoice's lines in one go so the
        change list doesn't query per row.
    """
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("owner", "client").prefetch_related(
            Prefetch("lines", queryset=InvoiceLine.objects.select_related("product"))
        )

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        # Paid invoice: every field becomes read-only
        if obj and obj.is_paid:
            return [f for f in self.fields]
        return super().get_readonly_fields(request, obj)

    def save_model(self, request, obj, form, change):
        if not change:
            # same global counter the API uses
            obj.invoice_number = next_invoice_number()
        super().save_model(request, obj, form, change)

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        # a VAT edit with no line change still has to move the total
        invoice = form.instance
        invoice.recalc_totals()
        invoice.save(update_fields=["total_without_vat", "total_vat", "total"])

    def has_delete_permission(self, request, obj=None):
        # An invoice with a recorded payment can't be deleted
        if obj and obj.payments.exists():
            return False  # removes “Delete” option from admin for that invoice
        return super().has_delete_permission(request, obj)

    def delete_queryset(self, request, queryset):
        for inv in queryset:
            try:
                delete_invoice(inv.pk, inv.owner)
            except HasTransactions as e:
                self.message_user(request, str(e), level=messages.ERROR)


# Register `Client` model
@admin.register(Client)
class ClientAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "owner",
        "name",
        "email",
        "business_number",
        "phone",
        "updated_at",
    )
    search_fields = ("name", "email", "business_number")
    list_filter = ("owner",)

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("owner")
