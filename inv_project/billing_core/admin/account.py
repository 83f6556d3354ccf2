from django.contrib import admin, messages

from billing_core.models import Account, Transaction

from ..exceptions import NotFound
from ..services import delete_transaction
from .mixins import OwnerAdminMixin
from .ReadOnly import ReadOnlyAdmin


# Register `Account` model
@admin.register(Account)
class AccountAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "owner",
        "account_no",
        "name",
        "opening_balance",
        "balance",
        "created_at",
    )
    list_filter = ("owner",)
    search_fields = ("account_no", "name")
    ordering = ("owner", "account_no")
    fields = ("owner", "account_no", "name", "opening_balance", "balance", "note")

    def get_readonly_fields(self, request, obj=None):
        # balance only moves through transactions;
        # opening balance is fixed once the account exists
        if obj is not None:
            return ("opening_balance", "balance")
        return ("balance",)

    def save_model(self, request, obj, form, change):
        if not change:
            obj.balance = obj.opening_balance
        super().save_model(request, obj, form, change)

    # Admin delete follows the API rule: no delete while transactions exist
    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.transactions.exists():
            return False
        return super().has_delete_permission(request, obj)


# Register `Transaction` model
@admin.register(Transaction)
class TransactionAdmin(OwnerAdminMixin, ReadOnlyAdmin):
    """Ledger entries are view-only; deletes reverse the account balance."""

    allow_delete = True
    list_display = (
        "id",
        "owner",
        "date",
        "type",
        "amount",
        "account",
        "client",
        "invoice",
        "payment_method",
        "source",
    )
    list_filter = ("type", "payment_method", "date")
    search_fields = ("source", "reference", "client__name")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("owner", "account", "client", "invoice")

    def _delete_one(self, request, tx):
        try:
            reversal = delete_transaction(tx.pk, tx.owner)
        except NotFound:
            # already gone
            return
        if reversal.warning is not None:
            self.message_user(request, str(reversal.warning), level=messages.WARNING)

    def delete_model(self, request, obj):
        self._delete_one(request, obj)

    def delete_queryset(self, request, queryset):
        for tx in queryset:
            self._delete_one(request, tx)
