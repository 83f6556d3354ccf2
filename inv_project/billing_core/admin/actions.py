from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from ..exceptions import AlreadyPaid, NotFound
from ..models.invoice import STATUS_DUE, STATUS_NOT_PAID
from ..services import set_status


def _set_selected_status(modeladmin, request, queryset, status):
    changed = 0
    for inv in queryset:
        try:
            # enforces the rules coded in transition_to()
            # instead of letting admins bypass them
            set_status(inv.pk, inv.owner, status)
            changed += 1
        except (ValidationError, AlreadyPaid, NotFound) as e:
            modeladmin.message_user(
                request, f"{inv}: {e}", level=messages.ERROR)
    if changed:
        modeladmin.message_user(
            request, f"{changed} invoice(s) marked as {status}.",
            level=messages.SUCCESS)


""" Add button/action that call invoice.transition_to("Not Paid") """


@admin.action(description="Mark selected invoices as Not Paid")
def mark_inv_as_not_paid(modeladmin, request, queryset):
    _set_selected_status(modeladmin, request, queryset, STATUS_NOT_PAID)


""" call invoice.transition_to("Due") """


@admin.action(description="Mark selected invoices as Due")
def mark_inv_as_due(modeladmin, request, queryset):
    _set_selected_status(modeladmin, request, queryset, STATUS_DUE)
