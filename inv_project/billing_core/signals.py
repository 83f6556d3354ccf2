from django.db.models.signals import post_delete, post_save, pre_delete
from django.dispatch import receiver

from .exceptions import HasTransactions
from .models import Invoice, InvoiceLine

""" Block invoice deletion while its payment is on record."""


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=Invoice)
def prevent_delete_invoice_with_payments(sender, instance, **kwargs):
    if instance.payments.exists():
        # delete the payment transaction first; that reverses the balance
        raise HasTransactions(
            f"Cannot delete invoice {instance.invoice_number} with a recorded payment.")


"""
    Recalculate invoice totals when a line is added/updated/removed,
    e.g. from the admin inline. The stored VAT amount is kept.
"""


@receiver((post_save, post_delete), sender=InvoiceLine)
def invoice_line_changed(sender, instance, **kwargs):
    try:
        inv = Invoice.objects.get(pk=instance.invoice_id)
    except Invoice.DoesNotExist:
        # the invoice itself is being deleted
        return
    inv.recalc_totals()
    # save only the changed fields to reduce churn
    inv.save(update_fields=["total_without_vat", "total_vat", "total"])
