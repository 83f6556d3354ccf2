import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..exceptions import AlreadyPaid
from ..models import Invoice
from ..models.transaction import TX_INCOME
from ..money import round2, to_decimal
from .transactions import create_transaction

logger = logging.getLogger(__name__)


# ----------------------------
# Payment-related workflows
# ----------------------------
def record_payment(invoice_id, owner, account_id, amount=None,
                   method="BankTransfer", date=None, note=""):
    """
    Mark an invoice Paid and record the matching income on an account.
    Locks the invoice row; status change, ledger entry and balance update
    either all commit or all roll back.
    Returns (invoice, transaction).
    """
    # Everything inside either succeeds
    # as one unit or rolls back if something fails
    with transaction.atomic():
        invoice = Invoice.objects.get_owned(owner, invoice_id, lock=True)
        if invoice.is_paid:
            raise AlreadyPaid(f"Invoice {invoice.invoice_number} is already paid")

        amount = invoice.total if amount in (None, "") else round2(to_decimal(amount))
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than zero")

        invoice.mark_paid(timezone.now())

        reference = f"Invoice #{invoice.invoice_number}"
        if note:
            reference = f"{reference} – {note}"
        tx = create_transaction(
            owner,
            type=TX_INCOME,
            amount=amount,
            account_id=account_id,
            source=invoice.client.name,
            payment_method=method,
            client_id=invoice.client_id,
            date=date,
            reference=reference[:200],
            invoice=invoice,
        )

    logger.info("Invoice %s paid: %s received on account %s (transaction %s)",
                invoice.invoice_number, amount, account_id, tx.pk)
    return invoice, tx
