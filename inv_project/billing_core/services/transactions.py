import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import NotFound, StaleReferenceWarning
from ..models import Account, Client, Transaction
from ..models.transaction import TX_TYPES
from ..money import round2, to_decimal
from .ledger import adjust_balance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reversal:
    """What delete_transaction did to the account balance."""
    transaction_id: int
    account_id: Optional[int]
    delta: Decimal
    warning: Optional[StaleReferenceWarning] = None

    @property
    def applied(self):
        return self.warning is None


# ----------------------------
# Ledger entry workflows
# ----------------------------
def create_transaction(owner, type, amount, account_id, source, payment_method,
                       client_id=None, date=None, reference="", invoice=None):
    """
    Record an income/expense entry and move the account balance.
    The insert and the balance update commit together.
    """
    if type not in dict(TX_TYPES):
        raise ValidationError("Transaction type must be Income or Expense")
    amount = round2(to_decimal(amount, "amount"))
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if not account_id:
        raise ValidationError("Account ID is required")

    with transaction.atomic():
        account = Account.objects.get_owned(owner, account_id)
        client = Client.objects.get_owned(owner, client_id) if client_id else None

        tx = Transaction(
            owner=owner,
            type=type,
            amount=amount,
            account=account,
            client=client,
            invoice=invoice,
            source=(source or "").strip(),
            payment_method=payment_method,
            reference=reference or "",
        )
        if date:
            tx.date = date
        tx.full_clean(exclude=["owner", "account", "client", "invoice"])
        tx.save()

        adjust_balance(account.pk, owner, tx.signed_amount)

    logger.info("%s transaction %s of %s recorded on account %s",
                tx.type, tx.pk, tx.amount, account.pk)
    return tx


def delete_transaction(transaction_id, owner):
    """
    Delete an entry and apply the inverse balance adjustment.
    A missing account doesn't stop the delete; it comes back as a warning.
    """
    with transaction.atomic():
        tx = Transaction.objects.get_owned(owner, transaction_id, lock=True)
        delta = -tx.signed_amount
        account_id = tx.account_id
        warning = None

        if account_id is None:
            warning = StaleReferenceWarning(
                f"Transaction {tx.pk} has no account; balance not reversed")
        else:
            try:
                adjust_balance(account_id, owner, delta)
            except NotFound:
                warning = StaleReferenceWarning(
                    f"Account {account_id} for transaction {tx.pk} no longer exists; "
                    "balance not reversed")

        invoice = tx.invoice
        tx_pk = tx.pk
        tx.delete()

        # an invoice is never Paid without its payment on record
        if invoice is not None and invoice.is_paid and not invoice.payments.exists():
            invoice.reopen()
            logger.info("Invoice %s reopened after its payment was deleted",
                        invoice.invoice_number)

    if warning is not None:
        logger.warning(str(warning))
    else:
        logger.info("Transaction %s deleted, account %s adjusted by %s",
                    tx_pk, account_id, delta)
    return Reversal(tx_pk, account_id, delta, warning)


def list_transactions(owner):
    return (
        Transaction.objects.for_owner(owner)
        .select_related("account", "client")
        .order_by("-date", "-created_at", "-id")
    )
