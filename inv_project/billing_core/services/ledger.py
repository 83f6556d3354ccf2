import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, models, transaction
from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce

from ..exceptions import DuplicateAccountNumber, HasTransactions, NotFound
from ..models import Account
from ..models.transaction import TX_EXPENSE, TX_INCOME
from ..money import ZERO, round2, to_decimal

logger = logging.getLogger(__name__)

# Fields a user may edit after creation. balance is not one of them.
EDITABLE_ACCOUNT_FIELDS = ("account_no", "name", "note")


# ----------------------------
# Account workflows
# ----------------------------
def create_account(owner, account_no, name, initial_balance, note=""):
    if initial_balance is None or initial_balance == "":
        raise ValidationError(
            "Please provide account number, name, and initial balance.")
    opening = round2(to_decimal(initial_balance, "initial_balance"))
    if opening < 0:
        raise ValidationError("Initial balance cannot be negative")

    account = Account(
        owner=owner,
        account_no=str(account_no or "").strip(),
        name=str(name or "").strip(),
        opening_balance=opening,
        balance=opening,  # starts equal to the opening balance
        note=note or "",
    )
    account.full_clean(exclude=["owner"], validate_unique=False)

    if Account.objects.for_owner(owner).filter(account_no=account.account_no).exists():
        raise DuplicateAccountNumber("Account number already exists.")
    try:
        # savepoint so a lost race on the unique constraint doesn't poison
        # the caller's transaction
        with transaction.atomic():
            account.save()
    except IntegrityError:
        raise DuplicateAccountNumber("Account number already exists.")

    logger.info("Account %s (%s) created for owner %s with balance %s",
                account.pk, account.account_no, owner.pk, opening)
    return account


def list_accounts(owner):
    return Account.objects.for_owner(owner).order_by("created_at", "id")


def update_account(account_id, owner, **fields):
    if "balance" in fields or "opening_balance" in fields:
        raise ValidationError("Account balance can only change through transactions")
    unknown = set(fields) - set(EDITABLE_ACCOUNT_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")

    with transaction.atomic():
        account = Account.objects.get_owned(owner, account_id, lock=True)
        for field, value in fields.items():
            value = str(value or "")
            setattr(account, field, value if field == "note" else value.strip())
        account.full_clean(exclude=["owner"], validate_unique=False)

        clash = (
            Account.objects.for_owner(owner)
            .filter(account_no=account.account_no)
            .exclude(pk=account.pk)
        )
        if clash.exists():
            raise DuplicateAccountNumber("Account number already exists.")
        try:
            with transaction.atomic():
                account.save(update_fields=list(fields))
        except IntegrityError:
            raise DuplicateAccountNumber("Account number already exists.")
    return account


def adjust_balance(account_id, owner, delta):
    """
    balance += delta as one UPDATE statement, scoped by owner.
    Two concurrent adjustments on the same account can't lose each other.
    """
    delta = round2(to_decimal(delta, "delta"))
    updated = (
        Account.objects.for_owner(owner)
        .filter(pk=account_id)
        .update(balance=F("balance") + delta)
    )
    if not updated:
        raise NotFound("Account not found")

    account = Account.objects.for_owner(owner).get(pk=account_id)
    logger.info("Account %s balance adjusted by %s to %s",
                account_id, delta, account.balance)
    if account.balance < 0:
        # soft invariant: allowed, but worth a look
        logger.warning("Account %s balance is negative (%s)",
                       account_id, account.balance)
    return account


def delete_account(account_id, owner, orphan=False):
    """
    Block deletion while transactions reference the account.
    With orphan=True the transactions survive with account=NULL.
    """
    with transaction.atomic():
        account = Account.objects.get_owned(owner, account_id, lock=True)
        referenced = account.transactions.count()
        if referenced and not orphan:
            raise HasTransactions(
                f"Account {account.account_no} still has {referenced} transaction(s)")
        if referenced:
            logger.warning(
                "Deleting account %s; %s transaction(s) keep no account",
                account.pk, referenced)
        account.delete()


# ------------------------------------
# Balance vs. transaction log
# ------------------------------------
def expected_balance(account):
    """opening_balance + Σ income − Σ expense over the account's transactions."""
    agg = account.transactions.aggregate(
        income=Coalesce(Sum("amount", filter=Q(type=TX_INCOME)), ZERO,
                        output_field=models.DecimalField()),
        expense=Coalesce(Sum("amount", filter=Q(type=TX_EXPENSE)), ZERO,
                         output_field=models.DecimalField()),
    )
    return round2(account.opening_balance + agg["income"] - agg["expense"])


def find_balance_drift(owner=None):
    """Return [(account, expected)] for accounts whose stored balance is off."""
    accounts = Account.objects.all() if owner is None else Account.objects.for_owner(owner)
    drifted = []
    for account in accounts.order_by("id"):
        expected = expected_balance(account)
        if Decimal(account.balance) != expected:
            drifted.append((account, expected))
    return drifted
