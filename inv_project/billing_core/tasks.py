import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def verify_account_balances(owner_id=None, repair=False):
    """
    Recompute each account balance from its transaction log and report
    accounts whose stored balance disagrees. With repair=True the stored
    balance is rewritten to the recomputed value.
    """
    # import lazily to avoid circular imports at module import time
    from .models import Account, User
    from .services.ledger import find_balance_drift

    owner = User.objects.get(pk=owner_id) if owner_id is not None else None

    report = []
    for account, expected in find_balance_drift(owner):
        logger.warning("Account %s balance drift: stored %s, expected %s",
                       account.pk, account.balance, expected)
        report.append({
            "account_id": account.pk,
            "stored": str(account.balance),
            "expected": str(expected),
        })
        if repair:
            Account.objects.filter(pk=account.pk).update(balance=expected)
            logger.info("Account %s balance reset to %s", account.pk, expected)
    return report
