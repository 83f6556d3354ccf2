class BillingError(Exception):
    """Base class for domain errors returned to API callers."""
    pass


class NotFound(BillingError):
    """Raised when an entity is missing or belongs to another owner."""
    pass


class DuplicateKey(BillingError):
    """Raised when an owner-scoped business key is already taken."""
    pass


class DuplicateAccountNumber(DuplicateKey):
    """Raised when an owner already has an account with this number."""
    pass


class AlreadyPaid(BillingError):
    """Raised when a paid invoice would be paid again or edited."""
    pass


class HasTransactions(BillingError):
    """Raised when deleting a record that ledger entries still reference."""
    pass


class StaleReferenceWarning(UserWarning):
    """A reversal could not be applied because its account is gone."""
    pass
