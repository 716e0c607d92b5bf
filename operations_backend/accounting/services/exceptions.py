# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

Every error carries a stable machine-readable `code`; API views return it
next to the human-readable detail.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""

    code = "accounting_error"


class MappingNotFoundError(AccountingServiceError):
    """Raised when an event needs a mapping side/weight that has no active rows."""

    code = "mapping_not_found"


class MappingAmbiguousError(AccountingServiceError):
    """Raised when several active mappings tie for the top priority."""

    code = "mapping_ambiguous"


class PeriodClosedError(AccountingServiceError):
    """Raised when attempting to post into a closed accounting period."""

    code = "period_closed"


class PeriodMissingError(AccountingServiceError):
    """Raised when periods are mandatory and none covers the entry date."""

    code = "period_missing"


class PeriodStateError(AccountingServiceError):
    """Raised on an invalid period transition (close twice, reopen an open period)."""

    code = "period_state"


class UnauthorizedError(AccountingServiceError):
    """Raised when the period reopen credential does not match."""

    code = "unauthorized"


class UnbalancedEntryError(AccountingServiceError):
    """Raised when computed debits and credits differ (mapping/weight misconfiguration)."""

    code = "unbalanced_entry"


class AlreadyPostedError(AccountingServiceError):
    """Raised on a retried event whose reference key is already posted."""

    code = "already_posted"

    def __init__(self, message: str, *, entry_id=None):
        super().__init__(message)
        self.entry_id = entry_id


class VariantCostLockTimeoutError(AccountingServiceError):
    """Raised when a variant cost row lock cannot be acquired in time."""

    code = "variant_lock_timeout"


class InsufficientStockError(AccountingServiceError):
    """Raised when an outbound movement would take a variant below zero."""

    code = "insufficient_stock"


class PostingEventError(AccountingServiceError):
    """Raised when an event payload is malformed."""

    code = "invalid_event"


class NothingToPostError(AccountingServiceError):
    """Raised when every computed line amount is zero."""

    code = "nothing_to_post"
