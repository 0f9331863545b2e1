"""Domain layer for ledgerbook application.

Services live in their own modules (``ledgerbook.domain.account`` and so on)
and are not re-exported here, because the database layer imports the
entities through this package.
"""

from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Frequency,
    PeriodReport,
    RecurringTransactionTemplate,
    ReportFilters,
    Transaction,
)
from ledgerbook.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)

__all__ = [
    "Account",
    "AccountType",
    "Frequency",
    "PeriodReport",
    "RecurringTransactionTemplate",
    "ReportFilters",
    "Transaction",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "PreconditionError",
    "ValidationError",
]
