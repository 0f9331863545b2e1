"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Reports and schedules are computed from snapshots of these
entities and never mutate them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Chart-of-accounts type of a ledger account."""

    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"


# Fixed processing order for reports
ACCOUNT_TYPE_ORDER = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.INCOME,
    AccountType.EXPENSE,
)


class Frequency(str, Enum):
    """Recurrence frequency of a recurring transaction template."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity.

    ``opening_balance`` and ``current_balance`` only apply to asset and
    liability accounts. ``current_balance`` is a memo of the replayed
    transaction log and is never used as input to reports.
    """

    id: int
    name: str
    account_type: AccountType
    parent_category: str
    sub_category: str
    opening_balance: Optional[Decimal] = None
    is_active: bool = True
    current_balance: Optional[Decimal] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Double-entry transaction domain entity.

    Exactly one debit leg and one credit leg of the same positive amount.
    """

    id: int
    date: datetime
    amount: Decimal
    debit_account_id: int
    credit_account_id: int
    note: Optional[str] = None
    tags: tuple[str, ...] = ()
    created_at: Optional[datetime] = None

    def references(self, account_id: int) -> bool:
        """Return True if either leg points at the account."""
        return account_id in (self.debit_account_id, self.credit_account_id)


@dataclass(frozen=True)
class RecurringTransactionTemplate:
    """Rule that periodically produces transactions with the same legs."""

    id: int
    amount: Decimal
    debit_account_id: int
    credit_account_id: int
    frequency: Frequency
    day_of_recurrence: int
    start_date: date
    next_occurrence: date
    end_date: Optional[date] = None
    last_created_date: Optional[date] = None
    notify_before_days: Optional[int] = None
    is_active: bool = True
    note: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubCategoryReport:
    """Aggregated figures for one sub-category over a report window."""

    sub_category: str
    account_ids: tuple[int, ...]
    opening_balance: Decimal
    closing_balance: Decimal
    transaction_count: int
    total_debits: Decimal
    total_credits: Decimal
    net_change: Decimal
    transactions: tuple[Transaction, ...] = ()


@dataclass(frozen=True)
class CategoryReport:
    """Parent category roll-up of its sub-category reports."""

    category: str
    account_type: AccountType
    sub_category_reports: tuple[SubCategoryReport, ...]
    total_opening_balance: Decimal
    total_closing_balance: Decimal
    total_transactions: int


@dataclass(frozen=True)
class PeriodReport:
    """Full report for a date window, grouped type > category > sub-category."""

    period: str
    display_name: str
    start_date: date
    end_date: date
    category_reports: tuple[CategoryReport, ...]
    total_opening_balance: Decimal
    total_closing_balance: Decimal
    total_transactions: int

    def categories_for(self, account_type: AccountType) -> tuple[CategoryReport, ...]:
        """Return the category reports of one account type."""
        return tuple(
            report
            for report in self.category_reports
            if report.account_type == account_type
        )

    def opening_balance_for(self, account_type: AccountType) -> Decimal:
        """Return the opening balance total scoped to one account type."""
        return sum(
            (r.total_opening_balance for r in self.categories_for(account_type)),
            Decimal("0"),
        )

    def closing_balance_for(self, account_type: AccountType) -> Decimal:
        """Return the closing balance total scoped to one account type."""
        return sum(
            (r.total_closing_balance for r in self.categories_for(account_type)),
            Decimal("0"),
        )


@dataclass(frozen=True)
class BreakdownRow:
    """Income and expense totals for one calendar unit."""

    label: str
    start_date: date
    end_date: date
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")


@dataclass(frozen=True)
class ReportFilters:
    """Optional narrowing of a report; set fields are AND-combined.

    Every set field must hold for the same account. A category filter plus a
    sub-category filter therefore selects accounts carrying both, not a
    transaction whose debit leg matches one and credit leg the other.
    """

    category: Optional[str] = None
    sub_category: Optional[str] = None
    account_id: Optional[int] = None

    def is_empty(self) -> bool:
        """Return True if no filter field is set."""
        return (
            self.category is None
            and self.sub_category is None
            and self.account_id is None
        )

    def matches(self, account: Account) -> bool:
        """Return True if this one account satisfies every set filter."""
        if self.category is not None and account.parent_category != self.category:
            return False
        if self.sub_category is not None and account.sub_category != self.sub_category:
            return False
        if self.account_id is not None and account.id != self.account_id:
            return False
        return True


@dataclass(frozen=True)
class ReminderPayload:
    """Notification request handed to the reminder collaborator."""

    template_id: int
    fire_at: datetime
    title: str
    body: str
    data: dict = field(default_factory=dict)
