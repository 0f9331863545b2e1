"""Period report and income/expense breakdown domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import closing_balance_at, opening_balance_at
from ledgerbook.domain.entities import (
    ACCOUNT_TYPE_ORDER,
    Account,
    AccountType,
    BreakdownRow,
    CategoryReport,
    PeriodReport,
    ReportFilters,
    SubCategoryReport,
    Transaction,
)
from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.ledger import ZERO, has_balance
from ledgerbook.utils.dates import (
    as_instant,
    end_of_day,
    format_display_date,
    iter_days,
    iter_months,
    month_end,
    span_in_days,
    start_of_day,
)

DEFAULT_MAX_DAY_SPAN = 90

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# (account_type, opening, closing, total_debits, total_credits) -> net change
NetChangeStrategy = Callable[[AccountType, Decimal, Decimal, Decimal, Decimal], Decimal]


class BreakdownUnit(str, Enum):
    """Calendar unit of a breakdown row."""

    MONTH = "month"
    DAY = "day"


def balance_or_flow_net_change(
    account_type: AccountType,
    opening: Decimal,
    closing: Decimal,
    total_debits: Decimal,
    total_credits: Decimal,
) -> Decimal:
    """Net change keyed on whether the group shows a balance.

    A non-zero opening or closing balance means closing minus opening;
    otherwise debits minus credits. A balance-carrying group whose balances
    are both exactly zero falls back to the flow formula.
    """
    if opening != 0 or closing != 0:
        return closing - opening
    return total_debits - total_credits


def account_type_net_change(
    account_type: AccountType,
    opening: Decimal,
    closing: Decimal,
    total_debits: Decimal,
    total_credits: Decimal,
) -> Decimal:
    """Net change keyed on account type.

    Asset and liability groups report the balance movement, income groups
    report credits net of debits and expense groups debits net of credits.
    """
    if has_balance(account_type):
        return closing - opening
    if account_type == AccountType.INCOME:
        return total_credits - total_debits
    return total_debits - total_credits


def transactions_in_range(
    transactions: Iterable[Transaction], start_date: date, end_date: date
) -> list[Transaction]:
    """Transactions inside ``[start_of_day(start), end_of_day(end)]``."""
    start = start_of_day(start_date)
    end = end_of_day(end_date)
    return [txn for txn in transactions if start <= as_instant(txn.date) <= end]


def select_accounts(
    accounts: Iterable[Account], filters: Optional[ReportFilters]
) -> list[Account]:
    """Accounts satisfying every set filter."""
    if filters is None or filters.is_empty():
        return list(accounts)
    return [acc for acc in accounts if filters.matches(acc)]


def filter_transactions(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    filters: Optional[ReportFilters],
) -> list[Transaction]:
    """Transactions with at least one leg on an account selected by the filters."""
    if filters is None or filters.is_empty():
        return list(transactions)
    selected_ids = {acc.id for acc in select_accounts(accounts, filters)}
    return [
        txn
        for txn in transactions
        if txn.debit_account_id in selected_ids or txn.credit_account_id in selected_ids
    ]


def group_accounts(
    accounts: Iterable[Account],
) -> dict[AccountType, dict[str, dict[str, list[Account]]]]:
    """Partition accounts by type, then parent category, then sub-category.

    Category and sub-category order follows first appearance in ``accounts``.
    """
    grouped: dict[AccountType, dict[str, dict[str, list[Account]]]] = {}
    for account in accounts:
        categories = grouped.setdefault(account.account_type, {})
        sub_categories = categories.setdefault(account.parent_category, {})
        sub_categories.setdefault(account.sub_category, []).append(account)
    return grouped


def build_sub_category_report(
    sub_category: str,
    members: Sequence[Account],
    range_transactions: Sequence[Transaction],
    all_transactions: Sequence[Transaction],
    start_date: date,
    end_date: date,
    net_change: NetChangeStrategy = account_type_net_change,
) -> SubCategoryReport:
    """Aggregate one sub-category group over the report window.

    Balances replay ``all_transactions``; debits, credits and counts only
    look at ``range_transactions``.
    """
    account_ids = tuple(acc.id for acc in members)
    id_set = set(account_ids)
    account_type = members[0].account_type

    group_transactions = tuple(
        txn
        for txn in range_transactions
        if txn.debit_account_id in id_set or txn.credit_account_id in id_set
    )

    opening = ZERO
    closing = ZERO
    start = start_of_day(start_date)
    end = end_of_day(end_date)
    for account in members:
        if has_balance(account.account_type):
            opening += opening_balance_at(account, all_transactions, start)
            closing += closing_balance_at(account, all_transactions, end)

    total_debits = sum(
        (txn.amount for txn in group_transactions if txn.debit_account_id in id_set),
        ZERO,
    )
    total_credits = sum(
        (txn.amount for txn in group_transactions if txn.credit_account_id in id_set),
        ZERO,
    )

    return SubCategoryReport(
        sub_category=sub_category,
        account_ids=account_ids,
        opening_balance=opening,
        closing_balance=closing,
        transaction_count=len(group_transactions),
        total_debits=total_debits,
        total_credits=total_credits,
        net_change=net_change(account_type, opening, closing, total_debits, total_credits),
        transactions=group_transactions,
    )


def generate_period_report(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    start_date: date,
    end_date: date,
    filters: Optional[ReportFilters] = None,
    net_change: NetChangeStrategy = account_type_net_change,
) -> PeriodReport:
    """Build the type > category > sub-category report for a date window.

    Transactions whose accounts are missing from ``accounts`` are counted in
    the report total but belong to no group.

    Raises:
        ValidationError: If start_date is after end_date
    """
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")

    selected = select_accounts(accounts, filters)
    range_transactions = filter_transactions(
        transactions_in_range(transactions, start_date, end_date), accounts, filters
    )
    grouped = group_accounts(selected)

    category_reports: list[CategoryReport] = []
    total_opening = ZERO
    total_closing = ZERO

    for account_type in ACCOUNT_TYPE_ORDER:
        for category, sub_groups in grouped.get(account_type, {}).items():
            sub_reports = tuple(
                build_sub_category_report(
                    sub_category,
                    members,
                    range_transactions,
                    transactions,
                    start_date,
                    end_date,
                    net_change=net_change,
                )
                for sub_category, members in sub_groups.items()
            )
            category_opening = sum((r.opening_balance for r in sub_reports), ZERO)
            category_closing = sum((r.closing_balance for r in sub_reports), ZERO)
            category_reports.append(
                CategoryReport(
                    category=category,
                    account_type=account_type,
                    sub_category_reports=sub_reports,
                    total_opening_balance=category_opening,
                    total_closing_balance=category_closing,
                    total_transactions=sum(r.transaction_count for r in sub_reports),
                )
            )
            total_opening += category_opening
            total_closing += category_closing

    return PeriodReport(
        period=start_date.strftime("%Y-%m"),
        display_name=f"{format_display_date(start_date)} - {format_display_date(end_date)}",
        start_date=start_date,
        end_date=end_date,
        category_reports=tuple(category_reports),
        total_opening_balance=total_opening,
        total_closing_balance=total_closing,
        total_transactions=len(range_transactions),
    )


def generate_monthly_report(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    year: int,
    month: int,
    filters: Optional[ReportFilters] = None,
    net_change: NetChangeStrategy = account_type_net_change,
) -> PeriodReport:
    """Period report covering one calendar month."""
    first = date(year, month, 1)
    return generate_period_report(
        accounts,
        transactions,
        first,
        month_end(first),
        filters=filters,
        net_change=net_change,
    )


def _income_expense(
    transactions: Iterable[Transaction], accounts_by_id: dict[int, Account]
) -> tuple[Decimal, Decimal]:
    income = ZERO
    expense = ZERO
    for txn in transactions:
        credit_account = accounts_by_id.get(txn.credit_account_id)
        debit_account = accounts_by_id.get(txn.debit_account_id)
        if credit_account is not None and credit_account.account_type == AccountType.INCOME:
            income += txn.amount
        if debit_account is not None and debit_account.account_type == AccountType.EXPENSE:
            expense += txn.amount
    return income, expense


def generate_breakdown(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    start_date: date,
    end_date: date,
    unit: BreakdownUnit | str = BreakdownUnit.MONTH,
    filters: Optional[ReportFilters] = None,
    max_day_span: int = DEFAULT_MAX_DAY_SPAN,
) -> list[BreakdownRow]:
    """Income and expense per calendar month or day, oldest first.

    Income is the sum of credit legs on income accounts and expense the sum
    of debit legs on expense accounts, regardless of category grouping.

    Raises:
        ValidationError: If the range is inverted or a day breakdown spans
            more than ``max_day_span`` days
    """
    unit = BreakdownUnit(unit)
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")
    if unit == BreakdownUnit.DAY and span_in_days(start_date, end_date) + 1 > max_day_span:
        raise ValidationError(
            f"Maximum {max_day_span} days difference allowed between start and end dates"
        )

    accounts_by_id = {acc.id: acc for acc in accounts}
    scoped = filter_transactions(
        transactions_in_range(transactions, start_date, end_date), accounts, filters
    )

    buckets: dict[date, list[Transaction]] = defaultdict(list)
    for txn in scoped:
        day = as_instant(txn.date).date()
        key = day.replace(day=1) if unit == BreakdownUnit.MONTH else day
        buckets[key].append(txn)

    if unit == BreakdownUnit.MONTH:
        periods = [
            (first, last, first.strftime("%Y-%m"), first.replace(day=1))
            for first, last in iter_months(start_date, end_date)
        ]
    else:
        periods = [
            (day, day, day.isoformat(), day) for day in iter_days(start_date, end_date)
        ]

    rows: list[BreakdownRow] = []
    for first, last, label, key in periods:
        income, expense = _income_expense(buckets.get(key, ()), accounts_by_id)
        rows.append(
            BreakdownRow(
                label=label,
                start_date=first,
                end_date=last,
                income=income,
                expense=expense,
            )
        )
    return rows


def available_months(transactions: Iterable[Transaction]) -> list[tuple[int, int, str]]:
    """Distinct ``(year, month, display_name)`` with activity, newest first."""
    months = {
        (as_instant(txn.date).year, as_instant(txn.date).month) for txn in transactions
    }
    return [
        (year, month, f"{MONTH_NAMES[month - 1]} {year}")
        for year, month in sorted(months, reverse=True)
    ]


class ReportService:
    """Service that loads a ledger snapshot and builds reports from it."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_snapshot(self) -> tuple[list[Account], list[Transaction]]:
        """Return every account, active or not, and the full transaction log."""
        return self.db.list_accounts(active_only=False), self.db.list_transactions()

    def period_report(
        self,
        start_date: date,
        end_date: date,
        filters: Optional[ReportFilters] = None,
        legacy_net_change: bool = False,
    ) -> PeriodReport:
        """Build a period report.

        Args:
            start_date: First day of the window
            end_date: Last day of the window (inclusive)
            filters: Optional category, sub-category or account filters
            legacy_net_change: Use the balance-or-flow net change rule

        Returns:
            PeriodReport for the window
        """
        accounts, transactions = self.load_snapshot()
        strategy = balance_or_flow_net_change if legacy_net_change else account_type_net_change
        return generate_period_report(
            accounts, transactions, start_date, end_date, filters=filters, net_change=strategy
        )

    def breakdown(
        self,
        start_date: date,
        end_date: date,
        unit: BreakdownUnit | str = BreakdownUnit.MONTH,
        filters: Optional[ReportFilters] = None,
        max_day_span: int = DEFAULT_MAX_DAY_SPAN,
    ) -> list[BreakdownRow]:
        """Build a month-by-month or day-by-day income/expense breakdown."""
        accounts, transactions = self.load_snapshot()
        return generate_breakdown(
            accounts,
            transactions,
            start_date,
            end_date,
            unit=unit,
            filters=filters,
            max_day_span=max_day_span,
        )

    def available_months(self) -> list[tuple[int, int, str]]:
        """Months that have at least one transaction, newest first."""
        return available_months(self.db.list_transactions())
