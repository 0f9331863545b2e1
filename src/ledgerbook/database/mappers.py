"""Mapper functions to convert SQLAlchemy models into domain entities."""

from typing import Optional

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    RecurringTransaction as ORMRecurringTransaction,
    Transaction as ORMTransaction,
)


def split_tags(raw: Optional[str]) -> tuple[str, ...]:
    """Split a stored comma-joined tag string, dropping blanks."""
    if not raw:
        return ()
    return tuple(tag.strip() for tag in raw.split(",") if tag.strip())


def join_tags(tags: Optional[list[str]]) -> Optional[str]:
    """Join tags for storage. Returns None when there are no tags."""
    if not tags:
        return None
    cleaned = [tag.strip() for tag in tags if tag and tag.strip()]
    return ",".join(cleaned) or None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        parent_category=orm_account.parent_category,
        sub_category=orm_account.sub_category,
        opening_balance=orm_account.opening_balance,
        is_active=orm_account.is_active,
        current_balance=orm_account.current_balance,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        debit_account_id=orm_transaction.debit_account_id,
        credit_account_id=orm_transaction.credit_account_id,
        note=orm_transaction.note,
        tags=split_tags(orm_transaction.tags),
        created_at=orm_transaction.created_at,
    )


def recurring_template_to_domain(
    orm_template: ORMRecurringTransaction,
) -> domain.RecurringTransactionTemplate:
    """Convert SQLAlchemy RecurringTransaction model to domain template entity."""
    return domain.RecurringTransactionTemplate(
        id=orm_template.id,
        amount=orm_template.amount,
        debit_account_id=orm_template.debit_account_id,
        credit_account_id=orm_template.credit_account_id,
        frequency=domain.Frequency(orm_template.frequency),
        day_of_recurrence=orm_template.day_of_recurrence,
        start_date=orm_template.start_date,
        next_occurrence=orm_template.next_occurrence,
        end_date=orm_template.end_date,
        last_created_date=orm_template.last_created_date,
        notify_before_days=orm_template.notify_before_days,
        is_active=orm_template.is_active,
        note=orm_template.note,
        created_at=orm_template.created_at,
    )
