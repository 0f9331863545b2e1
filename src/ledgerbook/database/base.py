"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Frequency,
    RecurringTransactionTemplate,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Unit of work: writes inside the block commit together or not at all.

        Blocks may nest; only the outermost one commits.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        parent_category: str,
        sub_category: str,
        opening_balance: Optional[Decimal] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, active_only: bool = False) -> list[Account]:
        """List accounts ordered by name."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
        current_balance: Optional[Decimal] = None,
    ) -> None:
        """Update account fields. None leaves a field unchanged."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: datetime,
        amount: Decimal,
        debit_account_id: int,
        credit_account_id: int,
        note: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[datetime] = None,
        amount: Optional[Decimal] = None,
        debit_account_id: Optional[int] = None,
        credit_account_id: Optional[int] = None,
        note: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> None:
        """Update transaction fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        account_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, oldest first, with optional inclusive bounds.

        ``account_id`` keeps transactions with either leg on that account.
        """
        pass

    # Recurring template operations
    @abstractmethod
    def create_recurring_template(
        self,
        amount: Decimal,
        debit_account_id: int,
        credit_account_id: int,
        frequency: Frequency,
        day_of_recurrence: int,
        start_date: date,
        next_occurrence: date,
        end_date: Optional[date] = None,
        notify_before_days: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        """Create a recurring transaction template. Returns template ID."""
        pass

    @abstractmethod
    def get_recurring_template(self, template_id: int) -> Optional[RecurringTransactionTemplate]:
        """Get recurring transaction template by ID."""
        pass

    @abstractmethod
    def list_recurring_templates(self, active_only: bool = False) -> list[RecurringTransactionTemplate]:
        """List recurring transaction templates ordered by next occurrence."""
        pass

    @abstractmethod
    def update_recurring_template(self, template_id: int, **fields: Any) -> None:
        """Update template fields.

        Every keyword given is written, so passing ``end_date=None`` clears
        the end date.
        """
        pass
