"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerbook.database.models import (
    Account as ORMAccount,
    RecurringTransaction as ORMRecurringTransaction,
    Transaction as ORMTransaction,
)
from ledgerbook.database.mappers import (
    account_to_domain,
    join_tags,
    recurring_template_to_domain,
    split_tags,
    transaction_to_domain,
)
from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Frequency,
    RecurringTransactionTemplate,
    Transaction,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            name="Checking",
            account_type="asset",
            parent_category="Bank",
            sub_category="Checking",
            opening_balance=Decimal("100.00"),
            current_balance=Decimal("150.00"),
            is_active=True,
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.account_type == AccountType.ASSET
        assert domain_account.parent_category == "Bank"
        assert domain_account.opening_balance == Decimal("100.00")
        assert domain_account.current_balance == Decimal("150.00")
        assert domain_account.created_at == orm_account.created_at


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        orm_txn = ORMTransaction(
            id=7,
            date=datetime(2025, 1, 15, 12, 30),
            amount=Decimal("42.00"),
            debit_account_id=2,
            credit_account_id=1,
            note="Lunch",
            tags="food,work",
        )
        txn = transaction_to_domain(orm_txn)

        assert isinstance(txn, Transaction)
        assert txn.date == datetime(2025, 1, 15, 12, 30)
        assert txn.debit_account_id == 2
        assert txn.credit_account_id == 1
        assert txn.tags == ("food", "work")

    def test_tags_round_trip_helpers(self):
        """Test tag joining drops blanks and splitting tolerates empty values."""
        assert join_tags(["a", " ", " b "]) == "a,b"
        assert join_tags([]) is None
        assert join_tags(None) is None
        assert split_tags(None) == ()
        assert split_tags("a,,b ") == ("a", "b")


class TestRecurringTemplateMapper:
    """Tests for RecurringTransaction mapper."""

    def test_recurring_template_to_domain(self):
        """Test converting ORM RecurringTransaction to domain template."""
        orm_template = ORMRecurringTransaction(
            id=3,
            amount=Decimal("1200.00"),
            debit_account_id=5,
            credit_account_id=1,
            frequency="monthly",
            day_of_recurrence=1,
            start_date=date(2025, 1, 1),
            next_occurrence=date(2025, 2, 1),
            notify_before_days=2,
            is_active=False,
        )
        template = recurring_template_to_domain(orm_template)

        assert isinstance(template, RecurringTransactionTemplate)
        assert template.frequency == Frequency.MONTHLY
        assert template.next_occurrence == date(2025, 2, 1)
        assert template.end_date is None
        assert template.is_active is False
