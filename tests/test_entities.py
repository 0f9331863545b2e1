"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import datetime
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import (
    Account,
    AccountType,
    PeriodReport,
    ReportFilters,
    Transaction,
)


class TestAccount:
    """Tests for Account entity."""

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(1, "Checking", AccountType.ASSET, "Bank", "Checking")
        with pytest.raises(FrozenInstanceError):
            account.name = "Other"

    def test_account_type_is_string_enum(self):
        """Test that account types compare equal to their stored values."""
        assert AccountType("liability") is AccountType.LIABILITY
        assert AccountType.INCOME == "income"


class TestTransaction:
    """Tests for Transaction entity."""

    def test_references(self):
        """Test leg lookup by account ID."""
        txn = Transaction(1, datetime(2025, 1, 1), Decimal("5"), 2, 3)
        assert txn.references(2)
        assert txn.references(3)
        assert not txn.references(4)
        assert txn.tags == ()


class TestReportFilters:
    """Tests for report filters."""

    def test_empty_filters_match_everything(self):
        """Test that an empty filter selects every account."""
        filters = ReportFilters()
        assert filters.is_empty()
        assert filters.matches(Account(1, "A", AccountType.ASSET, "Bank", "Checking"))

    def test_filters_are_and_combined(self):
        """Test that every set field must match."""
        checking = Account(1, "A", AccountType.ASSET, "Bank", "Checking")
        savings = Account(2, "B", AccountType.ASSET, "Bank", "Savings")
        filters = ReportFilters(category="Bank", sub_category="Savings")

        assert not filters.is_empty()
        assert not filters.matches(checking)
        assert filters.matches(savings)
        assert not ReportFilters(category="Bank", account_id=3).matches(savings)


class TestPeriodReport:
    """Tests for PeriodReport helpers."""

    def test_empty_report_totals(self):
        """Test type-scoped totals of a report without categories."""
        report = PeriodReport(
            period="2025-01",
            display_name="1 Jan 2025 - 31 Jan 2025",
            start_date=datetime(2025, 1, 1).date(),
            end_date=datetime(2025, 1, 31).date(),
            category_reports=(),
            total_opening_balance=Decimal("0"),
            total_closing_balance=Decimal("0"),
            total_transactions=0,
        )
        assert report.categories_for(AccountType.ASSET) == ()
        assert report.closing_balance_for(AccountType.ASSET) == 0
