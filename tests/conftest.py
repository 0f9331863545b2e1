"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.recurrence import RecurringTransactionService
from ledgerbook.domain.report import ReportService
from ledgerbook.domain.transaction import TransactionService


class RecordingNotifier:
    """Collects reminder payloads instead of delivering them."""

    def __init__(self):
        self.payloads = []

    def schedule(self, payload):
        self.payloads.append(payload)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that drive the CLI
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def recurring_service(temp_db, transaction_service, notifier):
    """Create a RecurringTransactionService wired to the transaction write path."""
    return RecurringTransactionService(temp_db, writer=transaction_service, notifier=notifier)


@pytest.fixture
def sample_accounts(account_service):
    """Create one account of each type and return their IDs by name."""
    specs = [
        ("Checking", "asset", "Bank", "Checking", Decimal("1000.00")),
        ("Savings", "asset", "Bank", "Savings", Decimal("5000.00")),
        ("Card", "liability", "Credit", "Visa", Decimal("200.00")),
        ("Salary", "income", "Work", "Salary", None),
        ("Groceries", "expense", "Living", "Food", None),
        ("Rent", "expense", "Living", "Housing", None),
    ]
    ids = {}
    for name, account_type, category, sub_category, balance in specs:
        ids[name] = account_service.create_account(
            name=name,
            account_type=account_type,
            parent_category=category,
            sub_category=sub_category,
            opening_balance=balance,
        )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
