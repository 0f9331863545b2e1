"""Tests for transaction commands."""

from datetime import datetime
from decimal import Decimal

from ledgerbook.cli.main import cli


def test_transaction_add(cli_runner, temp_db, sample_accounts, transaction_service):
    """Test recording a transaction by account name."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "transaction", "add",
            "--debit", "Groceries",
            "--credit", "Card",
            "--amount", "42.50",
            "--date", "2025-01-15 18:30",
            "--note", "Weekly shop",
            "--tag", "food,weekly",
        ],
    )

    assert result.exit_code == 0
    assert "Created transaction 1" in result.output
    txn = transaction_service.get_transaction(1)
    assert txn.date == datetime(2025, 1, 15, 18, 30)
    assert txn.amount == Decimal("42.50")
    assert txn.tags == ("food", "weekly")


def test_transaction_add_rejects_negative_amount(cli_runner, temp_db, sample_accounts):
    """Test that signs are rejected; the legs carry direction."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "transaction", "add",
            "--debit", "Groceries",
            "--credit", "Card",
            "--amount", "-42.50",
        ],
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_transaction_add_same_account(cli_runner, temp_db, sample_accounts):
    """Test that both legs must differ."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "transaction", "add",
            "--debit", "Checking",
            "--credit", "Checking",
            "--amount", "5",
            "--date", "2025-01-01",
        ],
    )

    assert result.exit_code == 1
    assert "must be different" in result.output


def test_transaction_list(cli_runner, temp_db, sample_accounts, transaction_service):
    """Test listing with a date range and an account filter."""
    transaction_service.create_transaction(
        sample_accounts["Checking"], sample_accounts["Salary"], Decimal("3000"), datetime(2025, 1, 3)
    )
    transaction_service.create_transaction(
        sample_accounts["Rent"], sample_accounts["Savings"], Decimal("1200"), datetime(2025, 2, 1)
    )
    db_path = temp_db.database_path

    result = cli_runner.invoke(
        cli,
        ["--db-path", db_path, "transaction", "list", "--start-date", "2025-01-01", "--end-date", "2025-01-31"],
    )
    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    assert "3,000.00" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "transaction", "list", "--account", "Savings"]
    )
    assert "Found 1 transaction(s)" in result.output
    assert "1,200.00" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "transaction", "list", "--this-month", "--last-month"]
    )
    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_transaction_update_and_delete(cli_runner, temp_db, sample_accounts, transaction_service):
    """Test updating a leg and deleting with confirmation."""
    transaction_id = transaction_service.create_transaction(
        sample_accounts["Rent"], sample_accounts["Checking"], Decimal("900"), datetime(2025, 1, 1)
    )
    db_path = temp_db.database_path

    result = cli_runner.invoke(
        cli,
        ["--db-path", db_path, "transaction", "update", str(transaction_id), "--credit", "Savings"],
    )
    assert result.exit_code == 0
    assert transaction_service.get_transaction(transaction_id).credit_account_id == sample_accounts["Savings"]

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "transaction", "delete", str(transaction_id)], input="n\n"
    )
    assert "Deletion cancelled" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "transaction", "delete", str(transaction_id), "--yes"]
    )
    assert result.exit_code == 0
    assert f"Deleted transaction {transaction_id}" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "transaction", "delete", str(transaction_id), "--yes"]
    )
    assert result.exit_code == 1
    assert "not found" in result.output
