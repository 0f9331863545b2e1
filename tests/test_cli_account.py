"""Tests for account commands."""

from ledgerbook.cli.main import cli


def _create(cli_runner, db_path, name, *args):
    return cli_runner.invoke(cli, ["--db-path", db_path, "account", "create", name, *args])


def test_account_create_asset(cli_runner, temp_db):
    """Test creating an asset account with an opening balance."""
    result = _create(
        cli_runner,
        temp_db.database_path,
        "Checking",
        "--type", "asset",
        "--category", "Bank",
        "--sub-category", "Checking",
        "--opening-balance", "$1,000",
    )

    assert result.exit_code == 0
    assert "Created account 'Checking' (ID: 1)" in result.output


def test_account_create_income_rejects_opening_balance(cli_runner, temp_db):
    """Test that income accounts cannot carry an opening balance."""
    result = _create(
        cli_runner,
        temp_db.database_path,
        "Salary",
        "--type", "income",
        "--category", "Work",
        "--sub-category", "Salary",
        "--opening-balance", "10",
    )

    assert result.exit_code == 1
    assert "only allowed for asset and liability" in result.output


def test_account_create_duplicate(cli_runner, temp_db, sample_accounts):
    """Test creating duplicate account name fails."""
    result = _create(
        cli_runner,
        temp_db.database_path,
        "CHECKING",
        "--type", "asset",
        "--category", "Bank",
        "--sub-category", "Other",
    )

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_hides_inactive(cli_runner, temp_db, sample_accounts, account_service):
    """Test that deactivated accounts only show with --all."""
    account_service.deactivate_account(sample_accounts["Savings"])

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 0
    assert "Checking" in result.output
    assert "1,000.00" in result.output
    assert "Savings" not in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "list", "--all"]
    )
    assert "Savings" in result.output
    assert "(inactive)" in result.output


def test_account_rename_deactivate_reactivate(cli_runner, temp_db, sample_accounts, account_service):
    """Test renaming and toggling an account by name."""
    db_path = temp_db.database_path

    result = cli_runner.invoke(cli, ["--db-path", db_path, "account", "rename", "Rent", "Housing"])
    assert result.exit_code == 0
    assert "Renamed account to 'Housing'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", db_path, "account", "deactivate", "housing"])
    assert result.exit_code == 0

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "account", "reactivate", str(sample_accounts["Rent"])]
    )
    assert result.exit_code == 0
    assert f"Reactivated account {sample_accounts['Rent']}" in result.output


def test_account_unknown(cli_runner, temp_db):
    """Test resolving an unknown account name."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "deactivate", "Nope"]
    )

    assert result.exit_code == 1
    assert "Account 'Nope' not found" in result.output


def test_account_balance(cli_runner, temp_db, sample_accounts, transaction_service):
    """Test showing current and historical balances."""
    from datetime import date
    from decimal import Decimal

    transaction_service.create_transaction(
        sample_accounts["Checking"], sample_accounts["Salary"], Decimal("500"), date(2025, 1, 15)
    )
    db_path = temp_db.database_path

    result = cli_runner.invoke(cli, ["--db-path", db_path, "account", "balance", "Checking"])
    assert result.exit_code == 0
    assert "Checking: 1,500.00" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "account", "balance", "Checking", "--as-of", "2025-01-14"]
    )
    assert "Checking: 1,000.00 as of 2025-01-14" in result.output

    result = cli_runner.invoke(cli, ["--db-path", db_path, "account", "balance", "Salary"])
    assert result.exit_code == 0
    assert "carries no balance" in result.output
