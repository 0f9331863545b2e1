"""Tests for report commands."""

from datetime import datetime
from decimal import Decimal

import pytest

from ledgerbook.cli.main import cli


@pytest.fixture
def january(sample_accounts, transaction_service):
    """Record a month of activity."""
    transaction_service.create_transaction(
        sample_accounts["Checking"], sample_accounts["Salary"], Decimal("3000"), datetime(2025, 1, 3)
    )
    transaction_service.create_transaction(
        sample_accounts["Groceries"], sample_accounts["Card"], Decimal("120"), datetime(2025, 1, 5)
    )
    transaction_service.create_transaction(
        sample_accounts["Rent"], sample_accounts["Checking"], Decimal("1200"), datetime(2025, 1, 31, 20, 0)
    )
    return sample_accounts


def test_report_period(cli_runner, temp_db, january):
    """Test the grouped period report."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "report", "period",
            "--start-date", "2025-01-01",
            "--end-date", "2025-01-31",
        ],
    )

    assert result.exit_code == 0
    assert "Report: 1 Jan 2025 - 31 Jan 2025" in result.output
    for heading in ("ASSET", "LIABILITY", "INCOME", "EXPENSE"):
        assert heading in result.output
    # Checking closes at 1000 + 3000 - 1200
    assert "2,800.00" in result.output
    assert "Transactions: 3" in result.output


def test_report_period_filters_and_transactions(cli_runner, temp_db, january):
    """Test narrowing to one sub-category and listing its transactions."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "report", "period",
            "--start-date", "2025-01-01",
            "--end-date", "2025-01-31",
            "--category", "Living",
            "--sub-category", "Housing",
            "--show-transactions",
        ],
    )

    assert result.exit_code == 0
    assert "ASSET" not in result.output
    assert "Housing" in result.output
    assert "2025-01-31 1,200.00" in result.output
    assert "Transactions: 1" in result.output


def test_report_period_legacy_net_change(cli_runner, temp_db, january):
    """Test that the legacy rule reports income as debits minus credits."""
    args = [
        "--db-path", temp_db.database_path,
        "report", "period",
        "--start-date", "2025-01-01",
        "--end-date", "2025-01-31",
        "--account", "Salary",
    ]

    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "-3,000.00" not in result.output

    result = cli_runner.invoke(cli, args + ["--legacy-net-change"])
    assert "-3,000.00" in result.output


def test_report_period_inverted_range(cli_runner, temp_db, january):
    """Test that an inverted range is rejected."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "report", "period",
            "--start-date", "2025-02-01",
            "--end-date", "2025-01-01",
        ],
    )

    assert result.exit_code == 1
    assert "Start date must not be after end date" in result.output


def test_report_breakdown_month(cli_runner, temp_db, january):
    """Test the month-by-month breakdown."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "report", "breakdown",
            "--start-date", "2024-12-01",
            "--end-date", "2025-01-31",
        ],
    )

    assert result.exit_code == 0
    assert "2024-12" in result.output
    assert "2025-01" in result.output
    assert "3,000.00" in result.output
    assert "1,320.00" in result.output


def test_report_breakdown_day_limit(cli_runner, temp_db, january, monkeypatch):
    """Test that day breakdowns honor the configured span limit."""
    from ledgerbook.config import get_settings

    monkeypatch.setenv("LEDGERBOOK_MAX_DAY_SPAN", "10")
    get_settings.cache_clear()
    try:
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "report", "breakdown",
                "--unit", "day",
                "--start-date", "2025-01-01",
                "--end-date", "2025-01-31",
            ],
        )
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 1
    assert "Maximum 10 days" in result.output
