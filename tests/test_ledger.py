"""Tests for double-entry sign rules and input validation."""

from datetime import datetime
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import Account, AccountType, Transaction
from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.ledger import (
    ZERO,
    balance_change,
    has_balance,
    leg_change,
    parse_account_type,
    validate_account_fields,
    validate_transaction_fields,
)


@pytest.mark.parametrize("amount", [Decimal("0.01"), Decimal("12.50"), Decimal("99999.99")])
def test_asset_debit_raises_and_credit_lowers(amount):
    assert balance_change(AccountType.ASSET, amount, is_debit=True) == amount
    assert balance_change(AccountType.ASSET, amount, is_debit=False) == -amount


@pytest.mark.parametrize("amount", [Decimal("0.01"), Decimal("12.50"), Decimal("99999.99")])
def test_liability_debit_lowers_and_credit_raises(amount):
    assert balance_change(AccountType.LIABILITY, amount, is_debit=True) == -amount
    assert balance_change(AccountType.LIABILITY, amount, is_debit=False) == amount


@pytest.mark.parametrize("account_type", [AccountType.INCOME, AccountType.EXPENSE])
def test_flow_accounts_never_change_balance(account_type):
    assert balance_change(account_type, Decimal("10"), True) == ZERO
    assert balance_change(account_type, Decimal("10"), False) == ZERO
    assert not has_balance(account_type)


def test_leg_change_picks_the_referenced_leg():
    checking = Account(1, "Checking", AccountType.ASSET, "Bank", "Checking", Decimal("0"))
    card = Account(2, "Card", AccountType.LIABILITY, "Credit", "Visa", Decimal("0"))
    other = Account(3, "Other", AccountType.ASSET, "Bank", "Other", Decimal("0"))
    # Paying the card from checking: debit card, credit checking
    txn = Transaction(1, datetime(2025, 1, 5), Decimal("40"), card.id, checking.id)

    assert leg_change(card, txn) == Decimal("-40")
    assert leg_change(checking, txn) == Decimal("-40")
    assert leg_change(other, txn) == ZERO


def test_parse_account_type():
    assert parse_account_type(" Asset ") == AccountType.ASSET
    assert parse_account_type(AccountType.INCOME) == AccountType.INCOME
    with pytest.raises(ValidationError, match="Invalid account type"):
        parse_account_type("equity")


@pytest.mark.parametrize(
    "amount, debit, credit, message",
    [
        (Decimal("0"), 1, 2, "positive"),
        (Decimal("-5"), 1, 2, "positive"),
        (None, 1, 2, "positive"),
        (Decimal("5"), None, 2, "Debit account"),
        (Decimal("5"), 1, None, "Credit account"),
        (Decimal("5"), 1, 1, "different"),
    ],
)
def test_validate_transaction_fields_rejects(amount, debit, credit, message):
    with pytest.raises(ValidationError, match=message):
        validate_transaction_fields(amount, debit, credit)


def test_validate_account_fields_defaults_balance_for_assets():
    assert validate_account_fields("Cash", AccountType.ASSET, "Bank", "Cash") == ZERO
    assert (
        validate_account_fields("Cash", AccountType.ASSET, "Bank", "Cash", Decimal("15"))
        == Decimal("15")
    )


def test_validate_account_fields_drops_balance_for_flow_accounts():
    assert validate_account_fields("Salary", AccountType.INCOME, "Work", "Pay", Decimal("15")) is None


def test_validate_account_fields_rejects_negative_and_blank():
    with pytest.raises(ValidationError, match="negative"):
        validate_account_fields("Cash", AccountType.ASSET, "Bank", "Cash", Decimal("-1"))
    with pytest.raises(ValidationError, match="name"):
        validate_account_fields("  ", AccountType.ASSET, "Bank", "Cash")
    with pytest.raises(ValidationError, match="Parent category"):
        validate_account_fields("Cash", AccountType.ASSET, "", "Cash")
    with pytest.raises(ValidationError, match="Sub-category"):
        validate_account_fields("Cash", AccountType.ASSET, "Bank", "")
