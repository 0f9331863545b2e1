"""Double-entry sign rules and boundary validation.

Balance behavior by account type:

* asset: increases with debits, decreases with credits
* liability: increases with credits, decreases with debits
* income, expense: never carry a balance; their totals are always derived
  by summing transaction legs over a period
"""

from decimal import Decimal
from typing import Optional

from ledgerbook.domain.entities import Account, AccountType, Transaction
from ledgerbook.domain.errors import ValidationError

ZERO = Decimal("0")

BALANCE_TYPES = frozenset({AccountType.ASSET, AccountType.LIABILITY})


def has_balance(account_type: AccountType) -> bool:
    """Return True for account types that carry a running balance."""
    return account_type in BALANCE_TYPES


def balance_change(account_type: AccountType, amount: Decimal, is_debit: bool) -> Decimal:
    """Balance delta of one transaction leg applied to an account of this type."""
    if account_type == AccountType.ASSET:
        return amount if is_debit else -amount
    if account_type == AccountType.LIABILITY:
        return -amount if is_debit else amount
    return ZERO


def leg_change(account: Account, transaction: Transaction) -> Decimal:
    """Balance delta a transaction contributes to an account.

    Zero when the transaction does not reference the account.
    """
    if transaction.debit_account_id == account.id:
        return balance_change(account.account_type, transaction.amount, True)
    if transaction.credit_account_id == account.id:
        return balance_change(account.account_type, transaction.amount, False)
    return ZERO


def parse_account_type(value: str | AccountType) -> AccountType:
    """Coerce a string into an AccountType.

    Raises:
        ValidationError: If the value is not a known account type
    """
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid account type: {value}")


def validate_transaction_fields(
    amount: Optional[Decimal],
    debit_account_id: Optional[int],
    credit_account_id: Optional[int],
) -> None:
    """Reject malformed double-entry input.

    Raises:
        ValidationError: On a non-positive amount, a missing leg or equal legs
    """
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    if debit_account_id is None:
        raise ValidationError("Debit account is required")
    if credit_account_id is None:
        raise ValidationError("Credit account is required")
    if debit_account_id == credit_account_id:
        raise ValidationError("Debit and credit accounts must be different")


def validate_account_fields(
    name: str,
    account_type: AccountType,
    parent_category: str,
    sub_category: str,
    opening_balance: Optional[Decimal] = None,
) -> Optional[Decimal]:
    """Validate account input and return the normalized opening balance.

    Asset and liability accounts default to an opening balance of zero.
    Income and expense accounts never carry one, so any value passed for
    them is dropped.

    Raises:
        ValidationError: If a required field is blank or the balance is negative
    """
    if not name or not name.strip():
        raise ValidationError("Account name is required")
    if not parent_category or not parent_category.strip():
        raise ValidationError("Parent category is required")
    if not sub_category or not sub_category.strip():
        raise ValidationError("Sub-category is required")

    if not has_balance(account_type):
        return None

    balance = opening_balance if opening_balance is not None else ZERO
    if balance < 0:
        raise ValidationError("Opening balance cannot be negative")
    return balance
