"""Balance engine.

Balances are always re-derived by replaying the transaction log from the
account's opening balance. Nothing here trusts a stored running balance,
so retroactive inserts, edits and deletes are reflected on the next call.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Union

from ledgerbook.domain.entities import Account, Transaction
from ledgerbook.domain.ledger import ZERO, has_balance, leg_change
from ledgerbook.utils.dates import as_instant, end_of_day, start_of_day

Instant = Union[date, datetime]


def _replay(account: Account, transactions: Iterable[Transaction], include) -> Decimal:
    balance = account.opening_balance if account.opening_balance is not None else ZERO
    for txn in transactions:
        if txn.references(account.id) and include(as_instant(txn.date)):
            balance += leg_change(account, txn)
    return balance


def opening_balance_at(
    account: Account, transactions: Iterable[Transaction], instant: Instant
) -> Decimal:
    """Balance just before ``instant``.

    A bare date is anchored at local midnight. Income and expense accounts
    always return zero.
    """
    if not has_balance(account.account_type):
        return ZERO
    if not isinstance(instant, datetime):
        instant = start_of_day(instant)
    return _replay(account, transactions, lambda when: when < instant)


def closing_balance_at(
    account: Account, transactions: Iterable[Transaction], instant: Instant
) -> Decimal:
    """Balance at ``instant``, inclusive.

    A bare date is anchored at the end of that day. Income and expense
    accounts always return zero.
    """
    if not has_balance(account.account_type):
        return ZERO
    if not isinstance(instant, datetime):
        instant = end_of_day(instant)
    return _replay(account, transactions, lambda when: when <= instant)


def derive_current_balance(account: Account, transactions: Iterable[Transaction]) -> Decimal:
    """Balance after every transaction in the log."""
    if not has_balance(account.account_type):
        return ZERO
    return _replay(account, transactions, lambda when: True)
