"""Transaction domain service.

Every write refreshes the stored balance memo of the accounts it touches by
replaying their transaction log, inside the same unit of work as the write.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from dateutil.relativedelta import relativedelta

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import derive_current_balance
from ledgerbook.domain.entities import Transaction as TransactionEntity
from ledgerbook.domain.errors import (
    NotFoundError,
    PreconditionError,
    ValidationError,
    account_inactive,
    account_not_found,
    transaction_not_found,
)
from ledgerbook.domain.ledger import has_balance, validate_transaction_fields
from ledgerbook.utils.dates import as_instant, end_of_day

logger = logging.getLogger(__name__)

MAX_FUTURE = relativedelta(years=1)


class TransactionService:
    """Service for managing double-entry transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_date(self, when: datetime, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        if when > now + MAX_FUTURE:
            raise ValidationError("Transaction date cannot be more than 1 year in the future")

    def _check_accounts(self, debit_account_id: int, credit_account_id: int) -> None:
        for account_id, leg in ((debit_account_id, "debit"), (credit_account_id, "credit")):
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            if not account.is_active:
                raise PreconditionError(account_inactive(account_id, leg))

    def _refresh_balances(self, account_ids: Iterable[int]) -> None:
        for account_id in sorted(set(account_ids)):
            account = self.db.get_account(account_id)
            if account is None or not has_balance(account.account_type):
                continue
            balance = derive_current_balance(
                account, self.db.list_transactions(account_id=account_id)
            )
            self.db.update_account(account_id, current_balance=balance)

    def create_transaction(
        self,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal,
        date: Union[date, datetime],
        note: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> int:
        """Create a transaction.

        Args:
            debit_account_id: Account receiving the debit leg
            credit_account_id: Account receiving the credit leg
            amount: Positive amount of both legs
            date: Transaction date; a bare date means local midnight
            note: Optional note
            tags: Optional tags

        Returns:
            Transaction ID

        Raises:
            ValidationError: On a bad amount, equal legs or a date too far ahead
            NotFoundError: If either account does not exist
            PreconditionError: If either account is inactive
        """
        validate_transaction_fields(amount, debit_account_id, credit_account_id)
        when = as_instant(date)
        self._check_date(when)
        self._check_accounts(debit_account_id, credit_account_id)

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                date=when,
                amount=amount,
                debit_account_id=debit_account_id,
                credit_account_id=credit_account_id,
                note=note.strip() if note and note.strip() else None,
                tags=tags,
            )
            self._refresh_balances((debit_account_id, credit_account_id))
        logger.info(
            "created transaction %s: %s from %s to %s",
            transaction_id,
            amount,
            credit_account_id,
            debit_account_id,
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        start_date: Optional[Union[date, datetime]] = None,
        end_date: Optional[Union[date, datetime]] = None,
        account_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions oldest first.

        Bare dates are inclusive of the whole day on both ends.
        """
        start = as_instant(start_date) if start_date is not None else None
        end = None
        if end_date is not None:
            end = end_date if isinstance(end_date, datetime) else end_of_day(end_date)
        return self.db.list_transactions(start_date=start, end_date=end, account_id=account_id)

    def update_transaction(
        self,
        transaction_id: int,
        debit_account_id: Optional[int] = None,
        credit_account_id: Optional[int] = None,
        amount: Optional[Decimal] = None,
        date: Optional[Union[date, datetime]] = None,
        note: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> None:
        """Update a transaction.

        Balances of both the previous and the new legs are re-derived, which
        is equivalent to reversing the old effect and applying the new one.

        Raises:
            NotFoundError: If the transaction or a new account does not exist
            ValidationError: If the merged transaction would be invalid
            PreconditionError: If a leg points at an inactive account
        """
        current = self.require_transaction(transaction_id)

        new_debit = debit_account_id if debit_account_id is not None else current.debit_account_id
        new_credit = credit_account_id if credit_account_id is not None else current.credit_account_id
        new_amount = amount if amount is not None else current.amount
        validate_transaction_fields(new_amount, new_debit, new_credit)

        when = as_instant(date) if date is not None else None
        if when is not None:
            self._check_date(when)
        if debit_account_id is not None or credit_account_id is not None:
            self._check_accounts(new_debit, new_credit)

        with self.db.atomic():
            self.db.update_transaction(
                transaction_id,
                date=when,
                amount=amount,
                debit_account_id=debit_account_id,
                credit_account_id=credit_account_id,
                note=note.strip() if note is not None else None,
                tags=tags,
            )
            self._refresh_balances(
                (current.debit_account_id, current.credit_account_id, new_debit, new_credit)
            )
        logger.info("updated transaction %s", transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and re-derive the balances it affected.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        current = self.require_transaction(transaction_id)
        with self.db.atomic():
            self.db.delete_transaction(transaction_id)
            self._refresh_balances((current.debit_account_id, current.credit_account_id))
        logger.info("deleted transaction %s", transaction_id)
