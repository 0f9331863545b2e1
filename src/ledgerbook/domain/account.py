"""Account domain service."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import closing_balance_at, derive_current_balance
from ledgerbook.domain.entities import Account as AccountEntity, AccountType
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)
from ledgerbook.domain.ledger import parse_account_type, validate_account_fields

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing ledger accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        wanted = name.strip().lower()
        for acc in self.db.list_accounts(active_only=True):
            if acc.id != exclude_id and acc.name.strip().lower() == wanted:
                raise ConflictError(duplicate_account_name(name.strip()))

    def create_account(
        self,
        name: str,
        account_type: Union[str, AccountType],
        parent_category: str,
        sub_category: str,
        opening_balance: Optional[Decimal] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name, unique (case-insensitive) among active accounts
            account_type: asset, liability, income or expense
            parent_category: Top-level grouping used by reports
            sub_category: Second-level grouping used by reports
            opening_balance: Starting balance, asset and liability only

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is missing or the balance is negative
            ConflictError: If an active account already uses the name
        """
        account_type = parse_account_type(account_type)
        if opening_balance is not None and account_type not in (
            AccountType.ASSET,
            AccountType.LIABILITY,
        ):
            raise ValidationError(
                "Opening balance is only allowed for asset and liability accounts"
            )
        balance = validate_account_fields(
            name, account_type, parent_category, sub_category, opening_balance
        )
        self._check_name_available(name)

        account_id = self.db.create_account(
            name=name.strip(),
            account_type=account_type,
            parent_category=parent_category.strip(),
            sub_category=sub_category.strip(),
            opening_balance=balance,
        )
        logger.info("created %s account %s (%s)", account_type.value, account_id, name.strip())
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, active_only: bool = False) -> list[AccountEntity]:
        return self.db.list_accounts(active_only=active_only)

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the new name is blank
            ConflictError: If another active account already uses the name
        """
        self.require_account(account_id)
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        self._check_name_available(name, exclude_id=account_id)
        self.db.update_account(account_id, name=name.strip())

    def deactivate_account(self, account_id: int) -> None:
        """Hide an account from new transactions. History is kept."""
        self.require_account(account_id)
        self.db.update_account(account_id, is_active=False)
        logger.info("deactivated account %s", account_id)

    def reactivate_account(self, account_id: int) -> None:
        """Make a deactivated account usable again.

        Raises:
            ConflictError: If an active account took the name meanwhile
        """
        account = self.require_account(account_id)
        if account.is_active:
            return
        self._check_name_available(account.name, exclude_id=account_id)
        self.db.update_account(account_id, is_active=True)
        logger.info("reactivated account %s", account_id)

    def get_balance(
        self, account_id: int, as_of: Optional[Union[date, datetime]] = None
    ) -> Decimal:
        """Balance of an account replayed from the transaction log.

        Args:
            account_id: Account ID
            as_of: Optional cut-off; a bare date includes the whole day

        Returns:
            Balance, always zero for income and expense accounts

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.require_account(account_id)
        transactions = self.db.list_transactions(account_id=account_id)
        if as_of is None:
            return derive_current_balance(account, transactions)
        return closing_balance_at(account, transactions, as_of)
