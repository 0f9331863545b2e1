"""Utility for resolving account names to IDs."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Names are matched case-insensitively, active accounts first.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        account_service.require_account(account)
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None:
        account_service.require_account(account_id)
        return account_id

    wanted = account.strip().lower()
    matches = [acc for acc in account_service.list_accounts() if acc.name.lower() == wanted]
    matches.sort(key=lambda acc: not acc.is_active)
    if matches:
        return matches[0].id

    raise NotFoundError(f"Account '{account}' not found")
