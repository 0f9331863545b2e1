"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PreconditionError(DomainError):
    """Entity exists but is in a state that forbids the operation."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def template_not_found(template_id: int) -> str:
    """Return message for missing recurring transaction template."""
    return f"Recurring transaction {template_id} not found"


def account_inactive(account_id: int, leg: str) -> str:
    """Return message when a transaction leg points at a deactivated account."""
    return f"{leg.capitalize()} account {account_id} is inactive"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name already in use."""
    return (
        f"An account with the name '{name}' already exists. "
        "Please use a different name."
    )
