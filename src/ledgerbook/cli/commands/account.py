"""Account management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.ledger import has_balance
from ledgerbook.utils.amount_parser import format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_date

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage ledger accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    required=True,
    help="Account type",
)
@click.option("--category", required=True, help="Parent category (e.g., 'Bank')")
@click.option("--sub-category", required=True, help="Sub-category (e.g., 'Checking')")
@click.option("--opening-balance", help="Opening balance (asset and liability only)")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str,
    category: str,
    sub_category: str,
    opening_balance: str | None,
):
    """Create a new account.

    Examples:
        ledgerbook account create "Checking" --type asset --category Bank --sub-category Checking --opening-balance 1000
        ledgerbook account create "Salary" --type income --category Work --sub-category Salary
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    balance = None
    if opening_balance is not None:
        try:
            balance = parse_amount(opening_balance, allow_zero=True)
        except ValueError as e:
            click.echo(f"Error: Invalid opening balance: {e}", err=True)
            ctx.exit(1)

    try:
        account_id = service.create_account(
            name=name,
            account_type=account_type,
            parent_category=category,
            sub_category=sub_category,
            opening_balance=balance,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, show_all: bool):
    """List accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(active_only=not show_all)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 90)
    for acc in accounts:
        balance = ""
        if has_balance(acc.account_type):
            balance = format_amount(service.get_balance(acc.id))
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:9s} | "
            f"{acc.parent_category} > {acc.sub_category:15s} | {balance:>12}{status}"
        )


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerbook account rename "Checking" "Main Checking"
        ledgerbook account rename 1 "Main Checking"
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed account to '{new_name.strip()}'")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account.

    Deactivated accounts keep their history and still appear in reports,
    but cannot be used for new transactions.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.deactivate_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {account_id}")


@account_group.command("reactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def reactivate_account(ctx, account: str) -> None:
    """Reactivate a deactivated account."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.reactivate_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Reactivated account {account_id}")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Balance at the end of this date (YYYY-MM-DD or relative)")
@click.pass_context
def account_balance(ctx, account: str, as_of: str | None) -> None:
    """Show an account balance replayed from its transactions.

    Examples:
        ledgerbook account balance Checking
        ledgerbook account balance 1 --as-of "last month"
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    cutoff = None
    if as_of is not None:
        try:
            cutoff = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    acc = service.require_account(account_id)
    if not has_balance(acc.account_type):
        click.echo(
            f"Account '{acc.name}' is an {acc.account_type.value} account and carries no balance"
        )
        return

    balance = service.get_balance(account_id, as_of=cutoff)
    suffix = f" as of {cutoff.isoformat()}" if cutoff else ""
    click.echo(f"{acc.name}: {format_amount(balance)}{suffix}")


def register_commands(cli: click.Group) -> None:
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
