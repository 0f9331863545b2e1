"""Transaction management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import period_options, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_datetime


def _parse_tags(tags: tuple[str, ...]) -> list[str] | None:
    if not tags:
        return None
    return [part.strip() for tag in tags for part in tag.split(",") if part.strip()]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--debit", required=True, help="Debit account name or ID")
@click.option("--credit", required=True, help="Credit account name or ID")
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option(
    "--date",
    "txn_date",
    default="today",
    show_default=True,
    help="Date or date-time (YYYY-MM-DD, 'YYYY-MM-DD HH:MM' or relative like 'yesterday')",
)
@click.option("--note", help="Note")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable or comma-separated)")
@click.pass_context
def add_transaction(
    ctx,
    debit: str,
    credit: str,
    amount: str,
    txn_date: str,
    note: str | None,
    tags: tuple[str, ...],
) -> None:
    """Record a double-entry transaction.

    The debit account receives the value and the credit account gives it.

    Examples:
        ledgerbook transaction add --debit Groceries --credit Checking --amount 42.50
        ledgerbook transaction add --debit Checking --credit Salary --amount 3000 --date 2025-01-31
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = resolve_account_or_exit(ctx, account_service, credit)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        when = parse_datetime(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = transaction_service.create_transaction(
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=txn_amount,
            date=when,
            note=note,
            tags=_parse_tags(tags),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--account", help="Only transactions touching this account (name or ID)")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    account: str | None,
) -> None:
    """List transactions oldest first."""
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transactions = transaction_service.list_transactions(
        start_date=start, end_date=end, account_id=account_id
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<17} {'Amount':>12}  {'Debit':<18} {'Credit':<18} {'Note':<25}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        note = (txn.note or "")[:25]
        click.echo(
            f"{txn.id:<6} {txn.date.strftime('%Y-%m-%d %H:%M'):<17} "
            f"{format_amount(txn.amount):>12}  "
            f"{names.get(txn.debit_account_id, 'Unknown'):<18} "
            f"{names.get(txn.credit_account_id, 'Unknown'):<18} {note:<25}"
        )
    click.echo("-" * 100)
    total = sum(txn.amount for txn in transactions)
    click.echo(f"{'TOTAL':<6} {'':<17} {format_amount(total):>12}  Count: {len(transactions)}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--debit", help="Debit account name or ID")
@click.option("--credit", help="Credit account name or ID")
@click.option("--amount", help="Transaction amount")
@click.option("--date", "txn_date", help="Date or date-time")
@click.option("--note", help="Note (empty string clears it)")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable or comma-separated)")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    debit: str | None,
    credit: str | None,
    amount: str | None,
    txn_date: str | None,
    note: str | None,
    tags: tuple[str, ...],
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        ledgerbook transaction update 1 --amount 75.00
        ledgerbook transaction update 1 --debit "Dining Out" --note ""
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit) if debit else None
    credit_id = resolve_account_or_exit(ctx, account_service, credit) if credit else None

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    when = None
    if txn_date is not None:
        try:
            when = parse_datetime(txn_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_service.update_transaction(
            transaction_id,
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=txn_amount,
            date=when,
            note=note,
            tags=_parse_tags(tags),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        ledgerbook transaction delete 1
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
