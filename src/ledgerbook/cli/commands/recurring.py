"""Recurring transaction commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.config import get_settings
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import Frequency
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.recurrence import ReminderPolicy, RecurringTransactionService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_date, parse_datetime

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def _service(ctx) -> RecurringTransactionService:
    db = ctx.obj["db"]
    return RecurringTransactionService(
        db,
        writer=TransactionService(db),
        policy=ReminderPolicy(hour=get_settings().reminder_hour),
    )


def _describe_schedule(template) -> str:
    if template.frequency == Frequency.DAILY:
        return "daily"
    if template.frequency == Frequency.WEEKLY:
        return f"weekly on {WEEKDAYS[template.day_of_recurrence]}"
    return f"{template.frequency.value} on day {template.day_of_recurrence}"


@click.group()
def recurring_group():
    """Manage recurring transactions."""
    pass


@recurring_group.command("create")
@click.option("--debit", required=True, help="Debit account name or ID")
@click.option("--credit", required=True, help="Credit account name or ID")
@click.option("--amount", required=True, help="Amount of each transaction")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    required=True,
    help="How often the transaction repeats",
)
@click.option(
    "--day",
    type=int,
    default=1,
    show_default=True,
    help="Weekday for weekly (0=Sunday..6=Saturday) or day of month (1-31)",
)
@click.option("--start-date", default="today", show_default=True, help="First day in force")
@click.option("--end-date", help="Last day in force")
@click.option("--notify-before", type=int, help="Days of advance reminder (0 disables)")
@click.option("--note", help="Note copied onto each transaction")
@click.pass_context
def create_recurring(
    ctx,
    debit: str,
    credit: str,
    amount: str,
    frequency: str,
    day: int,
    start_date: str,
    end_date: str | None,
    notify_before: int | None,
    note: str | None,
) -> None:
    """Create a recurring transaction.

    Examples:
        ledgerbook recurring create --debit Rent --credit Checking --amount 1200 --frequency monthly --day 1
        ledgerbook recurring create --debit Gym --credit Card --amount 30 --frequency weekly --day 1 --notify-before 2
    """
    service = _service(ctx)
    account_service = AccountService(ctx.obj["db"])
    debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = resolve_account_or_exit(ctx, account_service, credit)

    try:
        txn_amount = parse_amount(amount)
        start = parse_date(start_date)
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        template_id = service.create_template(
            amount=txn_amount,
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            frequency=frequency,
            day_of_recurrence=day,
            start_date=start,
            end_date=end,
            notify_before_days=notify_before,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    template = service.get_template(template_id)
    click.echo(
        f"Created recurring transaction {template_id} "
        f"(next occurrence {template.next_occurrence.isoformat()})"
    )


@recurring_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include paused templates")
@click.pass_context
def list_recurring(ctx, show_all: bool) -> None:
    """List recurring transactions by next occurrence."""
    service = _service(ctx)
    templates = service.list_templates(active_only=not show_all)
    if not templates:
        click.echo("No recurring transactions found.")
        return

    names = {acc.id: acc.name for acc in AccountService(ctx.obj["db"]).list_accounts()}
    click.echo(f"\n{'ID':<5} {'Next':<11} {'Amount':>12}  {'Debit':<16} {'Credit':<16} Schedule")
    click.echo("-" * 90)
    for t in templates:
        status = "" if t.is_active else " (paused)"
        click.echo(
            f"{t.id:<5} {t.next_occurrence.isoformat():<11} {format_amount(t.amount):>12}  "
            f"{names.get(t.debit_account_id, 'Unknown'):<16} "
            f"{names.get(t.credit_account_id, 'Unknown'):<16} {_describe_schedule(t)}{status}"
        )


@recurring_group.command("pause")
@click.argument("template_id", type=int)
@click.pass_context
def pause_recurring(ctx, template_id: int) -> None:
    """Pause a recurring transaction."""
    try:
        _service(ctx).set_active(template_id, False)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Paused recurring transaction {template_id}")


@recurring_group.command("resume")
@click.argument("template_id", type=int)
@click.pass_context
def resume_recurring(ctx, template_id: int) -> None:
    """Resume a paused recurring transaction."""
    try:
        _service(ctx).set_active(template_id, True)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Resumed recurring transaction {template_id}")


@recurring_group.command("process")
@click.option("--date", "run_date", default="today", show_default=True, help="Day to process")
@click.pass_context
def process_recurring(ctx, run_date: str) -> None:
    """Create the transactions that are due.

    Safe to run more than once a day; a template is materialized at most
    once per day.
    """
    try:
        today = parse_date(run_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    created = _service(ctx).process_due(today=today)
    if not created:
        click.echo("No recurring transactions due.")
        return
    click.echo(f"Created {len(created)} transaction(s): {', '.join(str(i) for i in created)}")


@recurring_group.command("reminders")
@click.option("--now", "now_str", help="Reference time (defaults to the current time)")
@click.pass_context
def list_reminders(ctx, now_str: str | None) -> None:
    """Show the advance reminders that would be scheduled."""
    now = None
    if now_str is not None:
        try:
            now = parse_datetime(now_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    payloads = _service(ctx).schedule_reminders(now=now)
    if not payloads:
        click.echo("No reminders to schedule.")
        return
    for payload in payloads:
        click.echo(f"{payload.fire_at.strftime('%Y-%m-%d %H:%M')}  {payload.body}")


def register_commands(cli: click.Group) -> None:
    """Register recurring transaction commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
