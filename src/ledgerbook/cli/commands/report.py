"""Report commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import period_options, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.config import get_settings
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import ACCOUNT_TYPE_ORDER, ReportFilters
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.report import BreakdownUnit, ReportService
from ledgerbook.utils.amount_parser import format_amount
from ledgerbook.utils.date_parser import get_date_range

INDENT_SIZE = 4


def _filters_from_options(ctx, category, sub_category, account) -> ReportFilters:
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)
    return ReportFilters(category=category, sub_category=sub_category, account_id=account_id)


def _resolve_range(ctx, start_date, end_date, flags, default_period):
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=flags,
        default_range=get_date_range(default_period),
    )
    if start is None:
        start = get_date_range(default_period)[0]
    if end is None:
        end = get_date_range(default_period)[1]
    return start, end


@click.group()
def report_group():
    """Period reports and income/expense breakdowns."""
    pass


@report_group.command("period")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--category", help="Only accounts in this parent category")
@click.option("--sub-category", help="Only accounts in this sub-category")
@click.option("--account", help="Only this account (name or ID)")
@click.option(
    "--legacy-net-change",
    is_flag=True,
    help="Net change is closing - opening when a balance exists, else debits - credits",
)
@click.option("--show-transactions", is_flag=True, help="List transactions under each sub-category")
@click.pass_context
def period_report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    category: str | None,
    sub_category: str | None,
    account: str | None,
    legacy_net_change: bool,
    show_transactions: bool,
) -> None:
    """Show balances and activity grouped by type, category and sub-category.

    Defaults to the current month.

    Examples:
        ledgerbook report period --last-month
        ledgerbook report period --start-date 2025-01-01 --end-date 2025-03-31 --category Bank
    """
    flags = {
        "this-month": this_month,
        "this-year": this_year,
        "this-week": this_week,
        "last-month": last_month,
        "last-year": last_year,
        "last-week": last_week,
    }
    start, end = _resolve_range(ctx, start_date, end_date, flags, "this-month")
    filters = _filters_from_options(ctx, category, sub_category, account)

    service = ReportService(ctx.obj["db"])
    try:
        report = service.period_report(
            start, end, filters=filters, legacy_net_change=legacy_net_change
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nReport: {report.display_name}")
    if not report.category_reports:
        click.echo("No accounts found.")
        return

    for account_type in ACCOUNT_TYPE_ORDER:
        categories = report.categories_for(account_type)
        if not categories:
            continue
        click.echo()
        click.echo(account_type.value.upper())
        click.echo("=" * 96)
        click.echo(
            f"{'':<36} {'Opening':>12} {'Closing':>12} {'Debits':>12} "
            f"{'Credits':>12} {'Net':>12}"
        )
        for cat in categories:
            click.echo(
                f"{cat.category:<36} {format_amount(cat.total_opening_balance):>12} "
                f"{format_amount(cat.total_closing_balance):>12}"
            )
            for sub in cat.sub_category_reports:
                indent = " " * INDENT_SIZE
                click.echo(
                    f"{indent}{sub.sub_category:<{36 - INDENT_SIZE}} "
                    f"{format_amount(sub.opening_balance):>12} "
                    f"{format_amount(sub.closing_balance):>12} "
                    f"{format_amount(sub.total_debits):>12} "
                    f"{format_amount(sub.total_credits):>12} "
                    f"{format_amount(sub.net_change):>12}"
                )
                if show_transactions:
                    for txn in sub.transactions:
                        click.echo(
                            f"{indent * 2}#{txn.id} {txn.date.strftime('%Y-%m-%d')} "
                            f"{format_amount(txn.amount)} {txn.note or ''}".rstrip()
                        )

    click.echo("-" * 96)
    click.echo(
        f"{'TOTAL':<36} {format_amount(report.total_opening_balance):>12} "
        f"{format_amount(report.total_closing_balance):>12}  "
        f"Transactions: {report.total_transactions}"
    )


@report_group.command("breakdown")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option(
    "--unit",
    type=click.Choice([u.value for u in BreakdownUnit], case_sensitive=False),
    default=BreakdownUnit.MONTH.value,
    show_default=True,
    help="One row per calendar month or per day",
)
@click.option("--category", help="Only accounts in this parent category")
@click.option("--sub-category", help="Only accounts in this sub-category")
@click.option("--account", help="Only this account (name or ID)")
@click.pass_context
def breakdown(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    unit: str,
    category: str | None,
    sub_category: str | None,
    account: str | None,
) -> None:
    """Show income and expense per month or per day.

    Defaults to the current year for months and the current month for days.

    Examples:
        ledgerbook report breakdown --this-year
        ledgerbook report breakdown --unit day --last-month
    """
    flags = {
        "this-month": this_month,
        "this-year": this_year,
        "this-week": this_week,
        "last-month": last_month,
        "last-year": last_year,
        "last-week": last_week,
    }
    default_period = "this-year" if unit == BreakdownUnit.MONTH.value else "this-month"
    start, end = _resolve_range(ctx, start_date, end_date, flags, default_period)
    filters = _filters_from_options(ctx, category, sub_category, account)

    service = ReportService(ctx.obj["db"])
    try:
        rows = service.breakdown(
            start,
            end,
            unit=unit,
            filters=filters,
            max_day_span=get_settings().max_day_span,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{'Period':<12} {'Income':>14} {'Expense':>14} {'Net':>14}")
    click.echo("-" * 56)
    for row in rows:
        click.echo(
            f"{row.label:<12} {format_amount(row.income):>14} "
            f"{format_amount(row.expense):>14} {format_amount(row.income - row.expense):>14}"
        )
    click.echo("-" * 56)
    total_income = sum(row.income for row in rows)
    total_expense = sum(row.expense for row in rows)
    click.echo(
        f"{'TOTAL':<12} {format_amount(total_income):>14} "
        f"{format_amount(total_expense):>14} {format_amount(total_income - total_expense):>14}"
    )


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
