"""Main CLI entry point."""

import click
from ledgerbook.config import configure_logging
from ledgerbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    recurring,
    report,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerbook - personal double-entry bookkeeping.

    Record transactions between asset, liability, income and expense
    accounts, schedule recurring ones and report balances over any period.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose=verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
recurring.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
