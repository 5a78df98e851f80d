"""Main CLI entry point."""

import click
from zenledger.database.factories import create_sqlite_database
from zenledger.logging_config import LOG_LEVELS, configure_logging

# Import and register all commands at module level
from zenledger.cli.commands import (
    account,
    backup,
    currency,
    entry,
    favorite,
    init_ledger,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ZENLEDGER_DB_PATH environment variable)",
    envvar="ZENLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="ZENLEDGER_LOG_LEVEL",
    help="Logging verbosity (written to stderr)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Zenledger - double-entry bookkeeping for personal finances.

    Keep a chart of accounts, post balanced journal entries in any of your
    currencies and review trial balances and financial summaries.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the database only when a command runs (not for --help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


account.register_commands(cli)
currency.register_commands(cli)
entry.register_commands(cli)
favorite.register_commands(cli)
report.register_commands(cli)
backup.register_commands(cli)
init_ledger.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
