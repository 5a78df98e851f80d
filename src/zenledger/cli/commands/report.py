"""Financial report commands."""

import click
from zenledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from zenledger.domain.balance import BalanceService
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import AccountType


def _date_window(ctx, start_date, end_date, kwargs):
    return resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(kwargs),
    )


def _window_label(start, end) -> str:
    if start is None and end is None:
        return "all time"
    return f"{start.isoformat() if start else '...'} to {end.isoformat() if end else '...'}"


@click.group()
def report_group():
    """Trial balance and financial statements."""
    pass


@report_group.command("trial-balance")
@period_options
@click.pass_context
def trial_balance(ctx, start_date, end_date, **kwargs):
    """Show every non-zero balance under its natural column.

    Debit and credit totals must agree; a mismatch is flagged with a
    warning rather than an error.
    """
    db = ctx.obj["db"]
    start, end = _date_window(ctx, start_date, end_date, kwargs)
    report = BalanceService(db).trial_balance(start_date=start, end_date=end)
    fmt = CurrencyService(db).format_display

    click.echo(f"\nTrial Balance ({_window_label(start, end)})")
    click.echo("=" * 66)
    click.echo(f"{'Account':30}  {'Debit':>15}  {'Credit':>15}")
    click.echo("-" * 66)
    for row in report.rows:
        debit = fmt(row.debit) if row.debit else ""
        credit = fmt(row.credit) if row.credit else ""
        click.echo(f"{row.account.name:30}  {debit:>15}  {credit:>15}")
    click.echo("-" * 66)
    click.echo(f"{'Total':30}  {fmt(report.total_debits):>15}  {fmt(report.total_credits):>15}")

    if report.warning:
        click.echo(f"\nWARNING: {report.warning}", err=True)


@report_group.command("summary")
@period_options
@click.pass_context
def summary(ctx, start_date, end_date, **kwargs):
    """Show balance sheet and income statement totals."""
    db = ctx.obj["db"]
    start, end = _date_window(ctx, start_date, end_date, kwargs)
    totals = BalanceService(db).financial_summary(start_date=start, end_date=end)
    fmt = CurrencyService(db).format_display

    click.echo(f"\nFinancial Summary ({_window_label(start, end)})")
    click.echo("=" * 40)
    for label, amount in (
        ("Assets", totals.assets),
        ("Investments", totals.investments),
        ("Liabilities", totals.liabilities),
        ("Equity", totals.equity),
    ):
        click.echo(f"{label:20} {fmt(amount):>18}")
    click.echo("-" * 40)
    for label, amount in (
        ("Revenue", totals.revenue),
        ("Expenses", totals.expenses),
        ("Net Income", totals.net_income),
    ):
        click.echo(f"{label:20} {fmt(amount):>18}")


@report_group.command("balances")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="Only show accounts of this type",
)
@click.option("--all", "show_all", is_flag=True, help="Include zero balances")
@period_options
@click.pass_context
def balances(ctx, account_type, show_all, start_date, end_date, **kwargs):
    """Show the balance of every account."""
    db = ctx.obj["db"]
    start, end = _date_window(ctx, start_date, end_date, kwargs)
    rows = BalanceService(db).account_balances(start_date=start, end_date=end)
    fmt = CurrencyService(db).format_display

    if account_type is not None:
        rows = [(a, b) for a, b in rows if a.type.value.lower() == account_type.lower()]
    if not show_all:
        rows = [(a, b) for a, b in rows if b != 0]
    if not rows:
        click.echo("No balances to show.")
        return

    for acc, balance in rows:
        click.echo(f"{acc.name:30} {acc.type.value:12} {fmt(balance):>15}")


def register_commands(cli):
    """Register report commands with CLI."""
    cli.add_command(report_group, name="report")
