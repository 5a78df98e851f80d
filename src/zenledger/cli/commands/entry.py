"""Journal entry commands."""

from datetime import date
from pathlib import Path

import click
from zenledger.cli.account_resolution import resolve_account_or_exit
from zenledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from zenledger.cli.error_handling import handle_domain_error
from zenledger.cli.money import amount_in_default_or_exit, entry_currency_or_exit
from zenledger.domain.account import AccountService
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import JournalEntryLine
from zenledger.domain.errors import DomainError
from zenledger.domain.favorite import transfer_lines
from zenledger.domain.journal import JournalService
from zenledger.utils.date_parser import parse_date


def _parse_entry_date(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


def _read_attachment(path: str | None) -> bytes | None:
    return Path(path).read_bytes() if path is not None else None


def _split_line_option(ctx, option: str) -> tuple[str, str]:
    account, sep, amount = option.rpartition("=")
    if not sep or not account.strip() or not amount.strip():
        click.echo(f"Error: Expected ACCOUNT=AMOUNT, got '{option}'", err=True)
        ctx.exit(1)
    return account.strip(), amount.strip()


@click.group()
def entry_group():
    """Post and review journal entries."""
    pass


@entry_group.command("post")
@click.argument("description")
@click.option("--debit", "debits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Debit line")
@click.option("--credit", "credits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Credit line")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--currency", help="Currency code the amounts are typed in")
@click.option("--attach", type=click.Path(exists=True, dir_okay=False), help="Attach a file")
@click.pass_context
def post_entry(ctx, description, debits, credits, entry_date, currency, attach):
    """Post a balanced journal entry.

    Each --debit and --credit takes ACCOUNT=AMOUNT, where ACCOUNT is a name
    or ID. Debits must equal credits.

    Examples:
        zenledger entry post "Pay bill" --debit "Utilities Expense=100" --credit Cash=100
        zenledger entry post "Split" --debit Rent=60 --debit Utilities=40 --credit Cash=100
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    currency_service = CurrencyService(db)

    typed_in = entry_currency_or_exit(ctx, currency_service, currency)
    lines = []
    for options, side in ((debits, "debit"), (credits, "credit")):
        for option in options:
            account, raw = _split_line_option(ctx, option)
            account_id = resolve_account_or_exit(ctx, account_service, account)
            amount = amount_in_default_or_exit(ctx, currency_service, raw, typed_in)
            lines.append(JournalEntryLine(account_id=account_id, **{side: amount}))

    try:
        entry = JournalService(db).post_entry(
            date=_parse_entry_date(ctx, entry_date) or date.today(),
            description=description,
            lines=lines,
            attachment=_read_attachment(attach),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted entry {entry.id}: {currency_service.format_display(entry.total_debit)}")


@entry_group.command("transfer")
@click.argument("from_account", metavar="FROM")
@click.argument("to_account", metavar="TO")
@click.argument("amount")
@click.option("--description", default="Transfer", show_default=True)
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--currency", help="Currency code the amount is typed in")
@click.pass_context
def transfer(ctx, from_account, to_account, amount, description, entry_date, currency):
    """Move money between two accounts.

    Credits FROM and debits TO with the same amount.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    currency_service = CurrencyService(db)

    from_id = resolve_account_or_exit(ctx, account_service, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, to_account)
    typed_in = entry_currency_or_exit(ctx, currency_service, currency)
    value = amount_in_default_or_exit(ctx, currency_service, amount, typed_in)

    try:
        entry = JournalService(db).post_entry(
            date=_parse_entry_date(ctx, entry_date) or date.today(),
            description=description,
            lines=transfer_lines(from_id, to_id, value),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted transfer {entry.id}: {currency_service.format_display(value)}")


@entry_group.command("list")
@click.option("--account", help="Only entries touching this account (name or ID)")
@click.option("--limit", type=int, help="Show at most this many entries")
@period_options
@click.pass_context
def list_entries(ctx, account, limit, start_date, end_date, **kwargs):
    """List journal entries, newest first."""
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(kwargs),
    )

    entries = JournalService(db).list_entries(start_date=start, end_date=end, account_id=account_id)
    if limit is not None:
        entries = entries[:limit]
    if not entries:
        click.echo("No entries found.")
        return

    currency_service = CurrencyService(db)
    click.echo(f"{'ID':>5}  {'Date':10}  {'Amount':>14}  Description")
    click.echo("-" * 70)
    for entry in entries:
        amount = currency_service.format_display(entry.total_debit)
        click.echo(f"{entry.id:5d}  {entry.date.isoformat()}  {amount:>14}  {entry.description}")


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show the lines of a journal entry."""
    db = ctx.obj["db"]
    try:
        entry = JournalService(db).require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    names = {a.id: a.name for a in AccountService(db).list_accounts()}
    currency_service = CurrencyService(db)
    click.echo(f"Entry {entry.id} on {entry.date.isoformat()}: {entry.description}")
    if entry.attachment is not None:
        click.echo(f"Attachment: {len(entry.attachment)} bytes")
    click.echo(f"{'Account':30}  {'Debit':>14}  {'Credit':>14}")
    click.echo("-" * 62)
    for line in entry.lines:
        debit = currency_service.format_display(line.debit) if line.debit else ""
        credit = currency_service.format_display(line.credit) if line.credit else ""
        name = names.get(line.account_id, f"#{line.account_id}")
        click.echo(f"{name:30}  {debit:>14}  {credit:>14}")


@entry_group.command("revert")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="Reversal date (default: today)")
@click.pass_context
def revert_entry(ctx, entry_id: int, entry_date: str | None):
    """Post a reversal of an entry.

    The original entry is kept; a new entry with debits and credits swapped
    cancels it out.
    """
    db = ctx.obj["db"]
    try:
        reversal = JournalService(db).revert_entry(
            entry_id, on_date=_parse_entry_date(ctx, entry_date)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted reversal {reversal.id} of entry {entry_id}")


def register_commands(cli):
    """Register entry commands with CLI."""
    cli.add_command(entry_group, name="entry")
