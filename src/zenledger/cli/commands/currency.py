"""Currency management commands."""

import click
from zenledger.cli.error_handling import handle_domain_error
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import Currency
from zenledger.domain.errors import DomainError
from zenledger.utils.amount_parser import parse_amount, parse_positive_amount


def resolve_currency_or_exit(ctx, service: CurrencyService, currency: str) -> Currency:
    """Find a currency by code or ID, or exit with a CLI error."""
    found = service.get_currency_by_code(currency)
    if found is None and currency.isdigit():
        found = service.get_currency(int(currency))
    if found is None:
        click.echo(f"Error: Currency '{currency}' not found", err=True)
        ctx.exit(1)
    return found


def _parse_rate(ctx, rate: str):
    try:
        return parse_positive_amount(rate)
    except ValueError as e:
        click.echo(f"Error: Invalid exchange rate: {e}", err=True)
        ctx.exit(1)


@click.group()
def currency_group():
    """Manage currencies and exchange rates."""
    pass


@currency_group.command("add")
@click.argument("code")
@click.option("--name", required=True, help="Currency name, e.g. 'Euro'")
@click.option("--symbol", required=True, help="Display symbol, e.g. '€'")
@click.option(
    "--rate",
    default="1",
    show_default=True,
    help="Units of the default currency per one unit of this currency",
)
@click.pass_context
def add_currency(ctx, code: str, name: str, symbol: str, rate: str):
    """Add a currency.

    The first currency added becomes the default, with a rate of 1.

    Examples:
        zenledger currency add USD --name "US Dollar" --symbol "$"
        zenledger currency add EUR --name Euro --symbol "€" --rate 1.1
    """
    service = CurrencyService(ctx.obj["db"])
    exchange_rate = _parse_rate(ctx, rate)
    try:
        currency = service.add_currency(
            name=name, code=code, symbol=symbol, exchange_rate=exchange_rate
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    default = service.default_currency()
    suffix = " (default)" if default is not None and default.id == currency.id else ""
    click.echo(f"Added currency {currency.code} (ID: {currency.id}){suffix}")


@currency_group.command("list")
@click.pass_context
def list_currencies(ctx):
    """List currencies with their exchange rates."""
    service = CurrencyService(ctx.obj["db"])
    currencies = service.list_currencies()
    if not currencies:
        click.echo("No currencies found.")
        return

    default = service.default_currency()
    display = service.display_currency()
    entry = service.entry_currency()

    click.echo("\nCurrencies:")
    click.echo("-" * 70)
    for c in currencies:
        marks = [
            label
            for label, chosen in (("default", default), ("display", display), ("entry", entry))
            if chosen is not None and chosen.id == c.id
        ]
        flags = f" [{', '.join(marks)}]" if marks else ""
        click.echo(
            f"ID: {c.id:3d} | {c.code:5s} | {c.symbol:3s} | {c.name:20s} | "
            f"Rate: {c.exchange_rate.normalize():f}{flags}"
        )


@currency_group.command("update")
@click.argument("currency")
@click.option("--name", help="New name")
@click.option("--code", help="New code")
@click.option("--symbol", help="New symbol")
@click.option("--rate", help="New exchange rate")
@click.pass_context
def update_currency(ctx, currency: str, name, code, symbol, rate):
    """Update a currency.

    The default currency always keeps a rate of 1.
    """
    service = CurrencyService(ctx.obj["db"])
    found = resolve_currency_or_exit(ctx, service, currency)
    exchange_rate = _parse_rate(ctx, rate) if rate is not None else None

    try:
        service.update_currency(
            found.id, name=name, code=code, symbol=symbol, exchange_rate=exchange_rate
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    updated = service.get_currency(found.id)
    click.echo(f"Updated currency {updated.code} (rate {updated.exchange_rate.normalize():f})")


@currency_group.command("delete")
@click.argument("currency")
@click.pass_context
def delete_currency(ctx, currency: str):
    """Delete a currency other than the default."""
    service = CurrencyService(ctx.obj["db"])
    found = resolve_currency_or_exit(ctx, service, currency)
    try:
        service.delete_currency(found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted currency {found.code}")


@currency_group.command("set-default")
@click.argument("currency")
@click.pass_context
def set_default(ctx, currency: str):
    """Make a currency the default.

    Its rate becomes 1. Other rates are not rescaled; update them so they
    are relative to the new default.
    """
    service = CurrencyService(ctx.obj["db"])
    found = resolve_currency_or_exit(ctx, service, currency)
    service.set_default_currency(found.id)
    click.echo(f"Default currency set to {found.code}")
    click.echo("Remember to review the other exchange rates.")


@currency_group.command("set-display")
@click.argument("currency")
@click.pass_context
def set_display(ctx, currency: str):
    """Choose the currency reports are displayed in."""
    service = CurrencyService(ctx.obj["db"])
    found = resolve_currency_or_exit(ctx, service, currency)
    service.set_display_currency(found.id)
    click.echo(f"Display currency set to {found.code}")


@currency_group.command("set-entry")
@click.argument("currency")
@click.pass_context
def set_entry(ctx, currency: str):
    """Choose the currency new entries are typed in."""
    service = CurrencyService(ctx.obj["db"])
    found = resolve_currency_or_exit(ctx, service, currency)
    service.set_entry_currency(found.id)
    click.echo(f"Entry currency set to {found.code}")


@currency_group.command("convert")
@click.argument("amount")
@click.argument("from_currency", metavar="FROM")
@click.argument("to_currency", metavar="TO")
@click.pass_context
def convert(ctx, amount: str, from_currency: str, to_currency: str):
    """Convert an amount between two currencies.

    Example:
        zenledger currency convert 10 EUR USD
    """
    service = CurrencyService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)
    source = resolve_currency_or_exit(ctx, service, from_currency)
    target = resolve_currency_or_exit(ctx, service, to_currency)

    converted = service.convert(value, source.id, target.id)
    click.echo(f"{value:.2f} {source.code} = {converted:.2f} {target.code}")


def register_commands(cli):
    """Register currency commands with CLI."""
    cli.add_command(currency_group, name="currency")
