"""CLI helpers for amounts typed by the user."""

from decimal import Decimal

import click

from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import Currency
from zenledger.utils.amount_parser import parse_positive_amount


def entry_currency_or_exit(ctx, service: CurrencyService, code: str | None) -> Currency | None:
    """Currency amounts are typed in: the given code, else the entry currency."""
    if code is None:
        return service.entry_currency()
    currency = service.get_currency_by_code(code)
    if currency is None:
        click.echo(f"Error: Currency '{code}' not found", err=True)
        ctx.exit(1)
    return currency


def amount_in_default_or_exit(
    ctx, service: CurrencyService, raw: str, currency: Currency | None
) -> Decimal:
    """Parse a positive amount and convert it into the default currency."""
    try:
        amount = parse_positive_amount(raw)
    except ValueError as e:
        click.echo(f"Error: Invalid amount '{raw}': {e}", err=True)
        ctx.exit(1)
    if currency is None:
        return amount
    return service.to_default(amount, currency.id)
