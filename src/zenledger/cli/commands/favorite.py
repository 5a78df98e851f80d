"""Favorite transaction commands."""

from datetime import date

import click
from zenledger.cli.account_resolution import resolve_account_or_exit
from zenledger.cli.error_handling import handle_domain_error
from zenledger.cli.money import amount_in_default_or_exit, entry_currency_or_exit
from zenledger.domain.account import AccountService
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import FavoriteTransactionType
from zenledger.domain.errors import DomainError
from zenledger.domain.favorite import FavoriteService
from zenledger.utils.date_parser import parse_date


@click.group()
def favorite_group():
    """Manage and use favorite transactions."""
    pass


@favorite_group.command("add")
@click.argument("name")
@click.option(
    "--type",
    "favorite_type",
    required=True,
    type=click.Choice([t.value for t in FavoriteTransactionType], case_sensitive=False),
    help="expense/lend pay out of --from; revenue/borrow pay into --to",
)
@click.option("--category", required=True, help="Category account name or ID")
@click.option("--from", "from_account", help="Account money leaves (expense, lend)")
@click.option("--to", "to_account", help="Account money arrives in (revenue, borrow)")
@click.option("--description", help="Default description for posted entries")
@click.pass_context
def add_favorite(ctx, name, favorite_type, category, from_account, to_account, description):
    """Save a favorite transaction.

    Examples:
        zenledger favorite add Coffee --type expense --category Food --from Cash
        zenledger favorite add Salary --type revenue --category "Service Income" --to Bank
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    category_id = resolve_account_or_exit(ctx, account_service, category)
    from_id = resolve_account_or_exit(ctx, account_service, from_account) if from_account else None
    to_id = resolve_account_or_exit(ctx, account_service, to_account) if to_account else None

    try:
        favorite = FavoriteService(db).add_favorite(
            name=name,
            favorite_type=favorite_type,
            category_account_id=category_id,
            from_account_id=from_id,
            to_account_id=to_id,
            default_description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Saved favorite '{favorite.name}' (ID: {favorite.id})")


@favorite_group.command("list")
@click.pass_context
def list_favorites(ctx):
    """List favorite transactions."""
    db = ctx.obj["db"]
    favorites = FavoriteService(db).list_favorites()
    if not favorites:
        click.echo("No favorites found.")
        return

    names = {a.id: a.name for a in AccountService(db).list_accounts()}
    click.echo("\nFavorites:")
    click.echo("-" * 70)
    for fav in favorites:
        source_id = fav.from_account_id if fav.from_account_id is not None else fav.to_account_id
        click.echo(
            f"ID: {fav.id:3d} | {fav.name:20s} | {fav.type.value:8s} | "
            f"{names.get(source_id, '-')} <-> {names.get(fav.category_account_id, '-')}"
        )


@favorite_group.command("delete")
@click.argument("favorite")
@click.pass_context
def delete_favorite(ctx, favorite: str):
    """Delete a favorite by name or ID."""
    service = FavoriteService(ctx.obj["db"])
    try:
        found = service.resolve_favorite(favorite)
        service.delete_favorite(found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted favorite '{found.name}'")


@favorite_group.command("use")
@click.argument("favorite")
@click.argument("amount")
@click.option("--description", help="Override the description")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--currency", help="Currency code the amount is typed in")
@click.pass_context
def use_favorite(ctx, favorite, amount, description, entry_date, currency):
    """Post an entry from a favorite.

    Example:
        zenledger favorite use Coffee 4.50
    """
    db = ctx.obj["db"]
    service = FavoriteService(db)
    currency_service = CurrencyService(db)

    on_date = date.today()
    if entry_date is not None:
        try:
            on_date = parse_date(entry_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    typed_in = entry_currency_or_exit(ctx, currency_service, currency)
    value = amount_in_default_or_exit(ctx, currency_service, amount, typed_in)

    try:
        entry = service.post_favorite(favorite, value, description=description, date=on_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted entry {entry.id} '{entry.description}': {currency_service.format_display(value)}")


def register_commands(cli):
    """Register favorite commands with CLI."""
    cli.add_command(favorite_group, name="favorite")
