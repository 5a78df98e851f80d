"""Account management commands."""

import click
from zenledger.cli.account_resolution import resolve_account_or_exit
from zenledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from zenledger.cli.error_handling import handle_domain_error
from zenledger.domain.account import AccountService
from zenledger.domain.balance import BalanceService, to_natural
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import AccountType
from zenledger.domain.errors import DomainError

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Accounting category",
)
@click.option("--parent", help="Parent account name or ID")
@click.pass_context
def create_account(ctx, name: str, account_type: str, parent: str | None):
    """Create a new account.

    Examples:
        zenledger account create "Checking" --type Asset
        zenledger account create "Groceries" --type Expense --parent "Food"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        account = service.add_account(name=name, account_type=account_type, parent_id=parent_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account '{account.name}' (ID: {account.id}, {account.type.value})")


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only show accounts of this type",
)
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if account_type is not None:
        accounts = [a for a in accounts if a.type.value.lower() == account_type.lower()]
    if not accounts:
        click.echo("No accounts found.")
        return

    names = {a.id: a.name for a in service.list_accounts()}
    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        parent = f" | Parent: {names.get(acc.parent_id, acc.parent_id)}" if acc.parent_id else ""
        click.echo(f"ID: {acc.id:3d} | {acc.name:25s} | {acc.type.value:10s}{parent}")


@account_group.command("tree")
@click.option("--balances", is_flag=True, help="Show balances including sub-accounts")
@click.pass_context
def account_tree(ctx, balances: bool):
    """Show accounts as a parent/child tree."""
    db = ctx.obj["db"]
    service = AccountService(db)

    roots = service.build_tree()
    if not roots:
        click.echo("No accounts found.")
        return

    totals = BalanceService(db).rollup_balances() if balances else {}
    currency_service = CurrencyService(db)
    for root in roots:
        for depth, acc in root.walk():
            line = f"{'  ' * depth}{acc.name} ({acc.type.value})"
            if balances:
                line += f"  {currency_service.format_display(totals.get(acc.id, 0))}"
            click.echo(line)


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.

    Examples:
        zenledger account rename "Cash" "Wallet"
        zenledger account rename 1 "Wallet"
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.update_account(account_id=account_id, name=new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed account to '{new_name.strip()}'")


@account_group.command("move")
@click.argument("account", metavar="ACCOUNT")
@click.option("--parent", help="New parent account name or ID")
@click.option("--root", "make_root", is_flag=True, help="Detach from its parent")
@click.pass_context
def move_account(ctx, account: str, parent: str | None, make_root: bool) -> None:
    """Move an account under another parent, or to the top level."""
    db = ctx.obj["db"]
    service = AccountService(db)

    if (parent is None) == (not make_root):
        click.echo("Error: Specify exactly one of --parent or --root.", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, service, account)
    parent_id = resolve_account_or_exit(ctx, service, parent) if parent is not None else None

    try:
        service.update_account(account_id=account_id, parent_id=parent_id, clear_parent=make_root)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo("Account moved to top level" if make_root else f"Account moved under '{parent}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if it has no sub-accounts and is not
    used by any journal entry or favorite. Reassign or remove those first.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted account {account_id}")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@period_options
@click.pass_context
def account_balance(ctx, account: str, start_date: str | None, end_date: str | None, **kwargs):
    """Show the balance of an account.

    Liability, equity and revenue balances are shown with credits positive.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(kwargs),
    )

    acc = service.require_account(account_id)
    raw = BalanceService(db).account_balance(account_id, start_date=start, end_date=end)
    amount = CurrencyService(db).format_display(to_natural(acc, raw))
    click.echo(f"{acc.name} ({acc.type.value}): {amount}")


def register_commands(cli):
    """Register account commands with CLI."""
    cli.add_command(account_group, name="account")
