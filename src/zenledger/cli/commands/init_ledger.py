"""Seed a new ledger with a starting chart of accounts."""

import click
from zenledger.domain.account import AccountService
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import AccountType
from zenledger.domain.errors import DomainError


INITIAL_ACCOUNTS = [
    # Assets
    ("Cash", AccountType.ASSET),
    ("Customer Invoices", AccountType.ASSET),
    ("Loans Receivable", AccountType.ASSET),
    ("Office Supplies", AccountType.ASSET),
    ("Equipment", AccountType.ASSET),
    # Liabilities
    ("Bills to Pay", AccountType.LIABILITY),
    ("Loans Payable", AccountType.LIABILITY),
    ("Unearned Revenue", AccountType.LIABILITY),
    # Equity
    ("Owner Investment", AccountType.EQUITY),
    ("Owner Withdrawal", AccountType.EQUITY),
    # Revenue
    ("Product Sales", AccountType.REVENUE),
    ("Service Income", AccountType.REVENUE),
    # Expenses
    ("Rent Expense", AccountType.EXPENSE),
    ("Utilities Expense", AccountType.EXPENSE),
    ("Wages & Salaries", AccountType.EXPENSE),
    # Investment
    ("Stock Portfolio", AccountType.INVESTMENT),
]

# name, code, symbol
INITIAL_CURRENCY = ("US Dollar", "USD", "$")


@click.command("init")
@click.pass_context
def init_ledger(ctx):
    """Initialize the ledger with default accounts and currency.

    Accounts and currencies that already exist are left alone, so running
    the command twice is harmless.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    currency_service = CurrencyService(db)

    created = 0
    for name, account_type in INITIAL_ACCOUNTS:
        if account_service.get_account_by_name(name) is not None:
            continue
        try:
            account_service.add_account(name=name, account_type=account_type)
            created += 1
        except DomainError as e:
            click.echo(f"Error creating account '{name}': {e}", err=True)
            ctx.exit(1)

    name, code, symbol = INITIAL_CURRENCY
    if not currency_service.list_currencies():
        usd = currency_service.add_currency(name=name, code=code, symbol=symbol)
        currency_service.set_display_currency(usd.id)
        click.echo(f"Added default currency {code}")

    if created:
        click.echo(f"Created {created} accounts")
    else:
        click.echo("Ledger already initialized.")


def register_commands(cli):
    """Register init command with CLI."""
    cli.add_command(init_ledger)
