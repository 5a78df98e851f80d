"""Tests for journal entry and favorite commands."""

from decimal import Decimal

from zenledger.cli.main import cli


def _run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_entry_post(cli_runner, temp_db, currencies, accounts, balance_service):
    result = _run(
        cli_runner, temp_db,
        "entry", "post", "Pay bill",
        "--debit", "Utilities=100", "--credit", "Cash=100", "--date", "2024-01-10",
    )

    assert result.exit_code == 0
    assert "Posted entry 1: $100.00" in result.output
    assert balance_service.account_balance(accounts.cash.id) == Decimal("-100")


def test_entry_post_unbalanced(cli_runner, temp_db, currencies, accounts, journal_service):
    result = _run(
        cli_runner, temp_db,
        "entry", "post", "Oops", "--debit", "Utilities=100", "--credit", "Cash=99.5",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert journal_service.list_entries() == []


def test_entry_post_malformed_line(cli_runner, temp_db, accounts):
    result = _run(cli_runner, temp_db, "entry", "post", "Oops", "--debit", "Utilities")

    assert result.exit_code == 1
    assert "ACCOUNT=AMOUNT" in result.output


def test_entry_post_in_foreign_currency(cli_runner, temp_db, currencies, accounts, balance_service):
    result = _run(
        cli_runner, temp_db,
        "entry", "post", "Paris lunch", "--currency", "EUR",
        "--debit", "Groceries=10", "--credit", "Cash=10",
    )

    assert result.exit_code == 0
    assert balance_service.account_balance(accounts.groceries.id) == Decimal("11")


def test_entry_transfer(cli_runner, temp_db, currencies, accounts, balance_service):
    result = _run(cli_runner, temp_db, "entry", "transfer", "Bank", "Cash", "40")

    assert result.exit_code == 0
    assert balance_service.account_balance(accounts.cash.id) == Decimal("40")
    assert balance_service.account_balance(accounts.bank.id) == Decimal("-40")


def test_entry_transfer_same_account(cli_runner, temp_db, accounts):
    result = _run(cli_runner, temp_db, "entry", "transfer", "Cash", "cash", "40")

    assert result.exit_code == 1
    assert "two different accounts" in result.output


def test_entry_list_show_and_revert(cli_runner, temp_db, currencies, accounts, balance_service):
    _run(
        cli_runner, temp_db,
        "entry", "post", "Electricity", "--date", "2024-01-10",
        "--debit", "Utilities=100", "--credit", "Cash=100",
    )

    listing = _run(cli_runner, temp_db, "entry", "list")
    assert "2024-01-10" in listing.output
    assert "Electricity" in listing.output

    shown = _run(cli_runner, temp_db, "entry", "show", "1")
    assert "Utilities" in shown.output
    assert "$100.00" in shown.output

    reverted = _run(cli_runner, temp_db, "entry", "revert", "1")
    assert reverted.exit_code == 0
    assert "Posted reversal 2 of entry 1" in reverted.output
    assert balance_service.account_balance(accounts.cash.id) == 0

    listing = _run(cli_runner, temp_db, "entry", "list", "--account", "Utilities")
    assert "Reversal of: Electricity" in listing.output


def test_entry_list_date_window(cli_runner, temp_db, journal_service, accounts):
    from datetime import date

    journal_service.post_two_line_entry(date(2024, 1, 5), "January", accounts.utilities.id, accounts.cash.id, 1)
    journal_service.post_two_line_entry(date(2024, 2, 5), "February", accounts.utilities.id, accounts.cash.id, 2)

    result = _run(
        cli_runner, temp_db,
        "entry", "list", "--start-date", "2024-02-01", "--end-date", "2024-02-28",
    )

    assert "February" in result.output
    assert "January" not in result.output


def test_entry_show_missing(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "entry", "show", "7")

    assert result.exit_code == 1
    assert "Journal entry 7 not found" in result.output


def test_favorite_add_and_use(cli_runner, temp_db, currencies, accounts, balance_service):
    added = _run(
        cli_runner, temp_db,
        "favorite", "add", "Coffee", "--type", "expense",
        "--category", "Groceries", "--from", "Cash", "--description", "Coffee to go",
    )
    assert added.exit_code == 0

    used = _run(cli_runner, temp_db, "favorite", "use", "coffee", "4.50")

    assert used.exit_code == 0
    assert "'Coffee to go': $4.50" in used.output
    assert balance_service.account_balance(accounts.groceries.id) == Decimal("4.5")


def test_favorite_add_incomplete(cli_runner, temp_db, accounts):
    result = _run(
        cli_runner, temp_db,
        "favorite", "add", "Paycheck", "--type", "revenue", "--category", "Salary", "--from", "Bank",
    )

    assert result.exit_code == 1
    assert "to_account_id" in result.output


def test_favorite_list_and_delete(cli_runner, temp_db, favorite_service, accounts):
    favorite_service.add_favorite("Rent", "expense", accounts.utilities.id, from_account_id=accounts.bank.id)

    listing = _run(cli_runner, temp_db, "favorite", "list")
    assert "Rent" in listing.output
    assert "Bank <-> Utilities" in listing.output

    deleted = _run(cli_runner, temp_db, "favorite", "delete", "Rent")
    assert deleted.exit_code == 0
    assert favorite_service.list_favorites() == []
