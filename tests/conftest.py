"""Shared pytest fixtures for zenledger tests."""

import tempfile
import os
from datetime import date
from types import SimpleNamespace

import pytest

from zenledger.database.factories import create_sqlite_database
from zenledger.domain.account import AccountService
from zenledger.domain.backup import BackupService
from zenledger.domain.balance import BalanceService
from zenledger.domain.currency import CurrencyService
from zenledger.domain.entities import AccountType
from zenledger.domain.favorite import FavoriteService
from zenledger.domain.journal import JournalService
from zenledger.domain.settings import SettingsService
from zenledger.logging_config import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route structlog through stdlib logging at WARNING for every test."""
    configure_logging("WARNING")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def currency_service(temp_db):
    """Create a CurrencyService with a temporary database."""
    return CurrencyService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def favorite_service(temp_db):
    """Create a FavoriteService with a temporary database."""
    return FavoriteService(temp_db)


@pytest.fixture
def settings_service(temp_db):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def accounts(account_service):
    """One account of every type, keyed by a short name."""
    created = {
        "cash": account_service.add_account("Cash", AccountType.ASSET),
        "bank": account_service.add_account("Bank", AccountType.ASSET),
        "utilities": account_service.add_account("Utilities", AccountType.EXPENSE),
        "groceries": account_service.add_account("Groceries", AccountType.EXPENSE),
        "loan": account_service.add_account("Bank Loan", AccountType.LIABILITY),
        "capital": account_service.add_account("Capital", AccountType.EQUITY),
        "salary": account_service.add_account("Salary", AccountType.REVENUE),
        "stocks": account_service.add_account("Stocks", AccountType.INVESTMENT),
    }
    return SimpleNamespace(**created)


@pytest.fixture
def currencies(currency_service):
    """USD as default plus EUR at 1.1 USD."""
    usd = currency_service.add_currency("US Dollar", "USD", "$")
    eur = currency_service.add_currency("Euro", "EUR", "€", "1.1")
    return SimpleNamespace(usd=usd, eur=eur)


@pytest.fixture
def today():
    """Fixed reference date for relative date tests."""
    return date(2024, 3, 15)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
