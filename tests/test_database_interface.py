"""Tests for the Database interface returning domain models."""

from datetime import date
from decimal import Decimal

import pytest

from zenledger.database import Database, create_memory_database
from zenledger.domain import entities, errors


@pytest.fixture
def memory_db():
    db = create_memory_database()
    db.connect()
    db.initialize_schema()
    yield db
    db.disconnect()


def _lines(debit_id, credit_id, amount):
    return [
        entities.JournalEntryLine(account_id=debit_id, debit=Decimal(amount)),
        entities.JournalEntryLine(account_id=credit_id, credit=Decimal(amount)),
    ]


class TestDatabaseInterface:
    """The storage layer speaks in domain entities only."""

    def test_memory_database_is_a_database(self, memory_db):
        assert isinstance(memory_db, Database)

    def test_account_round_trip(self, memory_db):
        account_id = memory_db.create_account(
            name="Cash", account_type=entities.AccountType.ASSET, parent_id=None
        )

        account = memory_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.type is entities.AccountType.ASSET
        assert memory_db.get_account_by_name("cASH") == account

    def test_journal_entry_lines_keep_order(self, memory_db):
        cash = memory_db.create_account("Cash", entities.AccountType.ASSET, None)
        food = memory_db.create_account("Food", entities.AccountType.EXPENSE, None)
        rent = memory_db.create_account("Rent", entities.AccountType.EXPENSE, None)

        entry_id = memory_db.create_journal_entry(
            date=date(2024, 1, 1),
            description="Split",
            lines=[
                entities.JournalEntryLine(account_id=food, debit=Decimal("1.25")),
                entities.JournalEntryLine(account_id=rent, debit=Decimal("2")),
                entities.JournalEntryLine(account_id=cash, credit=Decimal("3.25")),
            ],
        )
        entry = memory_db.get_journal_entry(entry_id)

        assert isinstance(entry, entities.JournalEntry)
        assert [line.account_id for line in entry.lines] == [food, rent, cash]
        assert isinstance(entry.lines[0].debit, Decimal)
        assert entry.lines[0].debit == Decimal("1.25")

    def test_usage_counts(self, memory_db):
        cash = memory_db.create_account("Cash", entities.AccountType.ASSET, None)
        food = memory_db.create_account("Food", entities.AccountType.EXPENSE, None)
        memory_db.create_journal_entry(date(2024, 1, 1), "a", _lines(food, cash, "1"))
        memory_db.create_journal_entry(date(2024, 1, 2), "b", _lines(food, cash, "2"))
        memory_db.create_favorite(
            name="Snack",
            favorite_type=entities.FavoriteTransactionType.EXPENSE,
            category_account_id=food,
            from_account_id=cash,
            to_account_id=None,
            default_description=None,
        )

        assert memory_db.count_account_entries(cash) == 2
        assert memory_db.count_account_favorites(cash) == 1
        with pytest.raises(errors.InUseError):
            memory_db.delete_account(cash)

    def test_currency_code_lookup_ignores_case(self, memory_db):
        currency_id = memory_db.create_currency(
            name="Euro", code="EUR", symbol="€", exchange_rate=Decimal("1.1")
        )

        currency = memory_db.get_currency_by_code("eur")

        assert currency.id == currency_id
        assert currency.exchange_rate == Decimal("1.1")

    def test_create_default_currency_stores_setting(self, memory_db):
        currency_id = memory_db.create_currency(
            name="US Dollar", code="USD", symbol="$", exchange_rate=Decimal("1"), make_default=True
        )
        memory_db.create_currency(name="Euro", code="EUR", symbol="€", exchange_rate=Decimal("1.1"))

        assert memory_db.get_setting(entities.SettingKey.DEFAULT_CURRENCY_ID.value) == currency_id

    def test_set_default_currency_writes_rate_and_setting(self, memory_db):
        usd = memory_db.create_currency(
            name="US Dollar", code="USD", symbol="$", exchange_rate=Decimal("1"), make_default=True
        )
        eur = memory_db.create_currency(
            name="Euro", code="EUR", symbol="€", exchange_rate=Decimal("1.1")
        )

        memory_db.set_default_currency(eur)

        assert memory_db.get_currency(eur).exchange_rate == Decimal("1")
        assert memory_db.get_currency(usd).exchange_rate == Decimal("1")
        assert memory_db.get_setting(entities.SettingKey.DEFAULT_CURRENCY_ID.value) == eur

    def test_failed_set_default_currency_changes_nothing(self, memory_db):
        usd = memory_db.create_currency(
            name="US Dollar", code="USD", symbol="$", exchange_rate=Decimal("1"), make_default=True
        )

        with pytest.raises(errors.NotFoundError):
            memory_db.set_default_currency(999)

        assert memory_db.get_setting(entities.SettingKey.DEFAULT_CURRENCY_ID.value) == usd

    def test_settings_upsert(self, memory_db):
        memory_db.set_setting("displayCurrencyId", 1)
        memory_db.set_setting("displayCurrencyId", 2)

        assert memory_db.get_setting("displayCurrencyId") == 2
        assert memory_db.list_settings() == [entities.Setting(key="displayCurrencyId", value=2)]

    def test_replace_all_keeps_ids(self, memory_db):
        memory_db.create_account("Old", entities.AccountType.ASSET, None)

        memory_db.replace_all(
            accounts=[
                entities.Account(id=10, name="Cash", type=entities.AccountType.ASSET),
                entities.Account(id=20, name="Food", type=entities.AccountType.EXPENSE, parent_id=10),
            ],
            entries=[
                entities.JournalEntry(
                    id=5,
                    date=date(2024, 1, 1),
                    description="Lunch",
                    lines=tuple(_lines(20, 10, "8")),
                )
            ],
            favorites=[],
            currencies=[
                entities.Currency(id=3, name="US Dollar", code="USD", symbol="$", exchange_rate=Decimal("1"))
            ],
            settings=[entities.Setting(key="defaultCurrencyId", value=3)],
        )

        assert [a.id for a in memory_db.list_accounts()] == [10, 20]
        assert memory_db.get_account_by_name("Old") is None
        assert memory_db.get_journal_entry(5).description == "Lunch"
        assert memory_db.get_currency(3).code == "USD"
        assert memory_db.get_setting("defaultCurrencyId") == 3

    def test_missing_rows(self, memory_db):
        assert memory_db.get_account(1) is None
        assert memory_db.get_journal_entry(1) is None
        assert memory_db.get_favorite_by_name("nope") is None
        with pytest.raises(errors.NotFoundError):
            memory_db.delete_currency(1)


def test_services_resolve_after_database_import():
    from zenledger.domain import AccountService, BackupService
    from zenledger.domain.account import AccountService as DirectAccountService

    assert AccountService is DirectAccountService
    assert BackupService.__name__ == "BackupService"
