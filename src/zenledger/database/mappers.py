"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the domain entities stay stable
when the database schema changes.
"""

import json
from decimal import Decimal

from zenledger.domain import entities as domain
from zenledger.database.models import (
    Account as ORMAccount,
    Currency as ORMCurrency,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    FavoriteTransaction as ORMFavoriteTransaction,
    Setting as ORMSetting,
)


def _amount(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        parent_id=orm_account.parent_id,
    )


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy Currency model to domain Currency entity."""
    return domain.Currency(
        id=orm_currency.id,
        name=orm_currency.name,
        code=orm_currency.code,
        symbol=orm_currency.symbol,
        exchange_rate=_amount(orm_currency.exchange_rate),
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        account_id=orm_line.account_id,
        debit=_amount(orm_line.debit),
        credit=_amount(orm_line.credit),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        description=orm_entry.description,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
        attachment=orm_entry.attachment,
    )


def favorite_to_domain(orm_favorite: ORMFavoriteTransaction) -> domain.FavoriteTransaction:
    """Convert SQLAlchemy FavoriteTransaction model to domain entity."""
    return domain.FavoriteTransaction(
        id=orm_favorite.id,
        name=orm_favorite.name,
        type=domain.FavoriteTransactionType(orm_favorite.type),
        category_account_id=orm_favorite.category_account_id,
        from_account_id=orm_favorite.from_account_id,
        to_account_id=orm_favorite.to_account_id,
        default_description=orm_favorite.default_description,
    )


def setting_to_domain(orm_setting: ORMSetting) -> domain.Setting:
    """Convert SQLAlchemy Setting model to domain Setting entity."""
    value = json.loads(orm_setting.value) if orm_setting.value is not None else None
    return domain.Setting(key=orm_setting.key, value=value)


def encode_setting_value(value) -> str | None:
    """Encode a setting value for storage."""
    if value is None:
        return None
    return json.dumps(value)
