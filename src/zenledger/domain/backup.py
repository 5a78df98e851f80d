"""JSON backup export and import.

The interchange document has five top-level arrays: ``accounts``,
``transactions``, ``favoriteTransactions``, ``currencies`` and ``settings``.
Field names are camelCase, amounts are JSON numbers and attachments are
base64 text (``data:`` URLs are accepted on import).
"""

import base64
import binascii
import json
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

import structlog

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import (
    Account,
    AccountType,
    Currency,
    FavoriteTransaction,
    FavoriteTransactionType,
    JournalEntry,
    JournalEntryLine,
    Setting,
    SettingKey,
)
from zenledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

COLLECTIONS = ("accounts", "transactions", "favoriteTransactions", "currencies", "settings")


def _number(value: Decimal) -> int | float:
    return int(value) if value == value.to_integral_value() else float(value)


def _require_unique(label: str, values) -> None:
    seen = set()
    for value in values:
        if value in seen:
            raise errors.ImportFormatError(f"Duplicate {label} in backup: {value!r}")
        seen.add(value)


def _check_references(
    accounts: list[Account], entries: list[JournalEntry], favorites: list[FavoriteTransaction]
) -> None:
    parents = {a.id: a.parent_id for a in accounts}

    for account in accounts:
        if account.parent_id is not None and account.parent_id not in parents:
            raise errors.ImportFormatError(
                f"Account {account.id} has unknown parent {account.parent_id}"
            )
        visited = {account.id}
        parent_id = account.parent_id
        while parent_id is not None:
            if parent_id in visited:
                raise errors.ImportFormatError(
                    f"Account {account.id} is part of a parent cycle"
                )
            visited.add(parent_id)
            parent_id = parents[parent_id]

    for entry in entries:
        missing = entry.account_ids() - parents.keys()
        if missing:
            raise errors.ImportFormatError(
                f"Transaction {entry.id} references unknown account {min(missing)}"
            )

    for favorite in favorites:
        missing = favorite.account_ids() - parents.keys()
        if missing:
            raise errors.ImportFormatError(
                f"Favorite {favorite.id} references unknown account {min(missing)}"
            )


def _with_default_rate(currencies: list[Currency], settings: list[Setting]) -> list[Currency]:
    """Force the rate of the currency that will resolve as default to 1."""
    if not currencies:
        return currencies
    ids = {c.id for c in currencies}
    configured = next(
        (s.value for s in settings if s.key == SettingKey.DEFAULT_CURRENCY_ID.value), None
    )
    default_id = configured if isinstance(configured, int) and configured in ids else min(ids)
    return [
        replace(c, exchange_rate=Decimal("1")) if c.id == default_id else c for c in currencies
    ]


def account_to_dict(account: Account) -> dict[str, Any]:
    data = {"id": account.id, "name": account.name, "type": account.type.value}
    if account.parent_id is not None:
        data["parentId"] = account.parent_id
    return data


def entry_to_dict(entry: JournalEntry) -> dict[str, Any]:
    data = {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "description": entry.description,
        "lines": [
            {
                "accountId": line.account_id,
                "debit": _number(line.debit),
                "credit": _number(line.credit),
            }
            for line in entry.lines
        ],
    }
    if entry.attachment is not None:
        data["attachment"] = base64.b64encode(entry.attachment).decode("ascii")
    return data


def favorite_to_dict(favorite: FavoriteTransaction) -> dict[str, Any]:
    data = {
        "id": favorite.id,
        "name": favorite.name,
        "type": favorite.type.value,
        "categoryAccountId": favorite.category_account_id,
    }
    if favorite.from_account_id is not None:
        data["fromAccountId"] = favorite.from_account_id
    if favorite.to_account_id is not None:
        data["toAccountId"] = favorite.to_account_id
    if favorite.default_description is not None:
        data["defaultDescription"] = favorite.default_description
    return data


def currency_to_dict(currency: Currency) -> dict[str, Any]:
    return {
        "id": currency.id,
        "name": currency.name,
        "code": currency.code,
        "symbol": currency.symbol,
        "exchangeRate": _number(currency.exchange_rate),
    }


def account_from_dict(data: dict) -> Account:
    return Account(
        id=int(data["id"]),
        name=str(data["name"]),
        type=AccountType(data["type"]),
        parent_id=int(data["parentId"]) if data.get("parentId") is not None else None,
    )


def _decode_attachment(value: Optional[str]) -> Optional[bytes]:
    if value is None:
        return None
    if value.startswith("data:"):
        _, _, value = value.partition(",")
    return base64.b64decode(value, validate=True)


def _parse_entry_date(value: str) -> date:
    # Older backups store full ISO timestamps.
    if "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.fromisoformat(value)


def entry_from_dict(data: dict) -> JournalEntry:
    return JournalEntry(
        id=int(data["id"]),
        date=_parse_entry_date(str(data["date"])),
        description=str(data.get("description") or ""),
        lines=tuple(
            JournalEntryLine(
                account_id=int(line["accountId"]),
                debit=to_decimal(line.get("debit", 0)),
                credit=to_decimal(line.get("credit", 0)),
            )
            for line in data["lines"]
        ),
        attachment=_decode_attachment(data.get("attachment")),
    )


def favorite_from_dict(data: dict) -> FavoriteTransaction:
    def optional_id(key: str) -> Optional[int]:
        value = data.get(key)
        return None if value is None else int(value)

    return FavoriteTransaction(
        id=int(data["id"]),
        name=str(data["name"]),
        type=FavoriteTransactionType(data["type"]),
        category_account_id=int(data["categoryAccountId"]),
        from_account_id=optional_id("fromAccountId"),
        to_account_id=optional_id("toAccountId"),
        default_description=data.get("defaultDescription"),
    )


def currency_from_dict(data: dict) -> Currency:
    return Currency(
        id=int(data["id"]),
        name=str(data["name"]),
        code=str(data["code"]).strip().upper(),
        symbol=str(data["symbol"]),
        exchange_rate=to_decimal(data.get("exchangeRate", 1)),
    )


def setting_from_dict(data: dict) -> Setting:
    return Setting(key=str(data["key"]), value=data.get("value"))


class BackupService:
    """Exports the ledger to JSON and restores it with a full replace."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_data(self) -> dict[str, list[dict[str, Any]]]:
        """Collect all five collections as plain dicts."""
        return {
            "accounts": [account_to_dict(a) for a in self.db.list_accounts()],
            "transactions": [
                entry_to_dict(e) for e in sorted(self.db.list_journal_entries(), key=lambda e: e.id)
            ],
            "favoriteTransactions": [favorite_to_dict(f) for f in self.db.list_favorites()],
            "currencies": [currency_to_dict(c) for c in self.db.list_currencies()],
            "settings": [{"key": s.key, "value": s.value} for s in self.db.list_settings()],
        }

    def export_json(self) -> str:
        """Serialize the ledger to an indented JSON document."""
        return json.dumps(self.export_data(), indent=2, ensure_ascii=False)

    def import_json(self, json_string: str) -> dict[str, int]:
        """Replace the whole ledger with the contents of a JSON backup.

        All five collections are cleared and re-filled in one transaction; on
        any error the existing data is left untouched.

        Returns:
            Number of imported records per collection

        Raises:
            ImportFormatError: If the document is not valid JSON, lacks the
                accounts or transactions arrays, contains malformed records, or
                references accounts that are missing or form a parent cycle
        """
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise errors.ImportFormatError(f"Invalid JSON: {e}")
        return self.import_data(data)

    def import_data(self, data: Any) -> dict[str, int]:
        """Replace the whole ledger with already-decoded backup data."""
        if (
            not isinstance(data, dict)
            or not isinstance(data.get("accounts"), list)
            or not isinstance(data.get("transactions"), list)
        ):
            raise errors.ImportFormatError(
                "Invalid JSON format: missing accounts or transactions array."
            )

        def optional_list(key: str) -> list:
            value = data.get(key)
            return value if isinstance(value, list) else []

        try:
            accounts = [account_from_dict(r) for r in data["accounts"]]
            entries = [entry_from_dict(r) for r in data["transactions"]]
            favorites = [favorite_from_dict(r) for r in optional_list("favoriteTransactions")]
            currencies = [currency_from_dict(r) for r in optional_list("currencies")]
            settings = [setting_from_dict(r) for r in optional_list("settings")]
        except (KeyError, TypeError, ValueError, AttributeError, binascii.Error) as e:
            raise errors.ImportFormatError(f"Malformed backup record: {e}")

        _require_unique("account id", (a.id for a in accounts))
        _require_unique("account name", (a.name.lower() for a in accounts))
        _require_unique("transaction id", (e.id for e in entries))
        _require_unique("favorite id", (f.id for f in favorites))
        _require_unique("favorite name", (f.name.lower() for f in favorites))
        _require_unique("currency id", (c.id for c in currencies))
        _require_unique("currency code", (c.code for c in currencies))
        _require_unique("setting key", (s.key for s in settings))
        _check_references(accounts, entries, favorites)
        currencies = _with_default_rate(currencies, settings)

        self.db.replace_all(
            accounts=accounts,
            entries=entries,
            favorites=favorites,
            currencies=currencies,
            settings=settings,
        )
        counts = dict(
            zip(
                COLLECTIONS,
                (len(accounts), len(entries), len(favorites), len(currencies), len(settings)),
            )
        )
        logger.info("backup_imported", **counts)
        return counts
