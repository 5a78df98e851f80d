"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

from zenledger.domain.entities import (
    Account,
    AccountType,
    Currency,
    JournalEntry,
    JournalEntryLine,
    FavoriteTransaction,
    FavoriteTransactionType,
    Setting,
)


class Database(ABC):
    """Abstract database interface for zenledger.

    Every mutating method is atomic: it either commits all of its writes or
    none of them.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, account_type: AccountType, parent_id: Optional[int] = None
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name, ignoring case."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts in insertion order."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        parent_id: Optional[int] = None,
        update_parent: bool = False,
    ) -> None:
        """Update account fields.

        Args:
            update_parent: If True, set parent_id even if it is None (to clear it)
        """
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account after checking children, entry and favorite usage.

        Raises:
            HasChildrenError: If any account has this account as parent
            InUseError: If any journal line or favorite references the account
        """
        pass

    @abstractmethod
    def count_account_entries(self, account_id: int) -> int:
        """Count journal entries with at least one line on the account."""
        pass

    @abstractmethod
    def count_account_favorites(self, account_id: int) -> int:
        """Count favorites referencing the account in any role."""
        pass

    # Currency operations
    @abstractmethod
    def create_currency(
        self,
        name: str,
        code: str,
        symbol: str,
        exchange_rate: Decimal,
        make_default: bool = False,
    ) -> int:
        """Create a currency. Returns currency ID.

        With make_default the default-currency setting is pointed at the new
        currency in the same transaction.
        """
        pass

    @abstractmethod
    def get_currency(self, currency_id: int) -> Optional[Currency]:
        """Get currency by ID."""
        pass

    @abstractmethod
    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        """Get currency by code, ignoring case."""
        pass

    @abstractmethod
    def list_currencies(self) -> list[Currency]:
        """List all currencies in insertion order."""
        pass

    @abstractmethod
    def update_currency(
        self,
        currency_id: int,
        name: Optional[str] = None,
        code: Optional[str] = None,
        symbol: Optional[str] = None,
        exchange_rate: Optional[Decimal] = None,
    ) -> None:
        """Update currency fields."""
        pass

    @abstractmethod
    def delete_currency(self, currency_id: int) -> None:
        """Delete a currency."""
        pass

    @abstractmethod
    def set_default_currency(self, currency_id: int) -> None:
        """Set the currency rate to 1 and store it as the default, atomically."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        date: date,
        description: str,
        lines: Sequence[JournalEntryLine],
        attachment: Optional[bytes] = None,
    ) -> int:
        """Create a journal entry with all of its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first, with optional filters."""
        pass

    # Favorite operations
    @abstractmethod
    def create_favorite(
        self,
        name: str,
        favorite_type: FavoriteTransactionType,
        category_account_id: int,
        from_account_id: Optional[int] = None,
        to_account_id: Optional[int] = None,
        default_description: Optional[str] = None,
    ) -> int:
        """Create a favorite transaction. Returns favorite ID."""
        pass

    @abstractmethod
    def get_favorite(self, favorite_id: int) -> Optional[FavoriteTransaction]:
        """Get favorite by ID."""
        pass

    @abstractmethod
    def get_favorite_by_name(self, name: str) -> Optional[FavoriteTransaction]:
        """Get favorite by name, ignoring case."""
        pass

    @abstractmethod
    def list_favorites(self) -> list[FavoriteTransaction]:
        """List all favorites."""
        pass

    @abstractmethod
    def delete_favorite(self, favorite_id: int) -> None:
        """Delete a favorite."""
        pass

    # Setting operations
    @abstractmethod
    def get_setting(self, key: str) -> Any:
        """Get a setting value, or None if unset."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any) -> None:
        """Insert or replace a setting value."""
        pass

    @abstractmethod
    def list_settings(self) -> list[Setting]:
        """List all settings."""
        pass

    # Bulk operations
    @abstractmethod
    def replace_all(
        self,
        accounts: Sequence[Account],
        entries: Sequence[JournalEntry],
        favorites: Sequence[FavoriteTransaction],
        currencies: Sequence[Currency],
        settings: Sequence[Setting],
    ) -> None:
        """Clear all five collections and bulk-insert the given records.

        Record IDs are preserved. Either everything is replaced or nothing is.
        """
        pass
