"""Favorite transaction templates and quick-entry line builders."""

from datetime import date as date_type
from decimal import Decimal
from typing import Optional

import structlog

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import (
    ExpandedEntry,
    FavoriteTransaction,
    FavoriteTransactionType,
    JournalEntry,
    JournalEntryLine,
)
from zenledger.domain.journal import JournalService
from zenledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

# Which account reference each template type moves money through.
# Expense/Lend pay out of from_account; Revenue/Borrow pay into to_account.
REQUIRED_REFERENCE = {
    FavoriteTransactionType.EXPENSE: "from_account_id",
    FavoriteTransactionType.LEND: "from_account_id",
    FavoriteTransactionType.REVENUE: "to_account_id",
    FavoriteTransactionType.BORROW: "to_account_id",
}


def expand_lines(
    template: FavoriteTransaction, amount: Decimal
) -> tuple[JournalEntryLine, JournalEntryLine]:
    """Map a template to its fixed two-line debit/credit pattern.

    Raises:
        IncompleteTemplateError: If the account reference required by the
            template's type is missing
    """
    field = REQUIRED_REFERENCE[template.type]
    source_id = getattr(template, field)
    if source_id is None:
        raise errors.IncompleteTemplateError(
            f"Favorite '{template.name}' of type {template.type.value} needs {field}"
        )
    if template.category_account_id is None:
        raise errors.IncompleteTemplateError(
            f"Favorite '{template.name}' needs category_account_id"
        )

    if template.type in (FavoriteTransactionType.EXPENSE, FavoriteTransactionType.LEND):
        return (
            JournalEntryLine(account_id=source_id, credit=amount),
            JournalEntryLine(account_id=template.category_account_id, debit=amount),
        )
    return (
        JournalEntryLine(account_id=source_id, debit=amount),
        JournalEntryLine(account_id=template.category_account_id, credit=amount),
    )


def expand(
    template: FavoriteTransaction,
    amount: Decimal | float | str,
    description: Optional[str] = None,
    date: Optional[date_type] = None,
) -> ExpandedEntry:
    """Expand a template into entry fields ready for posting.

    Args:
        template: Favorite template
        amount: Amount in the default currency
        description: Optional description; defaults to the template's
            default description, then its name
        date: Entry date; defaults to today

    Raises:
        IncompleteTemplateError: If the template lacks a required reference
    """
    amount = to_decimal(amount)
    return ExpandedEntry(
        date=date or date_type.today(),
        description=description or template.default_description or template.name,
        lines=expand_lines(template, amount),
    )


def transfer_lines(
    from_account_id: int, to_account_id: int, amount: Decimal | float | str
) -> tuple[JournalEntryLine, JournalEntryLine]:
    """Lines moving an amount from one account to another.

    Raises:
        ValidationError: If both accounts are the same
    """
    if from_account_id == to_account_id:
        raise errors.ValidationError("Please select two different accounts for the transfer")
    amount = to_decimal(amount)
    return (
        JournalEntryLine(account_id=from_account_id, credit=amount),
        JournalEntryLine(account_id=to_account_id, debit=amount),
    )


class FavoriteService:
    """Service for managing and using favorite transactions."""

    def __init__(self, db: Database):
        """Initialize favorite service.

        Args:
            db: Database instance
        """
        self.db = db
        self.journal_service = JournalService(db)

    def add_favorite(
        self,
        name: str,
        favorite_type: FavoriteTransactionType | str,
        category_account_id: int,
        from_account_id: Optional[int] = None,
        to_account_id: Optional[int] = None,
        default_description: Optional[str] = None,
    ) -> FavoriteTransaction:
        """Create a favorite transaction.

        Raises:
            ValidationError: If the name is blank or the type unknown
            DuplicateNameError: If a favorite with the same name exists
            IncompleteTemplateError: If the reference required by the type is missing
            InvalidAccountError: If a referenced account does not exist
        """
        if name is None or not name.strip():
            raise errors.ValidationError("Please enter a name for your new favorite")
        name = name.strip()

        if not isinstance(favorite_type, FavoriteTransactionType):
            try:
                favorite_type = FavoriteTransactionType(str(favorite_type).strip().lower())
            except ValueError:
                valid = ", ".join(t.value for t in FavoriteTransactionType)
                raise errors.ValidationError(
                    f"Unknown favorite type '{favorite_type}'. Valid types: {valid}"
                )

        if self.db.get_favorite_by_name(name) is not None:
            raise errors.DuplicateNameError(errors.duplicate_favorite_name(name))

        candidate = FavoriteTransaction(
            id=0,
            name=name,
            type=favorite_type,
            category_account_id=category_account_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            default_description=default_description,
        )
        # Rejects templates that could never expand.
        expand_lines(candidate, Decimal("1"))

        for account_id in sorted(candidate.account_ids()):
            if self.db.get_account(account_id) is None:
                raise errors.InvalidAccountError(errors.account_not_found(account_id))

        favorite_id = self.db.create_favorite(
            name=name,
            favorite_type=favorite_type,
            category_account_id=category_account_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            default_description=default_description,
        )
        logger.info("favorite_added", favorite_id=favorite_id, name=name, type=favorite_type.value)
        return self.db.get_favorite(favorite_id)

    def get_favorite(self, favorite_id: int) -> Optional[FavoriteTransaction]:
        """Get favorite by ID."""
        return self.db.get_favorite(favorite_id)

    def get_favorite_by_name(self, name: str) -> Optional[FavoriteTransaction]:
        """Get favorite by name, ignoring case."""
        return self.db.get_favorite_by_name(name)

    def resolve_favorite(self, favorite: str | int) -> FavoriteTransaction:
        """Find a favorite by ID or name.

        Raises:
            NotFoundError: If no favorite matches
        """
        found = None
        if isinstance(favorite, int) or str(favorite).isdigit():
            found = self.db.get_favorite(int(favorite))
        if found is None and isinstance(favorite, str):
            found = self.db.get_favorite_by_name(favorite)
        if found is None:
            raise errors.NotFoundError(errors.favorite_not_found(favorite))
        return found

    def list_favorites(self) -> list[FavoriteTransaction]:
        """List all favorites."""
        return self.db.list_favorites()

    def delete_favorite(self, favorite_id: int) -> None:
        """Delete a favorite."""
        self.db.delete_favorite(favorite_id)
        logger.info("favorite_deleted", favorite_id=favorite_id)

    def post_favorite(
        self,
        favorite: FavoriteTransaction | str | int,
        amount: Decimal | float | str,
        description: Optional[str] = None,
        date: Optional[date_type] = None,
        attachment: Optional[bytes] = None,
    ) -> JournalEntry:
        """Expand a favorite and post the resulting entry.

        Args:
            favorite: Favorite entity, ID or name
            amount: Amount in the default currency
        """
        if not isinstance(favorite, FavoriteTransaction):
            favorite = self.resolve_favorite(favorite)
        expanded = expand(favorite, amount, description=description, date=date)
        return self.journal_service.post_entry(
            date=expanded.date,
            description=expanded.description,
            lines=expanded.lines,
            attachment=attachment,
        )
