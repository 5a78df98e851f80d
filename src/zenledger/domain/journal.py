"""Journal engine domain service.

Entries are validated before anything is written, stored in one database
transaction, and never edited or deleted afterwards. The only correction is
a reversal entry that swaps every line's debit and credit.
"""

from datetime import date as date_type
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import EPSILON, JournalEntry, JournalEntryLine
from zenledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

REVERSAL_PREFIX = "Reversal of: "


def normalize_lines(lines: Sequence[JournalEntryLine | dict]) -> tuple[JournalEntryLine, ...]:
    """Coerce line dicts or entities into entities with Decimal amounts.

    Raises:
        UnbalancedEntryError: If a line is missing fields or has a non-numeric amount
    """
    result = []
    for index, line in enumerate(lines, start=1):
        try:
            if isinstance(line, JournalEntryLine):
                account_id, debit, credit = line.account_id, line.debit, line.credit
            else:
                account_id = line["account_id"]
                debit = line.get("debit", 0)
                credit = line.get("credit", 0)
            result.append(
                JournalEntryLine(
                    account_id=int(account_id),
                    debit=to_decimal(debit),
                    credit=to_decimal(credit),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise errors.UnbalancedEntryError(f"Line {index} is malformed: {e}")
    return tuple(result)


def validate_lines(lines: Sequence[JournalEntryLine]) -> Decimal:
    """Check the double-entry rules for a set of lines.

    Args:
        lines: Candidate lines

    Returns:
        The entry total (sum of debits)

    Raises:
        UnbalancedEntryError: If there are fewer than two lines, a line is not
            exactly one-sided, or debits and credits differ by more than EPSILON
            or total zero
    """
    if len(lines) < 2:
        raise errors.UnbalancedEntryError("A journal entry must have at least two lines")

    for index, line in enumerate(lines, start=1):
        if line.debit < 0 or line.credit < 0:
            raise errors.UnbalancedEntryError(
                f"Line {index}: debit and credit must not be negative"
            )
        if (line.debit != 0) == (line.credit != 0):
            raise errors.UnbalancedEntryError(
                f"Line {index}: exactly one of debit or credit must be non-zero"
            )

    total_debit = sum((line.debit for line in lines), Decimal("0"))
    total_credit = sum((line.credit for line in lines), Decimal("0"))

    if abs(total_debit - total_credit) > EPSILON:
        raise errors.UnbalancedEntryError(
            f"Debits ({total_debit}) and credits ({total_credit}) must be equal"
        )
    if total_debit <= 0:
        raise errors.UnbalancedEntryError("Entry total must be greater than zero")
    return total_debit


def reverse_lines(lines: Sequence[JournalEntryLine]) -> tuple[JournalEntryLine, ...]:
    """Return lines with debit and credit swapped, in the same order."""
    return tuple(line.swapped() for line in lines)


class JournalService:
    """Service for posting and reversing journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def post_entry(
        self,
        date: date_type,
        description: str,
        lines: Sequence[JournalEntryLine | dict],
        attachment: Optional[bytes] = None,
    ) -> JournalEntry:
        """Validate and post a journal entry.

        Line amounts must already be in the default currency.

        Args:
            date: Entry date
            description: Entry description
            lines: Debit/credit lines (entities or dicts with account_id,
                debit and credit keys)
            attachment: Optional binary attachment such as a receipt image

        Returns:
            The posted entry

        Raises:
            UnbalancedEntryError: If the lines break the double-entry rules
            InvalidAccountError: If a line references an unknown account
        """
        entry_lines = normalize_lines(lines)
        total = validate_lines(entry_lines)

        for line in entry_lines:
            if self.db.get_account(line.account_id) is None:
                raise errors.InvalidAccountError(errors.account_not_found(line.account_id))

        entry_id = self.db.create_journal_entry(
            date=date,
            description=description or "",
            lines=entry_lines,
            attachment=attachment,
        )
        logger.info(
            "entry_posted",
            entry_id=entry_id,
            date=date.isoformat(),
            lines=len(entry_lines),
            total=str(total),
        )
        return self.db.get_journal_entry(entry_id)

    def revert_entry(
        self, entry: JournalEntry | int, on_date: Optional[date_type] = None
    ) -> JournalEntry:
        """Post a reversal of an entry.

        The reversal swaps debit and credit on every line, is dated today
        (or on_date), references the original in its description and carries
        no attachment. The original entry is left untouched.

        Raises:
            NotFoundError: If the entry ID does not exist
        """
        if isinstance(entry, int):
            entry = self.require_entry(entry)

        reversal = self.post_entry(
            date=on_date or date_type.today(),
            description=f"{REVERSAL_PREFIX}{entry.description}",
            lines=reverse_lines(entry.lines),
        )
        logger.info("entry_reversed", entry_id=entry.id, reversal_id=reversal.id)
        return reversal

    def get_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        return self.db.get_journal_entry(entry_id)

    def require_entry(self, entry_id: int) -> JournalEntry:
        """Get journal entry by ID or raise NotFoundError."""
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise errors.NotFoundError(errors.entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        start_date: Optional[date_type] = None,
        end_date: Optional[date_type] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List entries newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Optional filter to entries touching an account
        """
        return self.db.list_journal_entries(
            start_date=start_date, end_date=end_date, account_id=account_id
        )

    def post_two_line_entry(
        self,
        date: date_type,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal | float | str,
        attachment: Optional[bytes] = None,
    ) -> JournalEntry:
        """Post a simple entry debiting one account and crediting another."""
        amount = to_decimal(amount)
        return self.post_entry(
            date=date,
            description=description,
            lines=[
                JournalEntryLine(account_id=debit_account_id, debit=amount),
                JournalEntryLine(account_id=credit_account_id, credit=amount),
            ],
            attachment=attachment,
        )
