"""Domain model entities for zenledger.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Balances are never stored on them; they are derived from
the journal by the balance aggregator.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


# Tolerance used when comparing debit and credit totals.
EPSILON = Decimal("0.001")


class AccountType(str, Enum):
    """Accounting category of an account."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"
    INVESTMENT = "Investment"

    @property
    def is_credit_normal(self) -> bool:
        """True if a credit increases accounts of this type."""
        return self in CREDIT_NORMAL_TYPES


CREDIT_NORMAL_TYPES = frozenset(
    {AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE}
)


class FavoriteTransactionType(str, Enum):
    """Kind of quick entry a favorite template expands into."""

    EXPENSE = "expense"
    REVENUE = "revenue"
    BORROW = "borrow"
    LEND = "lend"


class SettingKey(str, Enum):
    """Keys of the key-value settings store."""

    DEFAULT_CURRENCY_ID = "defaultCurrencyId"
    DISPLAY_CURRENCY_ID = "displayCurrencyId"
    DEFAULT_ENTRY_CURRENCY_ID = "defaultEntryCurrencyId"
    FOLDER_HANDLE = "backupFolderHandle"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    name: str
    type: AccountType
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class Currency:
    """Currency with its rate to the default currency."""

    id: int
    name: str
    code: str
    symbol: str
    exchange_rate: Decimal


@dataclass(frozen=True)
class JournalEntryLine:
    """One side of a journal entry, always in the default currency."""

    account_id: int
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        """Debit-positive effect of the line."""
        return self.debit - self.credit

    def swapped(self) -> "JournalEntryLine":
        """Return the line with debit and credit exchanged."""
        return JournalEntryLine(
            account_id=self.account_id, debit=self.credit, credit=self.debit
        )


@dataclass(frozen=True)
class JournalEntry:
    """Posted journal entry."""

    id: int
    date: date
    description: str
    lines: tuple[JournalEntryLine, ...]
    attachment: Optional[bytes] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    def account_ids(self) -> set[int]:
        return {line.account_id for line in self.lines}


@dataclass(frozen=True)
class FavoriteTransaction:
    """Named shortcut for a two-line entry."""

    id: int
    name: str
    type: FavoriteTransactionType
    category_account_id: int
    from_account_id: Optional[int] = None
    to_account_id: Optional[int] = None
    default_description: Optional[str] = None

    def account_ids(self) -> set[int]:
        ids = {self.category_account_id, self.from_account_id, self.to_account_id}
        ids.discard(None)
        return ids


@dataclass(frozen=True)
class Setting:
    """Key-value configuration pair."""

    key: str
    value: object


@dataclass
class AccountNode:
    """Account with its child nodes, used for tree display."""

    account: Account
    children: list["AccountNode"] = field(default_factory=list)

    def walk(self, depth: int = 0):
        """Yield (depth, account) pairs in display order."""
        yield depth, self.account
        for child in self.children:
            yield from child.walk(depth + 1)


@dataclass(frozen=True)
class ExpandedEntry:
    """Entry fields produced by expanding a favorite template."""

    date: date
    description: str
    lines: tuple[JournalEntryLine, ...]


@dataclass(frozen=True)
class TrialBalanceRow:
    """One account's balance under its natural column."""

    account: Account
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance report."""

    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal

    @property
    def difference(self) -> Decimal:
        return self.total_debits - self.total_credits

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) <= EPSILON

    @property
    def warning(self) -> Optional[str]:
        """Human-readable warning when the columns do not agree."""
        if self.is_balanced:
            return None
        return (
            f"Trial balance is out of balance: debits {self.total_debits:.2f} "
            f"!= credits {self.total_credits:.2f} "
            f"(difference {self.difference:.2f})"
        )


@dataclass(frozen=True)
class FinancialSummary:
    """Balance sheet and income statement totals."""

    assets: Decimal
    liabilities: Decimal
    equity: Decimal
    revenue: Decimal
    expenses: Decimal
    investments: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.revenue - self.expenses

    @property
    def owners_equity(self) -> Decimal:
        return self.equity + self.net_income
