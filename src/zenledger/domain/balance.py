"""Balance aggregation.

Balances are never stored. Every figure here is a pure fold over a set of
journal entries, so reports can be recomputed from any entry set (the full
history, a date window, or an imported backup).
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from zenledger.database.base import Database
from zenledger.domain.entities import (
    Account,
    AccountType,
    FinancialSummary,
    JournalEntry,
    TrialBalance,
    TrialBalanceRow,
)

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def raw_balances(entries: Iterable[JournalEntry]) -> dict[int, Decimal]:
    """Fold entries into debit-positive balances keyed by account ID."""
    balances: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        for line in entry.lines:
            balances[line.account_id] += line.debit - line.credit
    return balances


def account_balance(account_id: int, entries: Iterable[JournalEntry]) -> Decimal:
    """Debit-positive balance of one account: sum of debit minus credit."""
    return sum(
        (
            line.debit - line.credit
            for entry in entries
            for line in entry.lines
            if line.account_id == account_id
        ),
        ZERO,
    )


def to_natural(account: Account, raw_balance: Decimal) -> Decimal:
    """Sign-normalize a raw balance so positive means grown in its natural direction."""
    return -raw_balance if account.type.is_credit_normal else raw_balance


def natural_balance(account: Account, entries: Iterable[JournalEntry]) -> Decimal:
    """Balance of an account as shown in statements."""
    return to_natural(account, account_balance(account.id, entries))


def account_balances(
    accounts: Sequence[Account], entries: Iterable[JournalEntry]
) -> list[tuple[Account, Decimal]]:
    """Natural balances for every account, in the given account order."""
    raw = raw_balances(entries)
    return [(acc, to_natural(acc, raw.get(acc.id, ZERO))) for acc in accounts]


def trial_balance(accounts: Sequence[Account], entries: Iterable[JournalEntry]) -> TrialBalance:
    """Build a trial balance.

    Each account with a non-zero balance is listed under its natural column:
    debit for Asset, Expense and Investment, credit for Liability, Equity and
    Revenue. Investment is treated as debit-normal. A mismatch between the
    column totals is reported on the result and logged as a warning; it
    never raises.
    """
    rows = []
    total_debits = ZERO
    total_credits = ZERO

    for account, balance in account_balances(accounts, entries):
        if balance == 0:
            continue
        if account.type.is_credit_normal:
            rows.append(TrialBalanceRow(account=account, debit=ZERO, credit=balance))
            total_credits += balance
        else:
            rows.append(TrialBalanceRow(account=account, debit=balance, credit=ZERO))
            total_debits += balance

    report = TrialBalance(
        rows=tuple(rows), total_debits=total_debits, total_credits=total_credits
    )
    if not report.is_balanced:
        logger.warning(
            "trial_balance_mismatch",
            total_debits=str(total_debits),
            total_credits=str(total_credits),
        )
    return report


def financial_summary(
    accounts: Sequence[Account], entries: Iterable[JournalEntry]
) -> FinancialSummary:
    """Sum natural balances per account type into statement totals."""
    totals: dict[AccountType, Decimal] = defaultdict(lambda: ZERO)
    for account, balance in account_balances(accounts, entries):
        totals[account.type] += balance

    return FinancialSummary(
        assets=totals[AccountType.ASSET],
        liabilities=totals[AccountType.LIABILITY],
        equity=totals[AccountType.EQUITY],
        revenue=totals[AccountType.REVENUE],
        expenses=totals[AccountType.EXPENSE],
        investments=totals[AccountType.INVESTMENT],
    )


def rollup_balances(
    accounts: Sequence[Account], entries: Iterable[JournalEntry]
) -> dict[int, Decimal]:
    """Natural balances including every descendant's balance.

    Children are added to their parent's figure using the parent's sign
    convention, so a sub-account of a different type nets against it.
    """
    raw = raw_balances(entries)
    children: dict[int, list[int]] = defaultdict(list)
    by_id = {acc.id: acc for acc in accounts}
    for acc in accounts:
        if acc.parent_id is not None and acc.parent_id in by_id:
            children[acc.parent_id].append(acc.id)

    def subtree_raw(account_id: int, seen: set[int]) -> Decimal:
        seen.add(account_id)
        total = raw.get(account_id, ZERO)
        for child_id in children[account_id]:
            if child_id not in seen:
                total += subtree_raw(child_id, seen)
        return total

    return {acc.id: to_natural(acc, subtree_raw(acc.id, set())) for acc in accounts}


class BalanceService:
    """Loads accounts and entries from the database and runs the aggregations."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def _entries(self, start_date: Optional[date], end_date: Optional[date]) -> list[JournalEntry]:
        return self.db.list_journal_entries(start_date=start_date, end_date=end_date)

    def account_balance(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Debit-positive balance of one account."""
        entries = self.db.list_journal_entries(
            start_date=start_date, end_date=end_date, account_id=account_id
        )
        return account_balance(account_id, entries)

    def account_balances(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[tuple[Account, Decimal]]:
        """Natural balances for every account."""
        return account_balances(self.db.list_accounts(), self._entries(start_date, end_date))

    def rollup_balances(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> dict[int, Decimal]:
        """Natural balances including sub-accounts, keyed by account ID."""
        return rollup_balances(self.db.list_accounts(), self._entries(start_date, end_date))

    def trial_balance(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> TrialBalance:
        """Trial balance over the selected entries."""
        return trial_balance(self.db.list_accounts(), self._entries(start_date, end_date))

    def financial_summary(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> FinancialSummary:
        """Statement totals over the selected entries."""
        return financial_summary(self.db.list_accounts(), self._entries(start_date, end_date))
