"""Tests for favorite transaction templates."""

from datetime import date
from decimal import Decimal

import pytest

from zenledger.domain import errors
from zenledger.domain.entities import (
    FavoriteTransaction,
    FavoriteTransactionType,
    JournalEntryLine,
)
from zenledger.domain.favorite import expand, transfer_lines


def _template(kind, **refs):
    return FavoriteTransaction(id=1, name="Tpl", type=kind, category_account_id=10, **refs)


@pytest.mark.parametrize(
    "kind, refs, expected",
    [
        (FavoriteTransactionType.EXPENSE, {"from_account_id": 1}, [(1, 0, 25), (10, 25, 0)]),
        (FavoriteTransactionType.LEND, {"from_account_id": 1}, [(1, 0, 25), (10, 25, 0)]),
        (FavoriteTransactionType.REVENUE, {"to_account_id": 2}, [(2, 25, 0), (10, 0, 25)]),
        (FavoriteTransactionType.BORROW, {"to_account_id": 2}, [(2, 25, 0), (10, 0, 25)]),
    ],
)
def test_expand_line_patterns(kind, refs, expected):
    expanded = expand(_template(kind, **refs), 25, date=date(2024, 5, 1))

    assert [(l.account_id, l.debit, l.credit) for l in expanded.lines] == [
        (account_id, Decimal(debit), Decimal(credit)) for account_id, debit, credit in expected
    ]
    assert expanded.date == date(2024, 5, 1)


def test_expand_requires_reference_for_type():
    with pytest.raises(errors.IncompleteTemplateError):
        expand(_template(FavoriteTransactionType.EXPENSE, to_account_id=2), 5)
    with pytest.raises(errors.IncompleteTemplateError):
        expand(_template(FavoriteTransactionType.BORROW, from_account_id=1), 5)


def test_expand_description_fallbacks():
    tpl = FavoriteTransaction(
        id=1,
        name="Coffee",
        type=FavoriteTransactionType.EXPENSE,
        category_account_id=10,
        from_account_id=1,
        default_description="Morning coffee",
    )

    assert expand(tpl, 3).description == "Morning coffee"
    assert expand(tpl, 3, description="Espresso").description == "Espresso"
    assert expand(_template(FavoriteTransactionType.LEND, from_account_id=1), 3).description == "Tpl"
    assert expand(tpl, 3).date == date.today()


def test_transfer_lines():
    assert transfer_lines(1, 2, "40") == (
        JournalEntryLine(account_id=1, credit=Decimal("40")),
        JournalEntryLine(account_id=2, debit=Decimal("40")),
    )
    with pytest.raises(errors.ValidationError):
        transfer_lines(1, 1, 40)


def test_add_and_resolve_favorite(favorite_service, accounts):
    fav = favorite_service.add_favorite(
        "Coffee",
        FavoriteTransactionType.EXPENSE,
        accounts.groceries.id,
        from_account_id=accounts.cash.id,
        default_description="Coffee to go",
    )

    assert fav.type is FavoriteTransactionType.EXPENSE
    assert favorite_service.resolve_favorite("coffee") == fav
    assert favorite_service.resolve_favorite(str(fav.id)) == fav
    assert favorite_service.resolve_favorite(fav.id) == fav


def test_add_favorite_accepts_type_string(favorite_service, accounts):
    fav = favorite_service.add_favorite(
        "Paycheck", "Revenue", accounts.salary.id, to_account_id=accounts.bank.id
    )
    assert fav.type is FavoriteTransactionType.REVENUE


def test_add_favorite_validation(favorite_service, accounts):
    with pytest.raises(errors.ValidationError):
        favorite_service.add_favorite(" ", "expense", accounts.groceries.id, from_account_id=1)
    with pytest.raises(errors.ValidationError):
        favorite_service.add_favorite("Odd", "gift", accounts.groceries.id, from_account_id=1)
    with pytest.raises(errors.IncompleteTemplateError):
        favorite_service.add_favorite("Half", "lend", accounts.loan.id)
    with pytest.raises(errors.InvalidAccountError):
        favorite_service.add_favorite("Ghost", "expense", 999, from_account_id=accounts.cash.id)


def test_duplicate_favorite_name(favorite_service, accounts):
    favorite_service.add_favorite(
        "Coffee", "expense", accounts.groceries.id, from_account_id=accounts.cash.id
    )
    with pytest.raises(errors.DuplicateNameError):
        favorite_service.add_favorite(
            "COFFEE", "expense", accounts.groceries.id, from_account_id=accounts.bank.id
        )


def test_post_favorite(favorite_service, balance_service, accounts):
    favorite_service.add_favorite(
        "Coffee", "expense", accounts.groceries.id, from_account_id=accounts.cash.id
    )

    entry = favorite_service.post_favorite("Coffee", "4.50", date=date(2024, 6, 1))

    assert entry.description == "Coffee"
    assert entry.date == date(2024, 6, 1)
    assert balance_service.account_balance(accounts.cash.id) == Decimal("-4.5")
    assert balance_service.account_balance(accounts.groceries.id) == Decimal("4.5")


def test_post_favorite_zero_amount_rejected(favorite_service, accounts):
    favorite_service.add_favorite(
        "Coffee", "expense", accounts.groceries.id, from_account_id=accounts.cash.id
    )
    with pytest.raises(errors.UnbalancedEntryError):
        favorite_service.post_favorite("Coffee", 0)


def test_delete_favorite(favorite_service, accounts):
    fav = favorite_service.add_favorite(
        "Coffee", "expense", accounts.groceries.id, from_account_id=accounts.cash.id
    )

    favorite_service.delete_favorite(fav.id)

    assert favorite_service.list_favorites() == []
    with pytest.raises(errors.NotFoundError):
        favorite_service.resolve_favorite("Coffee")
