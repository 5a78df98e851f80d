"""Tests for currencies, conversion and display formatting."""

from decimal import Decimal

import pytest

from zenledger.domain import errors
from zenledger.domain.currency import format_money
from zenledger.domain.entities import SettingKey


def test_first_currency_becomes_default_with_rate_one(currency_service):
    usd = currency_service.add_currency("US Dollar", "usd", "$", "3")

    assert usd.code == "USD"
    assert usd.exchange_rate == Decimal("1")
    assert currency_service.default_currency() == usd


def test_second_currency_keeps_its_rate(currencies):
    assert currencies.eur.exchange_rate == Decimal("1.1")


def test_duplicate_code_ignores_case(currency_service, currencies):
    with pytest.raises(errors.DuplicateCodeError):
        currency_service.add_currency("Euro again", "eur", "€")


@pytest.mark.parametrize("rate", ["0", "-2"])
def test_rate_must_be_positive(currency_service, currencies, rate):
    with pytest.raises(errors.ValidationError):
        currency_service.add_currency("Pound", "GBP", "£", rate)


def test_blank_fields_rejected(currency_service):
    with pytest.raises(errors.ValidationError):
        currency_service.add_currency("", "GBP", "£")
    with pytest.raises(errors.ValidationError):
        currency_service.add_currency("Pound", " ", "£")


def test_default_rate_stays_one_on_update(currency_service, currencies):
    currency_service.update_currency(currencies.usd.id, exchange_rate=5)

    assert currency_service.get_currency(currencies.usd.id).exchange_rate == Decimal("1")


def test_update_other_currency_rate(currency_service, currencies):
    currency_service.update_currency(currencies.eur.id, exchange_rate="1.2", symbol="EUR€")

    eur = currency_service.get_currency(currencies.eur.id)
    assert eur.exchange_rate == Decimal("1.2")
    assert eur.symbol == "EUR€"


def test_update_to_taken_code_fails(currency_service, currencies):
    with pytest.raises(errors.DuplicateCodeError):
        currency_service.update_currency(currencies.eur.id, code="usd")


def test_cannot_delete_default(currency_service, currencies):
    with pytest.raises(errors.CannotDeleteDefaultError):
        currency_service.delete_currency(currencies.usd.id)

    assert currency_service.get_currency(currencies.usd.id) is not None


def test_delete_other_currency(currency_service, currencies):
    currency_service.delete_currency(currencies.eur.id)

    assert currency_service.get_currency_by_code("EUR") is None


def test_conversion_through_default(currency_service, currencies):
    usd, eur = currencies.usd.id, currencies.eur.id

    assert currency_service.convert(10, eur, usd) == Decimal("11")
    assert currency_service.convert(11, usd, eur) == Decimal("10")


def test_conversion_identity(currency_service, currencies):
    assert currency_service.convert("12.34", currencies.eur.id, currencies.eur.id) == Decimal("12.34")


def test_conversion_round_trip_within_epsilon(currency_service, currencies):
    gbp = currency_service.add_currency("Pound", "GBP", "£", "1.27")
    there = currency_service.convert("73.19", gbp.id, currencies.eur.id)
    back = currency_service.convert(there, currencies.eur.id, gbp.id)

    assert abs(back - Decimal("73.19")) < Decimal("0.001")


def test_convert_unknown_currency(currency_service, currencies):
    with pytest.raises(errors.NotFoundError):
        currency_service.convert(1, currencies.eur.id, 999)


def test_to_default(currency_service, currencies):
    assert currency_service.to_default(10, currencies.eur.id) == Decimal("11")


def test_set_default_forces_rate_one(currency_service, currencies):
    currency_service.set_default_currency(currencies.eur.id)

    assert currency_service.default_currency().id == currencies.eur.id
    assert currency_service.get_currency(currencies.eur.id).exchange_rate == Decimal("1")


def test_dangling_default_falls_back_to_first_currency(currency_service, settings_service, currencies):
    settings_service.set(SettingKey.DEFAULT_CURRENCY_ID, 999)

    assert currency_service.default_currency().id == currencies.usd.id


def test_display_and_entry_fall_back_to_default(currency_service, currencies):
    assert currency_service.display_currency().id == currencies.usd.id
    assert currency_service.entry_currency().id == currencies.usd.id

    currency_service.set_display_currency(currencies.eur.id)
    currency_service.set_entry_currency(currencies.eur.id)

    assert currency_service.display_currency().id == currencies.eur.id
    assert currency_service.entry_currency().id == currencies.eur.id


def test_no_currencies_means_no_default(currency_service):
    assert currency_service.default_currency() is None
    assert currency_service.display_currency() is None


def test_format_display_uses_display_currency(currency_service, currencies):
    assert currency_service.format_display(Decimal("1234.5")) == "$1,234.50"

    currency_service.set_display_currency(currencies.eur.id)
    assert currency_service.format_display(11) == "€10.00"


def test_format_display_with_explicit_target(currency_service, currencies):
    assert currency_service.format_display(-22, currencies.eur.id) == "-€20.00"


def test_format_display_without_currencies(currency_service):
    assert currency_service.format_display(Decimal("3.456")) == "3.46"


def test_format_display_never_raises(currency_service, currencies):
    assert currency_service.format_display("not a number") == "0.00"


def test_format_money():
    assert format_money(Decimal("-1234.5"), "$") == "-$1,234.50"
    assert format_money(Decimal("0"), "") == "0.00"
