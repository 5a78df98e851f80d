"""Currency table domain service.

Every stored amount is in the default currency. A non-default currency C
carries ``exchange_rate`` such that one unit of C equals ``exchange_rate``
units of the default currency, so conversions between two foreign currencies
always go through the default one.
"""

from decimal import Decimal
from typing import Optional

import structlog

from zenledger.database.base import Database
from zenledger.domain import errors
from zenledger.domain.entities import Currency, SettingKey
from zenledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

ONE = Decimal("1")


def convert_amount(
    amount: Decimal, from_currency: Currency, to_currency: Currency, default_currency: Currency
) -> Decimal:
    """Convert an amount between currencies through the default currency."""
    if from_currency.id == to_currency.id:
        return amount

    if from_currency.id == default_currency.id:
        amount_in_default = amount
    else:
        amount_in_default = amount * from_currency.exchange_rate

    if to_currency.id == default_currency.id:
        return amount_in_default
    return amount_in_default / to_currency.exchange_rate


def format_money(amount: Decimal, symbol: str = "") -> str:
    """Render an amount with two decimals, thousands separators and a symbol."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


class CurrencyService:
    """Service for currencies, exchange rates and amount display.

    The default and display currencies are read from the settings store of
    the database passed in; nothing is cached between calls.
    """

    def __init__(self, db: Database):
        """Initialize currency service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_currency(
        self, name: str, code: str, symbol: str, exchange_rate: Decimal | float | str = ONE
    ) -> Currency:
        """Add a currency.

        The first currency added becomes the default, so its rate is stored
        as 1 whatever was requested.

        Raises:
            ValidationError: If a field is blank or the rate is not positive
            DuplicateCodeError: If the code already exists (ignoring case)
        """
        code = self._clean_code(code)
        name = self._require(name, "Currency name")
        symbol = self._require(symbol, "Currency symbol")
        rate = self._clean_rate(exchange_rate)

        if self.db.get_currency_by_code(code) is not None:
            raise errors.DuplicateCodeError(errors.duplicate_currency_code(code))

        becomes_default = self.default_currency() is None
        if becomes_default:
            rate = ONE

        currency_id = self.db.create_currency(
            name=name, code=code, symbol=symbol, exchange_rate=rate, make_default=becomes_default
        )
        logger.info("currency_added", currency_id=currency_id, code=code, rate=str(rate))
        return self.db.get_currency(currency_id)

    def update_currency(
        self,
        currency_id: int,
        name: Optional[str] = None,
        code: Optional[str] = None,
        symbol: Optional[str] = None,
        exchange_rate: Optional[Decimal | float | str] = None,
    ) -> None:
        """Update a currency.

        If the currency is the default, its rate is stored as exactly 1
        regardless of the requested value.

        Raises:
            NotFoundError: If the currency does not exist
            DuplicateCodeError: If another currency already has the code
            ValidationError: If the rate is not positive
        """
        if self.db.get_currency(currency_id) is None:
            raise errors.NotFoundError(errors.currency_not_found(currency_id))

        if code is not None:
            code = self._clean_code(code)
            existing = self.db.get_currency_by_code(code)
            if existing is not None and existing.id != currency_id:
                raise errors.DuplicateCodeError(errors.duplicate_currency_code(code))
        if name is not None:
            name = self._require(name, "Currency name")
        if symbol is not None:
            symbol = self._require(symbol, "Currency symbol")

        rate = None
        if exchange_rate is not None:
            rate = self._clean_rate(exchange_rate)

        default = self.default_currency()
        if default is not None and default.id == currency_id:
            if rate is not None and rate != ONE:
                logger.info(
                    "default_rate_forced", currency_id=currency_id, requested=str(rate)
                )
            rate = ONE

        self.db.update_currency(
            currency_id=currency_id, name=name, code=code, symbol=symbol, exchange_rate=rate
        )

    def delete_currency(self, currency_id: int) -> None:
        """Delete a currency.

        Raises:
            CannotDeleteDefaultError: If the currency is the default
            NotFoundError: If the currency does not exist
        """
        default = self.default_currency()
        if default is not None and default.id == currency_id:
            raise errors.CannotDeleteDefaultError(
                "Cannot delete the default currency. "
                "Please set a different currency as default first."
            )
        self.db.delete_currency(currency_id)
        logger.info("currency_deleted", currency_id=currency_id)

    def get_currency(self, currency_id: int) -> Optional[Currency]:
        """Get currency by ID."""
        return self.db.get_currency(currency_id)

    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        """Get currency by code, ignoring case."""
        return self.db.get_currency_by_code(code)

    def list_currencies(self) -> list[Currency]:
        """List all currencies."""
        return self.db.list_currencies()

    def default_currency(self) -> Optional[Currency]:
        """Resolve the default currency.

        Falls back to the first currency when the setting is missing or points
        at a currency that no longer exists. Returns None only when there are
        no currencies at all.
        """
        return self._resolve(SettingKey.DEFAULT_CURRENCY_ID, fallback=self._first_currency)

    def display_currency(self) -> Optional[Currency]:
        """Resolve the display currency, falling back to the default."""
        return self._resolve(SettingKey.DISPLAY_CURRENCY_ID, fallback=self.default_currency)

    def entry_currency(self) -> Optional[Currency]:
        """Resolve the currency new entries are typed in, falling back to the default."""
        return self._resolve(SettingKey.DEFAULT_ENTRY_CURRENCY_ID, fallback=self.default_currency)

    def set_default_currency(self, currency_id: int) -> None:
        """Make a currency the default.

        The new default's rate is forced to 1. Other rates are left as they
        are; they must be revised to be relative to the new default.
        """
        if self.db.get_currency(currency_id) is None:
            raise errors.NotFoundError(errors.currency_not_found(currency_id))
        self.db.set_default_currency(currency_id)
        logger.info("default_currency_changed", currency_id=currency_id)

    def set_display_currency(self, currency_id: int) -> None:
        """Choose the currency used to display amounts."""
        if self.db.get_currency(currency_id) is None:
            raise errors.NotFoundError(errors.currency_not_found(currency_id))
        self.db.set_setting(SettingKey.DISPLAY_CURRENCY_ID.value, currency_id)

    def set_entry_currency(self, currency_id: int) -> None:
        """Choose the currency new entries are typed in."""
        if self.db.get_currency(currency_id) is None:
            raise errors.NotFoundError(errors.currency_not_found(currency_id))
        self.db.set_setting(SettingKey.DEFAULT_ENTRY_CURRENCY_ID.value, currency_id)

    def convert(
        self, amount: Decimal | float | str, from_currency_id: int, to_currency_id: int
    ) -> Decimal:
        """Convert an amount between two currencies.

        Raises:
            NotFoundError: If either currency does not exist
        """
        amount = to_decimal(amount)
        if from_currency_id == to_currency_id:
            return amount

        from_currency = self.db.get_currency(from_currency_id)
        if from_currency is None:
            raise errors.NotFoundError(errors.currency_not_found(from_currency_id))
        to_currency = self.db.get_currency(to_currency_id)
        if to_currency is None:
            raise errors.NotFoundError(errors.currency_not_found(to_currency_id))

        return convert_amount(amount, from_currency, to_currency, self.default_currency())

    def to_default(self, amount: Decimal | float | str, from_currency_id: int) -> Decimal:
        """Convert an amount typed in some currency into the default currency."""
        default = self.default_currency()
        if default is None:
            raise errors.NotFoundError("No currencies are defined")
        return self.convert(amount, from_currency_id, default.id)

    def format_display(
        self, amount_in_default: Decimal | float | int, target_currency_id: Optional[int] = None
    ) -> str:
        """Format an amount stored in the default currency for display.

        Converts to the target currency (or the display currency) and renders
        two fraction digits with the currency symbol. Falls back to a plain
        numeral when currency data is unavailable; never raises.
        """
        try:
            amount = to_decimal(amount_in_default)
        except ValueError:
            return "0.00"

        try:
            default = self.default_currency()
            if target_currency_id is not None:
                target = self.db.get_currency(target_currency_id)
            else:
                target = self.display_currency()
            if default is None or target is None:
                return f"{amount:.2f}"
            converted = convert_amount(amount, default, target, default)
            return format_money(converted, target.symbol or f"{target.code} ")
        except Exception:
            logger.warning("format_display_failed", amount=str(amount), exc_info=True)
            return f"{amount:.2f}"

    def _resolve(self, key: SettingKey, fallback) -> Optional[Currency]:
        currency_id = self.db.get_setting(key.value)
        if isinstance(currency_id, int):
            currency = self.db.get_currency(currency_id)
            if currency is not None:
                return currency
        return fallback()

    def _first_currency(self) -> Optional[Currency]:
        currencies = self.db.list_currencies()
        return currencies[0] if currencies else None

    @staticmethod
    def _clean_code(code: str) -> str:
        if code is None or not code.strip():
            raise errors.ValidationError("Currency code is required")
        return code.strip().upper()

    @staticmethod
    def _require(value: str, label: str) -> str:
        if value is None or not value.strip():
            raise errors.ValidationError(f"{label} is required")
        return value.strip()

    @staticmethod
    def _clean_rate(exchange_rate) -> Decimal:
        try:
            rate = to_decimal(exchange_rate)
        except ValueError as e:
            raise errors.ValidationError(f"Invalid exchange rate: {e}")
        if rate <= 0:
            raise errors.ValidationError(f"Exchange rate must be positive, got {rate}")
        return rate
