"""Display-currency formatting and the persisted currency preference."""

from decimal import Decimal
from typing import Union

from finflow.domain.entities import Currency
from finflow.utils.logging_setup import get_logger
from finflow.utils.preferences import CURRENCY_KEY, PreferenceStore

logger = get_logger(__name__)

DEFAULT_CURRENCY = Currency.USD

_SYMBOLS = {
    Currency.USD: "$",
    Currency.COP: "$",
    Currency.EUR: "€",
}


def currency_symbol(currency: Currency) -> str:
    """Return the symbol shown before amounts."""
    return _SYMBOLS[Currency(currency)]


def format_value(value: Union[Decimal, int, float], currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format an amount for display, e.g. ``$1,234.50`` or ``$1,234.50 COP``."""
    currency = Currency(currency)
    formatted = f"{Decimal(str(value)):,.2f}"
    suffix = " COP" if currency == Currency.COP else ""
    return f"{currency_symbol(currency)}{formatted}{suffix}"


class CurrencyPreference:
    """Reads and writes the display currency slot."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    def load(self) -> Currency:
        """Return the saved currency, falling back to the default."""
        saved = self.store.get(CURRENCY_KEY)
        if saved is None:
            return DEFAULT_CURRENCY
        try:
            return Currency(saved)
        except ValueError:
            logger.warning("Unknown saved currency %r, using %s", saved, DEFAULT_CURRENCY.value)
            return DEFAULT_CURRENCY

    def save(self, currency: Union[Currency, str]) -> Currency:
        """Persist a new display currency.

        Raises:
            ValueError: If the code is not a supported currency
        """
        if isinstance(currency, Currency):
            value = currency
        else:
            try:
                value = Currency(str(currency).strip().upper())
            except ValueError as e:
                raise ValueError(f"Unsupported currency '{currency}'") from e
        self.store.set(CURRENCY_KEY, value.value)
        return value
