"""Currency formatting driven by :class:`~invoicekit.settings.CurrencySettings`."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from .settings import CurrencySettings
from .utils import parse_decimal

CURRENCY_SYMBOLS: Mapping[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
    "CHF": "CHF",
    "CNY": "¥",
    "INR": "₹",
    "BRL": "R$",
}

PREVIEW_AMOUNT = Decimal("1234.56")


def currency_symbol(code: str) -> str:
    """Return the display symbol for ``code``, or the code itself."""

    return CURRENCY_SYMBOLS.get(code.upper(), code)


def _group_thousands(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_amount(amount: Any, settings: CurrencySettings) -> str:
    """Format ``amount`` without the currency symbol."""

    value = parse_decimal(amount)
    places = settings.decimal_places
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if rounded < 0 else ""
    text = f"{abs(rounded):.{places}f}"
    integer_part, _, decimal_part = text.partition(".")

    if settings.thousands_separator != "none":
        integer_part = _group_thousands(integer_part, settings.thousands_separator)

    result = integer_part
    if places > 0:
        result += settings.decimal_separator + decimal_part
    return sign + result


def format_currency(amount: Any, settings: CurrencySettings | None = None) -> str:
    """Format ``amount`` with symbol and separators; ``None`` counts as zero."""

    settings = settings or CurrencySettings()
    symbol = currency_symbol(settings.currency)
    number = format_amount(amount, settings)
    if settings.symbol_position == "before":
        return f"{symbol}{number}"
    return f"{number}{symbol}"


def currency_preview(settings: CurrencySettings) -> str:
    return format_currency(PREVIEW_AMOUNT, settings)


__all__ = [
    "CURRENCY_SYMBOLS",
    "currency_preview",
    "currency_symbol",
    "format_amount",
    "format_currency",
]
