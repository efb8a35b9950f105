from __future__ import annotations

from decimal import Decimal

import pytest

from invoicekit.formatting import currency_preview, currency_symbol, format_amount, format_currency
from invoicekit.settings import CurrencySettings


def test_format_currency_defaults():
    assert format_currency(1234.56) == "$1,234.56"
    assert format_currency(None) == "$0.00"
    assert format_currency("not a number") == "$0.00"


def test_format_currency_european_layout():
    settings = CurrencySettings(
        currency="EUR", symbol_position="after", thousands_separator=".", decimal_separator=","
    )
    assert format_currency(Decimal("1234567.891"), settings) == "1.234.567,89€"


@pytest.mark.parametrize(
    "places, expected",
    [(0, "1,235"), (1, "1,234.6"), (3, "1,234.560"), (4, "1,234.5600")],
)
def test_format_amount_decimal_places(places, expected):
    assert format_amount(1234.56, CurrencySettings(decimal_places=places)) == expected


def test_format_amount_rounds_half_up():
    settings = CurrencySettings()
    assert format_amount(2.675, settings) == "2.68"
    assert format_amount("0.005", settings) == "0.01"


def test_format_amount_negative_and_ungrouped():
    assert format_amount(-1234.5, CurrencySettings()) == "-1,234.50"
    assert format_amount(1234567, CurrencySettings(thousands_separator="none")) == "1234567.00"
    assert format_amount(999, CurrencySettings(thousands_separator=" ")) == "999.00"


def test_currency_symbol():
    assert currency_symbol("eur") == "€"
    assert currency_symbol("JPY") == "¥"
    assert currency_symbol("XYZ") == "XYZ"


def test_currency_preview():
    assert currency_preview(CurrencySettings(currency="GBP")) == "£1,234.56"


@pytest.mark.parametrize(
    "amount",
    [float("nan"), float("inf"), float("-inf"), "NaN", "Infinity", "-Infinity", Decimal("NaN")],
)
def test_non_finite_amounts_format_as_zero(amount):
    assert format_currency(amount) == "$0.00"
