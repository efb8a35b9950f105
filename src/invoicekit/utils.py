"""Utility helpers shared across invoicekit modules."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping


def parse_decimal(value: Any, *, default: Decimal = Decimal("0")) -> Decimal:
    """Convert the provided value to :class:`~decimal.Decimal`.

    Empty strings, invalid values, ``NaN`` and infinities return the given
    ``default``.
    """

    if value is None:
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        if isinstance(value, float):
            value = repr(value)

        text = str(value).strip()
        if not text:
            return default

        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            return default

    return result if result.is_finite() else default


def unwrap_data(payload: Mapping[str, Any], *keys: str) -> Any:
    """Follow ``data`` and then ``keys`` through a nested API payload.

    Returns ``None`` as soon as a level is missing or not a mapping.
    """

    current: Any = payload.get("data")
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


__all__ = ["parse_decimal", "unwrap_data"]
