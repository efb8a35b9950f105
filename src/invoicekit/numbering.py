"""Document numbering helpers.

Numbers follow the ``PREFIX-YYYY-NNNN`` layout (or ``PREFIX-NNNN`` when the
year is disabled). The functions in this module are pure: they never talk to
the backend and never raise for odd input, so callers such as previews and
uniqueness checks can tolerate legacy numbers stored by older versions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Literal, Mapping

DocumentType = Literal["invoice", "expense", "payment"]

SEPARATOR = "-"

_PREFIX = r"[^\-\d\s]+"
_WITH_YEAR = re.compile(rf"^({_PREFIX})-(\d{{4}})-(\d+)$", re.ASCII)
_WITHOUT_YEAR = re.compile(rf"^({_PREFIX})-(\d+)$", re.ASCII)

SUGGESTED_PREFIXES: tuple[str, ...] = ("INV", "BILL", "QUO", "EST", "ORD", "REC")


@dataclass
class NumberingSettings:
    """User configurable numbering scheme for one document type."""

    prefix: str = "INV"
    start_number: int = 1
    padding_length: int = 4
    include_year: bool = True
    reset_on_new_year: bool = True


@dataclass(frozen=True)
class ParsedNumber:
    """Components recovered from a formatted number.

    An instance with every field set to ``None`` means the input could not be
    parsed; it evaluates as false.
    """

    prefix: str | None = None
    year: int | None = None
    sequence: int | None = None

    def __bool__(self) -> bool:
        return not (self.prefix is None and self.year is None and self.sequence is None)


DEFAULT_NUMBERING: Mapping[str, NumberingSettings] = {
    "invoice": NumberingSettings(prefix="INV"),
    "expense": NumberingSettings(prefix="EXP"),
    "payment": NumberingSettings(prefix="PAY"),
}


def default_settings(document_type: DocumentType) -> NumberingSettings:
    """Return a fresh copy of the defaults for ``document_type``."""

    try:
        defaults = DEFAULT_NUMBERING[document_type]
    except KeyError:
        raise ValueError(f"Unknown document type: {document_type}") from None
    return replace(defaults)


def _current_year() -> int:
    return date.today().year


def generate_number(
    settings: NumberingSettings, sequence: int, year: int | None = None
) -> str:
    """Format ``sequence`` according to ``settings``.

    The sequence is zero padded to ``padding_length`` digits but never
    truncated, so ``99999`` with a padding of 4 stays ``99999``.
    """

    prefix = settings.prefix or ""
    padding = max(int(settings.padding_length or 1), 1)
    padded = str(abs(int(sequence or 0))).zfill(padding)

    if settings.include_year:
        year_to_use = year or _current_year()
        return f"{prefix}{SEPARATOR}{year_to_use}{SEPARATOR}{padded}"
    return f"{prefix}{SEPARATOR}{padded}"


def parse_number(formatted: str | None) -> ParsedNumber:
    """Split a formatted number into prefix, year and sequence.

    Two segments are read as ``PREFIX-NNNN``; three segments only parse when
    the middle one is a four digit year. Anything else yields an empty
    :class:`ParsedNumber`.
    """

    if not formatted:
        return ParsedNumber()
    text = str(formatted).strip()

    match = _WITH_YEAR.match(text)
    if match:
        return ParsedNumber(
            prefix=match.group(1),
            year=int(match.group(2)),
            sequence=int(match.group(3)),
        )

    match = _WITHOUT_YEAR.match(text)
    if match:
        return ParsedNumber(prefix=match.group(1), sequence=int(match.group(2)))

    return ParsedNumber()


def next_number(
    settings: NumberingSettings,
    last_number: str | None = None,
    year: int | None = None,
) -> str:
    """Compute the number following ``last_number`` locally.

    Mirrors the backend rule: the series restarts at ``start_number`` when
    ``reset_on_new_year`` is set and the last number belongs to another
    year, otherwise it continues from the last parsed sequence.
    """

    current_year = year or _current_year()
    if not last_number:
        return generate_number(settings, settings.start_number, current_year)

    parsed = parse_number(last_number)
    if settings.reset_on_new_year and parsed.year and parsed.year != current_year:
        return generate_number(settings, settings.start_number, current_year)

    if parsed.sequence is not None:
        return generate_number(settings, parsed.sequence + 1, current_year)

    return generate_number(settings, settings.start_number, current_year)


def number_preview(prefix: str) -> str:
    """Return how the first number of a series looks with ``prefix``."""

    return f"{prefix}{SEPARATOR}0001"


def suggested_prefixes() -> list[str]:
    return list(SUGGESTED_PREFIXES)


__all__ = [
    "DEFAULT_NUMBERING",
    "DocumentType",
    "NumberingSettings",
    "ParsedNumber",
    "SUGGESTED_PREFIXES",
    "default_settings",
    "generate_number",
    "next_number",
    "number_preview",
    "parse_number",
    "suggested_prefixes",
]
