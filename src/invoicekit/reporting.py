"""Aggregate stored document numbers and build Excel audit reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping

from openpyxl import Workbook

from .numbering import parse_number

# Gaps wider than this are reported as a range count only.
MAX_LISTED_GAPS = 50


@dataclass
class SeriesTotals:
    """Summary of all numbers sharing a prefix and year."""

    prefix: str
    year: int | None
    sequences: list[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.sequences)

    @property
    def first(self) -> int:
        return min(self.sequences)

    @property
    def last(self) -> int:
        return max(self.sequences)

    def gap_count(self) -> int:
        return self.last - self.first + 1 - len(set(self.sequences))

    def missing(self, limit: int | None = None) -> list[int]:
        """Sequences between ``first`` and ``last`` that were never used.

        With ``limit`` only the first ``limit`` gaps are returned; the walk
        follows the used sequences, so a single outlier stays cheap.
        """

        used = sorted(set(self.sequences))
        gaps: list[int] = []
        for previous, current in zip(used, used[1:]):
            for value in range(previous + 1, current):
                if limit is not None and len(gaps) >= limit:
                    return gaps
                gaps.append(value)
        return gaps


@dataclass
class DuplicateNumber:
    number: str
    ids: list[Any]


@dataclass
class UnparseableNumber:
    id: Any
    number: str


@dataclass
class NumberingReport:
    """Container for the data extracted from a document list."""

    series: dict[tuple[str, int | None], SeriesTotals]
    duplicates: list[DuplicateNumber]
    unparseable: list[UnparseableNumber]
    total_documents: int


def aggregate_numbers(
    records: Iterable[Mapping[str, Any]], number_field: str = "invoice_number"
) -> NumberingReport:
    """Group ``records`` by series and flag duplicates and malformed numbers."""

    series: dict[tuple[str, int | None], SeriesTotals] = {}
    ids_by_number: dict[str, list[Any]] = {}
    unparseable: list[UnparseableNumber] = []
    total = 0

    for record in records:
        total += 1
        number = str(record.get(number_field) or "").strip()
        record_id = record.get("id")
        if not number:
            unparseable.append(UnparseableNumber(id=record_id, number=""))
            continue

        ids_by_number.setdefault(number, []).append(record_id)

        parsed = parse_number(number)
        if not parsed or parsed.prefix is None or parsed.sequence is None:
            unparseable.append(UnparseableNumber(id=record_id, number=number))
            continue

        key = (parsed.prefix, parsed.year)
        if key not in series:
            series[key] = SeriesTotals(prefix=parsed.prefix, year=parsed.year)
        series[key].sequences.append(parsed.sequence)

    duplicates = [
        DuplicateNumber(number=number, ids=ids)
        for number, ids in sorted(ids_by_number.items())
        if len(ids) > 1
    ]
    return NumberingReport(
        series=series,
        duplicates=duplicates,
        unparseable=unparseable,
        total_documents=total,
    )


def _format_missing(totals: SeriesTotals) -> str:
    count = totals.gap_count()
    if not count:
        return ""
    if count > MAX_LISTED_GAPS:
        return f"{count} em falta"
    return ", ".join(str(value) for value in totals.missing(MAX_LISTED_GAPS))


def _series_sort_key(key: tuple[str, int | None]) -> tuple[str, int]:
    prefix, year = key
    return prefix, year or 0


def write_excel_report(report: NumberingReport, destination: Path) -> None:
    """Generate an Excel workbook with series totals, duplicates and errors."""

    destination.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    series_ws = workbook.active
    series_ws.title = "Series"
    series_ws.append(["Prefixo", "Ano", "Documentos", "Primeiro", "Último", "Em falta"])

    for key in sorted(report.series, key=_series_sort_key):
        totals = report.series[key]
        series_ws.append(
            [
                totals.prefix,
                totals.year,
                totals.count,
                totals.first,
                totals.last,
                _format_missing(totals),
            ]
        )

    series_ws.append([])
    series_ws.append(["Total de documentos", report.total_documents])

    duplicates_ws = workbook.create_sheet(title="Duplicates")
    duplicates_ws.append(["Número", "Ocorrências", "IDs"])
    for duplicate in report.duplicates:
        duplicates_ws.append(
            [
                duplicate.number,
                len(duplicate.ids),
                ", ".join(str(value) for value in duplicate.ids),
            ]
        )

    unparseable_ws = workbook.create_sheet(title="Unparseable")
    unparseable_ws.append(["ID", "Número"])
    for entry in report.unparseable:
        unparseable_ws.append([entry.id, entry.number])

    workbook.save(destination)


def default_report_destination(resource: str, directory: Path | None = None) -> Path:
    """Return ``<directory>/<resource>_numeracao_<date>.xlsx``."""

    directory = directory or Path.cwd()
    return directory / f"{resource}_numeracao_{date.today():%Y%m%d}.xlsx"


__all__ = [
    "DuplicateNumber",
    "NumberingReport",
    "SeriesTotals",
    "UnparseableNumber",
    "aggregate_numbers",
    "default_report_destination",
    "write_excel_report",
]
