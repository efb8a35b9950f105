"""Generate an Excel audit of the document numbers stored on the backend."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from ..reporting import aggregate_numbers, default_report_destination, write_excel_report
from ..uniqueness import NUMBER_FIELDS
from . import add_connection_arguments, open_client


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Gera um relatório em Excel com as séries de numeração, números "
            "duplicados e números não reconhecidos."
        )
    )
    parser.add_argument("--resource", choices=sorted(NUMBER_FIELDS), default="invoices")
    parser.add_argument("--field", dest="number_field", help="Campo que guarda o número.")
    parser.add_argument("--output", type=Path, help="Caminho do ficheiro .xlsx a criar.")
    add_connection_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    client = open_client(args)
    try:
        records = client.list_documents(args.resource)
    finally:
        client.close()

    number_field = args.number_field or NUMBER_FIELDS[args.resource]
    data = aggregate_numbers(records, number_field)
    destination = args.output or default_report_destination(args.resource)
    write_excel_report(data, destination)
    print(f"Relatório de numeração guardado em: {destination}")
    if data.duplicates:
        print(f"[AVISO] {len(data.duplicates)} número(s) duplicado(s).")

    return 0
