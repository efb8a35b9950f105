"""Check whether a document number is already in use."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..uniqueness import NUMBER_FIELDS, UniquenessChecker
from . import add_connection_arguments, open_client

EXIT_DUPLICATE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Verifica se um número de documento já existe (comparação sensível a maiúsculas)."
    )
    parser.add_argument("number", help="Número a verificar.")
    parser.add_argument("--exclude-id", dest="exclude_id", help="Ignorar o documento com este id.")
    parser.add_argument("--resource", choices=sorted(NUMBER_FIELDS), default="invoices")
    parser.add_argument("--field", dest="number_field", help="Campo que guarda o número.")
    add_connection_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    client = open_client(args)
    try:
        checker = UniquenessChecker(
            client, resource=args.resource, number_field=args.number_field
        )
        unique = checker.is_unique(args.number, args.exclude_id)
    finally:
        client.close()

    if unique:
        print(f"{args.number}: disponível")
        return 0
    print(f"{args.number}: já existe")
    return EXIT_DUPLICATE
