"""Server side numbering commands: preview and generate."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..sequence import SequenceProvider
from . import add_connection_arguments, open_client


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    add_connection_arguments(parser)
    return parser


def main_preview(argv: Sequence[str] | None = None) -> int:
    parser = build_parser("Mostra o próximo número de factura sem o reservar.")
    args = parser.parse_args(argv)

    client = open_client(args)
    try:
        print(SequenceProvider(client).preview())
    finally:
        client.close()
    return 0


def main_generate(argv: Sequence[str] | None = None) -> int:
    parser = build_parser("Reserva e mostra o próximo número de factura.")
    args = parser.parse_args(argv)

    client = open_client(args)
    try:
        print(SequenceProvider(client).generate())
    finally:
        client.close()
    return 0
