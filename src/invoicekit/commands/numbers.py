"""Local numbering commands: format a sequence and compute the next number."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..numbering import (
    DEFAULT_NUMBERING,
    NumberingSettings,
    default_settings,
    generate_number,
    next_number,
    parse_number,
)
from ..settings import load_numbering_settings
from . import add_connection_arguments, open_client


def _add_scheme_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--prefix", help="Prefixo da série (ex.: INV).")
    parser.add_argument("--padding", type=int, help="Número mínimo de dígitos.")
    parser.add_argument("--start", type=int, help="Primeiro número da série.")
    parser.add_argument("--no-year", action="store_true", help="Não incluir o ano.")
    parser.add_argument("--no-reset", action="store_true", help="Não reiniciar a série no novo ano.")
    parser.add_argument("--year", type=int, help="Ano a usar (por omissão, o actual).")


def _apply_overrides(settings: NumberingSettings, args: argparse.Namespace) -> NumberingSettings:
    if args.prefix is not None:
        settings.prefix = args.prefix
    if args.padding is not None:
        settings.padding_length = args.padding
    if args.start is not None:
        settings.start_number = args.start
    if args.no_year:
        settings.include_year = False
    if args.no_reset:
        settings.reset_on_new_year = False
    return settings


def build_format_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Formata um número de documento a partir de uma sequência."
    )
    parser.add_argument("sequence", type=int, help="Posição na série.")
    parser.add_argument(
        "--type", dest="document_type", choices=sorted(DEFAULT_NUMBERING), default="invoice"
    )
    _add_scheme_arguments(parser)
    return parser


def main_format(argv: Sequence[str] | None = None) -> int:
    args = build_format_parser().parse_args(argv)
    settings = _apply_overrides(default_settings(args.document_type), args)
    print(generate_number(settings, args.sequence, args.year))
    return 0


def build_next_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Calcula o número seguinte a partir do último número conhecido, "
            "aplicando a regra de reinício anual."
        )
    )
    parser.add_argument("--last", help="Último número emitido (ex.: INV-2025-0099).")
    parser.add_argument(
        "--type", dest="document_type", choices=sorted(DEFAULT_NUMBERING), default="invoice"
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Usar as definições por omissão em vez das guardadas no servidor.",
    )
    _add_scheme_arguments(parser)
    add_connection_arguments(parser)
    return parser


def main_next(argv: Sequence[str] | None = None) -> int:
    args = build_next_parser().parse_args(argv)

    if args.offline:
        settings = default_settings(args.document_type)
    else:
        client = open_client(args)
        try:
            settings = load_numbering_settings(client, args.document_type)
        finally:
            client.close()

    settings = _apply_overrides(settings, args)
    if args.last and not parse_number(args.last):
        print(f"[AVISO] Número não reconhecido, a reiniciar a série: {args.last}")
    print(next_number(settings, args.last, args.year))
    return 0
