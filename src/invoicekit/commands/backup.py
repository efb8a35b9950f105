"""Database backup and restore through the backend export/import routes."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from . import add_connection_arguments, open_client


def default_backup_destination(directory: Path | None = None) -> Path:
    directory = directory or Path.cwd()
    return directory / f"backup_{datetime.now():%Y%m%d_%H%M%S}.db"


def main_backup(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Exporta a base de dados para um ficheiro.")
    parser.add_argument("destination", nargs="?", type=Path, help="Ficheiro de destino.")
    add_connection_arguments(parser)
    args = parser.parse_args(argv)

    destination = args.destination or default_backup_destination()
    client = open_client(args)
    try:
        client.export_database(destination)
    finally:
        client.close()
    print(f"Cópia de segurança guardada em: {destination}")
    return 0


def main_restore(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Substitui a base de dados do servidor pelo ficheiro indicado."
    )
    parser.add_argument("source", type=Path, help="Ficheiro de cópia de segurança.")
    add_connection_arguments(parser)
    args = parser.parse_args(argv)

    if not args.source.exists():
        print(f"[ERRO] Ficheiro não encontrado: {args.source}", file=sys.stderr)
        return 1

    client = open_client(args)
    try:
        client.import_database(args.source)
    finally:
        client.close()
    print(f"Base de dados restaurada a partir de: {args.source}")
    return 0
