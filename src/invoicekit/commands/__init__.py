"""Command implementations used by :mod:`invoicekit.cli`."""

from __future__ import annotations

import argparse

from ..client import ApiClient
from ..config import load_config
from ..log import configure_logging


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the flags shared by every command that talks to the backend."""

    parser.add_argument("--api-base", dest="api_base", help="URL base da API (INVOICEKIT_API_BASE).")
    parser.add_argument("--token", help="Token de autenticação (INVOICEKIT_API_TOKEN).")
    parser.add_argument("--timeout", type=float, help="Timeout por pedido em segundos.")
    parser.add_argument("--verbose", action="store_true", help="Registo detalhado.")


def open_client(args: argparse.Namespace) -> ApiClient:
    """Build, configure logging for, and connect an :class:`ApiClient`."""

    config = load_config(
        api_base=getattr(args, "api_base", None),
        token=getattr(args, "token", None),
        timeout=getattr(args, "timeout", None),
    )
    configure_logging(getattr(args, "verbose", False), config.log_dir)
    client = ApiClient(config)
    client.connect()
    return client
