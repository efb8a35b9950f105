"""Command line entry points for invoicekit."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from .commands import backup, check, numbers, report, sequence
from .errors import InvoiceKitError

CommandCallable = Callable[[list[str] | None], int | None]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata describing a CLI command exposed by :mod:`invoicekit.cli`."""

    name: str
    summary: str
    handler: CommandCallable
    module: str

    def run(self, argv: list[str] | None) -> int:
        """Execute the command and normalise the resulting exit code."""

        try:
            result = self.handler(argv)
        except SystemExit as exc:  # argparse exits on --help and bad usage
            code = exc.code
            if code is None:
                return 0
            if isinstance(code, int):
                return code
            print(str(code), file=sys.stderr)
            return 1
        except InvoiceKitError as exc:
            print(f"[ERRO] {exc}", file=sys.stderr)
            return 1
        if result is None:
            return 0
        return int(result)


_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="format",
        summary="Formata um número de documento a partir de uma sequência.",
        handler=numbers.main_format,
        module="invoicekit.commands.numbers",
    ),
    CommandSpec(
        name="next",
        summary="Calcula o número seguinte ao último número emitido.",
        handler=numbers.main_next,
        module="invoicekit.commands.numbers",
    ),
    CommandSpec(
        name="preview",
        summary="Mostra o próximo número de factura sem o reservar.",
        handler=sequence.main_preview,
        module="invoicekit.commands.sequence",
    ),
    CommandSpec(
        name="generate",
        summary="Reserva o próximo número de factura no servidor.",
        handler=sequence.main_generate,
        module="invoicekit.commands.sequence",
    ),
    CommandSpec(
        name="check",
        summary="Verifica se um número de documento já existe.",
        handler=check.main,
        module="invoicekit.commands.check",
    ),
    CommandSpec(
        name="report",
        summary="Relatório Excel das séries de numeração.",
        handler=report.main,
        module="invoicekit.commands.report",
    ),
    CommandSpec(
        name="backup",
        summary="Exporta a base de dados do servidor.",
        handler=backup.main_backup,
        module="invoicekit.commands.backup",
    ),
    CommandSpec(
        name="restore",
        summary="Importa uma cópia de segurança da base de dados.",
        handler=backup.main_restore,
        module="invoicekit.commands.backup",
    ),
)

_COMMAND_INDEX: Mapping[str, CommandSpec] = {spec.name: spec for spec in _COMMANDS}


def available_commands() -> Iterable[CommandSpec]:
    """Return the commands registered in the CLI."""

    return _COMMANDS


def build_parser() -> argparse.ArgumentParser:
    """Return the base argument parser shared across commands."""

    parser = argparse.ArgumentParser(description="Ferramentas de numeração e definições de facturação")
    subparsers = parser.add_subparsers(dest="command", metavar="comando")
    subparsers.required = True

    for spec in _COMMANDS:
        subparser = subparsers.add_parser(
            spec.name,
            help=spec.summary,
            description=spec.summary,
            add_help=False,
        )
        subparser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    return parser


def run(command: str, argv: Sequence[str] | None = None) -> int:
    """Execute *command* forwarding ``argv`` to the underlying handler."""

    spec = _COMMAND_INDEX.get(command)
    if spec is None:
        raise ValueError(f"Comando desconhecido: {command}")
    return spec.run(list(argv or []))


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the command line interface."""

    args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    # Só o nome do comando é analisado aqui; as opções pertencem ao handler.
    namespace = parser.parse_args(args[:1])
    return run(namespace.command, args[1:])


if __name__ == "__main__":  # pragma: no cover - execução directa
    raise SystemExit(main())
