from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from openpyxl import load_workbook

from invoicekit import cli
from invoicekit.client import ApiClient
from invoicekit.config import ClientConfig

from conftest import API_BASE, BrokenStreamResponse, DummyResponse, ok


@pytest.fixture
def backend(monkeypatch, session):
    """Point every command at the dummy session instead of a real backend."""

    def factory(config: ClientConfig) -> ApiClient:
        api = ApiClient(ClientConfig(api_base=API_BASE, token=config.token), session=session)  # type: ignore[arg-type]
        api.connect_backoff = 0
        return api

    monkeypatch.setattr("invoicekit.commands.ApiClient", factory)
    monkeypatch.setattr("invoicekit.commands.configure_logging", lambda *args, **kwargs: None)
    return session


def test_available_commands():
    names = [spec.name for spec in cli.available_commands()]
    assert names == ["format", "next", "preview", "generate", "check", "report", "backup", "restore"]


def test_format_command(capsys):
    assert cli.main(["format", "7", "--year", "2026"]) == 0
    assert capsys.readouterr().out.strip() == "INV-2026-0007"

    assert cli.main(["format", "7", "--type", "expense", "--no-year", "--padding", "2"]) == 0
    assert capsys.readouterr().out.strip() == "EXP-07"


def test_next_command_offline(capsys):
    assert cli.main(["next", "--offline", "--last", "INV-2025-0099", "--year", "2026"]) == 0
    assert capsys.readouterr().out.strip() == "INV-2026-0001"

    assert cli.main(["next", "--offline", "--no-reset", "--last", "INV-2025-0099", "--year", "2026"]) == 0
    assert capsys.readouterr().out.strip() == "INV-2026-0100"


def test_next_command_warns_on_unrecognised_last(capsys):
    assert cli.main(["next", "--offline", "--last", "rascunho", "--year", "2026"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("[AVISO]")
    assert out[1] == "INV-2026-0001"


def test_next_command_uses_stored_settings(backend, capsys):
    backend.routes[("GET", "/settings/invoice_numbering_settings")] = ok(
        {"value": {"prefix": "FT", "includeYear": False}}
    )
    assert cli.main(["next", "--last", "FT-0041"]) == 0
    assert capsys.readouterr().out.strip() == "FT-0042"
    assert backend.closed


def test_preview_and_generate(backend, capsys):
    backend.routes[("GET", "/invoices/preview-number")] = ok({"invoice_number": "INV-2026-0010"})
    backend.routes[("POST", "/invoices/generate-number")] = ok({"invoice_number": "INV-2026-0010"})

    assert cli.main(["preview"]) == 0
    assert cli.main(["generate", "--token", "abc"]) == 0
    assert capsys.readouterr().out.splitlines() == ["INV-2026-0010", "INV-2026-0010"]
    assert backend.calls[-1][2]["headers"]["Authorization"] == "Bearer abc"


def test_check_command_exit_codes(backend, capsys):
    backend.routes[("GET", "/invoices")] = ok([{"id": 3, "invoice_number": "INV-2026-0003"}])

    assert cli.main(["check", "INV-2026-0004"]) == 0
    assert cli.main(["check", "INV-2026-0003"]) == 2
    assert cli.main(["check", "INV-2026-0003", "--exclude-id", "3"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["INV-2026-0004: disponível", "INV-2026-0003: já existe", "INV-2026-0003: disponível"]


def test_backend_errors_become_exit_code_one(backend, capsys):
    backend.routes[("GET", "/health")] = DummyResponse(503, {})
    assert cli.main(["preview"]) == 1
    assert "[ERRO] Backend server not available" in capsys.readouterr().err


def test_report_command(backend, capsys, tmp_path: Path):
    backend.routes[("GET", "/expenses")] = ok(
        {"expenses": [{"id": 1, "expense_number": "EXP-0001"}, {"id": 2, "expense_number": "EXP-0001"}]}
    )
    output = tmp_path / "report.xlsx"

    assert cli.main(["report", "--resource", "expenses", "--output", str(output)]) == 0

    out = capsys.readouterr().out
    assert str(output) in out
    assert "[AVISO] 1 número(s) duplicado(s)." in out
    rows = list(load_workbook(output)["Duplicates"].iter_rows(values_only=True))
    assert rows[1] == ("EXP-0001", 2, "1, 2")


def test_backup_and_restore(backend, capsys, tmp_path: Path):
    backend.routes[("GET", "/db/export")] = DummyResponse(200, None, content=b"db-bytes")
    backend.routes[("POST", "/db/import")] = DummyResponse(200, {"success": True})
    destination = tmp_path / "backup.db"

    assert cli.main(["backup", str(destination)]) == 0
    assert destination.read_bytes() == b"db-bytes"

    assert cli.main(["restore", str(destination)]) == 0
    assert "/db/import" in backend.paths("POST")


def test_interrupted_backup_exits_with_error(backend, capsys, tmp_path: Path):
    backend.routes[("GET", "/db/export")] = BrokenStreamResponse(200, None)
    destination = tmp_path / "backup.db"

    assert cli.main(["backup", str(destination)]) == 1
    assert "[ERRO] Export interrupted" in capsys.readouterr().err
    assert not destination.exists()


def test_restore_missing_file(tmp_path: Path, capsys):
    assert cli.main(["restore", str(tmp_path / "missing.db")]) == 1
    assert "[ERRO]" in capsys.readouterr().err


def test_unknown_command():
    with pytest.raises(SystemExit) as exc:
        cli.main(["bogus"])
    assert exc.value.code == 2

    with pytest.raises(ValueError):
        cli.run("bogus")


def test_command_usage_errors_return_exit_code(capsys):
    assert cli.main(["format"]) == 2
    assert cli.main(["format", "--help"]) == 0


def test_default_backup_destination(tmp_path: Path):
    from invoicekit.commands.backup import default_backup_destination

    path = default_backup_destination(tmp_path)
    assert path.parent == tmp_path
    assert path.name.startswith(f"backup_{date.today():%Y%m%d}_")
    assert path.suffix == ".db"
