"""Tests for the command-line interface."""

from pathlib import Path

import httpx
import respx
from typer.testing import CliRunner

from obsidian_anki_bridge.cli import app

runner = CliRunner()


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("parse", "preview", "sync", "list", "check"):
        assert command in result.output


def test_parse_json(vault: Path) -> None:
    result = runner.invoke(
        app, ["parse", "Flashcards/biology.md", "--vault", str(vault), "--json"]
    )

    assert result.exit_code == 0
    assert '"card_count": 1' in result.output
    assert '"deck": "Rina::Biology"' in result.output


def test_parse_outside_vault_fails(vault: Path) -> None:
    result = runner.invoke(app, ["parse", "../secret.md", "--vault", str(vault)])

    assert result.exit_code == 1
    assert "Security error" in result.output


def test_preview_table(vault: Path) -> None:
    result = runner.invoke(app, ["preview", "--vault", str(vault)])

    assert result.exit_code == 0
    assert "1 cards would be synced" in result.output
    assert "Rina::Biology" in result.output


def test_list_with_filter(vault: Path) -> None:
    result = runner.invoke(
        app, ["list", "--vault", str(vault), "--subject", "CHEM", "--json"]
    )

    assert result.exit_code == 0
    assert '"total_count": 0' in result.output


def test_sync_dry_run_does_not_contact_anki(vault: Path) -> None:
    with respx.mock(assert_all_called=False) as mock:
        route = mock.post("http://localhost:8765")
        result = runner.invoke(app, ["sync", "--dry-run", "--vault", str(vault), "--json"])

    assert result.exit_code == 0
    assert '"dry_run": true' in result.output
    assert not route.called


def test_sync_reports_anki_down(vault: Path) -> None:
    with respx.mock:
        respx.post("http://localhost:8765").mock(side_effect=httpx.ConnectError("refused"))
        result = runner.invoke(app, ["sync", "--vault", str(vault)])

    assert result.exit_code == 1
    assert "Anki not connected" in result.output


def test_check_healthy(vault: Path) -> None:
    with respx.mock:
        respx.post("http://localhost:8765").mock(
            return_value=httpx.Response(200, json={"result": 6, "error": None})
        )
        result = runner.invoke(app, ["check", "--vault", str(vault), "--json"])

    assert result.exit_code == 0
    assert '"anki_connected": true' in result.output


def test_missing_vault_is_configuration_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["list", "--vault", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
