"""Tests for vault path safety."""

from pathlib import Path

import pytest

from obsidian_anki_bridge.exceptions import ConfigurationError, PathSecurityError
from obsidian_anki_bridge.utils.path_validator import (
    validate_note_path,
    validate_source_dir,
    validate_vault_path,
    vault_relative,
)


def test_validate_vault_path_resolves(vault: Path) -> None:
    assert validate_vault_path(vault) == vault.resolve()


def test_validate_vault_path_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        validate_vault_path(tmp_path / "missing")
    assert exc_info.value.error_code == "CFG-VAULT-002"


def test_validate_vault_path_rejects_file(tmp_path: Path) -> None:
    file_path = tmp_path / "file.md"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        validate_vault_path(file_path)


def test_source_dir_may_be_missing(vault: Path) -> None:
    root = vault.resolve()
    assert validate_source_dir(root, "Cards") == root / "Cards"


def test_source_dir_outside_vault(vault: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        validate_source_dir(vault.resolve(), "../elsewhere")
    assert exc_info.value.error_code == "PTH-SAFE-001"


@pytest.mark.parametrize(
    "note_path",
    ["../secret.md", "Flashcards/../../secret.md", "/etc/passwd"],
)
def test_note_path_outside_vault(vault: Path, note_path: str) -> None:
    with pytest.raises(PathSecurityError) as exc_info:
        validate_note_path(vault.resolve(), note_path)
    assert exc_info.value.context["path"]


def test_note_path_inside_vault(vault: Path) -> None:
    root = vault.resolve()
    assert validate_note_path(root, "Flashcards/biology.md") == root / "Flashcards" / "biology.md"
    assert validate_note_path(root, "Flashcards/../Flashcards/x.md") == root / "Flashcards" / "x.md"


def test_symlink_escape_rejected(vault: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside.md"
    outside.write_text("Q\n---\nA", encoding="utf-8")
    (vault / "Flashcards" / "link.md").symlink_to(outside)
    with pytest.raises(PathSecurityError):
        validate_note_path(vault.resolve(), "Flashcards/link.md")


def test_vault_relative(vault: Path) -> None:
    root = vault.resolve()
    assert vault_relative(root, root / "Flashcards" / "biology.md") == "Flashcards/biology.md"
