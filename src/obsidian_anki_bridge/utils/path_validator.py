"""Path validation utilities for vault safety."""

from pathlib import Path

from ..error_codes import ErrorCode
from ..exceptions import ConfigurationError, PathSecurityError


def validate_vault_path(vault_path: Path) -> Path:
    """Validate vault path for existence.

    Args:
        vault_path: Path to validate

    Returns:
        Resolved absolute path

    Raises:
        ConfigurationError: If path is missing or not a directory
    """
    vault_path = vault_path.expanduser()

    if not vault_path.exists():
        raise ConfigurationError(
            f"Vault path does not exist: {vault_path}",
            suggestion="Set VAULT_PATH to the root directory of your Obsidian vault",
            error_code=ErrorCode.CFG_VAULT_INVALID.value,
        )

    if not vault_path.is_dir():
        raise ConfigurationError(
            f"Vault path is not a directory: {vault_path}",
            suggestion="VAULT_PATH must point to a directory, not a file",
            error_code=ErrorCode.CFG_VAULT_INVALID.value,
        )

    try:
        return vault_path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ConfigurationError(
            f"Cannot resolve vault path: {vault_path}",
            suggestion=f"Error: {e}",
            error_code=ErrorCode.CFG_VAULT_INVALID.value,
        ) from e


def validate_source_dir(vault_path: Path, source_dir: Path | str) -> Path:
    """Resolve the flashcards folder inside the vault.

    The folder is allowed to be missing (a vault without flashcards simply
    has nothing to sync); it is never allowed to escape the vault.

    Args:
        vault_path: Validated vault path (must be absolute)
        source_dir: Folder relative to the vault root

    Returns:
        Absolute path to the folder

    Raises:
        ConfigurationError: If the folder resolves outside the vault or is a file
    """
    full_source_path = (vault_path / source_dir).resolve()

    if not full_source_path.is_relative_to(vault_path):
        raise ConfigurationError(
            f"Flashcards folder is outside vault: {source_dir}",
            suggestion="FLASHCARDS_FOLDER must be a relative path within the vault (no .. allowed)",
            error_code=ErrorCode.PTH_OUTSIDE_VAULT.value,
        )

    if full_source_path.exists() and not full_source_path.is_dir():
        raise ConfigurationError(
            f"Flashcards folder is not a directory: {full_source_path}",
            suggestion="FLASHCARDS_FOLDER must point to a directory",
            error_code=ErrorCode.CFG_VAULT_INVALID.value,
        )

    return full_source_path


def validate_note_path(vault_path: Path, note_path: Path | str) -> Path:
    """Validate a note path is within the vault.

    Relative paths are resolved against the vault root. Nothing is read.

    Args:
        vault_path: Validated vault path (must be absolute)
        note_path: Path to note file (relative or absolute)

    Returns:
        Absolute path to note file

    Raises:
        PathSecurityError: If the resolved path is outside the vault
    """
    note_path = Path(note_path)
    if not note_path.is_absolute():
        note_path = vault_path / note_path

    try:
        resolved_note = note_path.resolve(strict=False)
    except (OSError, RuntimeError) as e:
        raise PathSecurityError(
            f"Cannot resolve note path: {note_path}",
            suggestion=f"Error: {e}",
            error_code=ErrorCode.PTH_OUTSIDE_VAULT.value,
        ) from e

    if not resolved_note.is_relative_to(vault_path):
        raise PathSecurityError(
            f"Path is outside vault: {note_path}",
            suggestion="Note files must be within the vault directory",
            error_code=ErrorCode.PTH_OUTSIDE_VAULT.value,
            context={"path": str(note_path)},
        )

    return resolved_note


def vault_relative(vault_path: Path, path: Path) -> str:
    """Return ``path`` relative to the vault as a POSIX string."""
    return path.resolve().relative_to(vault_path).as_posix()
