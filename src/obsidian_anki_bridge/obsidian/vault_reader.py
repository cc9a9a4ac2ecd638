"""Read and write flashcard notes inside an Obsidian vault."""

from pathlib import Path

from ..error_codes import ErrorCode
from ..exceptions import DocumentNotFoundError, SyncError
from ..utils.logging import get_logger
from ..utils.path_validator import validate_note_path, validate_source_dir, vault_relative
from .parser import read_document

logger = get_logger(__name__)


class VaultReader:
    """Document source for one vault.

    Every path handed in from outside is checked with ``resolve_note`` before
    it is read, so nothing outside the vault is ever opened.
    """

    def __init__(self, vault_path: Path, flashcards_folder: str = "Flashcards"):
        self.vault_path = vault_path
        self.flashcards_folder = flashcards_folder

    @classmethod
    def from_config(cls, config) -> "VaultReader":  # type: ignore[no-untyped-def]
        return cls(config.vault_root, config.flashcards_folder)

    @property
    def flashcards_dir(self) -> Path:
        return validate_source_dir(self.vault_path, self.flashcards_folder)

    def list_documents(self) -> list[Path]:
        """All ``.md`` files under the flashcards folder, sorted by path."""
        folder = self.flashcards_dir
        if not folder.is_dir():
            logger.debug("flashcards_folder_missing", path=str(folder))
            return []
        return sorted(
            p for p in folder.rglob("*") if p.is_file() and p.suffix.lower() == ".md"
        )

    def resolve_note(self, note_path: Path | str) -> Path:
        """Resolve a caller-supplied path inside the vault.

        Raises:
            PathSecurityError: If the path escapes the vault
            DocumentNotFoundError: If no such file exists
        """
        resolved = validate_note_path(self.vault_path, note_path)
        if not resolved.is_file():
            raise DocumentNotFoundError(
                f"File not found: {note_path}",
                error_code=ErrorCode.PTH_NOT_FOUND.value,
                context={"file": str(note_path)},
            )
        return resolved

    def relative_path(self, path: Path) -> str:
        return vault_relative(self.vault_path, path)

    def read_document(self, path: Path) -> str:
        return read_document(path)

    def write_document(self, path: Path, text: str) -> None:
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise SyncError(
                f"Failed to write {path}: {e}",
                error_code=ErrorCode.SYN_WRITE_BACK_FAILED.value,
                context={"file": str(path)},
            ) from e
