"""Interface for Anki client operations."""

from abc import ABC, abstractmethod

from ...models import Flashcard, NoteSnapshot, PingResult


class IAnkiClient(ABC):
    """Interface for Anki connectivity and note operations.

    This interface defines the contract the sync engine relies on. Every
    operation is a coroutine and is awaited one at a time.
    """

    @abstractmethod
    async def ping(self) -> PingResult:
        """Check if AnkiConnect is available.

        Never raises; an unreachable store yields ``connected=False``.
        """

    @abstractmethod
    async def ensure_deck(self, name: str) -> None:
        """Create the deck (and its parents) if it does not exist."""

    @abstractmethod
    async def ensure_note_model(self) -> None:
        """Create the flashcard note model, or refresh its styling."""

    @abstractmethod
    async def find_note_by_uid(self, uid: str) -> int | None:
        """Find the note carrying the identity tag for ``uid``.

        Returns:
            The first matching note id, or None
        """

    @abstractmethod
    async def add_note(self, card: Flashcard, vault_name: str) -> int:
        """Create a note for ``card``.

        Returns:
            The new note id
        """

    @abstractmethod
    async def get_note(self, note_id: int) -> NoteSnapshot:
        """Get the current fields and tags of a note."""

    @abstractmethod
    async def update_note_fields(self, note_id: int, fields: dict[str, str]) -> None:
        """Replace the note's field values."""

    @abstractmethod
    async def get_note_tags(self, note_id: int) -> list[str]:
        """Get the tags of a note."""

    @abstractmethod
    async def add_tags(self, note_id: int, tags: list[str]) -> None:
        """Add tags to a note."""

    @abstractmethod
    async def remove_tags(self, note_id: int, tags: list[str]) -> None:
        """Remove tags from a note."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release network resources."""
