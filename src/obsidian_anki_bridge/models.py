"""Data models for the bridge."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RawCard:
    """Front/back text produced by an extraction strategy, before rendering."""

    front: str
    back: str
    line: int  # 0-based index into the document body


@dataclass
class Flashcard:
    """A flashcard extracted from an Obsidian note, ready for Anki."""

    uid: str
    front: str
    back: str
    deck: str
    source_file: str
    source_line: int  # 1-based line in the full document
    tags: list[str] = field(default_factory=list)
    note_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "front": self.front,
            "back": self.back,
            "deck": self.deck,
            "tags": list(self.tags),
            "source_file": self.source_file,
            "source_line": self.source_line,
            "note_id": self.note_id,
        }


@dataclass
class FileError:
    """A document that could not be parsed in a batch."""

    file: str
    error: str


@dataclass
class ParseBatch:
    """Cards and per-file failures from parsing several documents."""

    cards: list[Flashcard] = field(default_factory=list)
    file_errors: list[FileError] = field(default_factory=list)


@dataclass
class CardError:
    """A card that failed to reconcile; the rest of the batch continued."""

    uid: str
    error: str
    source_file: str

    def to_dict(self) -> dict[str, str]:
        return {"uid": self.uid, "error": self.error, "source_file": self.source_file}


@dataclass
class SyncResult:
    """Outcome of one reconciliation run."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    errors: list[CardError] = field(default_factory=list)
    note_ids: dict[str, int] = field(default_factory=dict)
    file_to_uids: dict[str, list[str]] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.unchanged + len(self.errors)


@dataclass
class SyncState:
    """The ``anki_sync`` block stored in a document's frontmatter."""

    note_ids: dict[str, int] = field(default_factory=dict)
    last_synced: str = ""
    card_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "note_ids": dict(self.note_ids),
            "last_synced": self.last_synced,
            "card_count": self.card_count,
        }


@dataclass
class PingResult:
    """Result of an AnkiConnect connectivity check."""

    connected: bool
    version: int | None = None


@dataclass
class NoteSnapshot:
    """Current fields and tags of an Anki note."""

    fields: dict[str, str]
    tags: list[str] = field(default_factory=list)
