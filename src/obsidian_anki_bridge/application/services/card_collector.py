"""Collect flashcards from the vault for the use cases."""

from collections import Counter
from collections.abc import Iterable

from ...config import Config
from ...models import Flashcard, ParseBatch
from ...obsidian.parser import parse_documents
from ...obsidian.vault_reader import VaultReader
from ...utils.logging import get_logger
from ...utils.path_validator import validate_note_path

logger = get_logger(__name__)


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def deck_summary(cards: Iterable[Flashcard]) -> dict[str, int]:
    """Card count per deck, in first-seen order."""
    return dict(Counter(card.deck for card in cards))


class CardCollector:
    """Parse either an explicit list of notes or the whole flashcards folder."""

    def __init__(self, config: Config, reader: VaultReader | None = None):
        self.config = config
        self.reader = reader or VaultReader.from_config(config)

    def collect(self, files: list[str] | None = None) -> ParseBatch:
        """
        Parse the requested notes.

        Every path is checked before any note is read. Missing or unparsable
        notes become ``file_errors``; the rest are parsed.

        Raises:
            PathSecurityError: If any requested path escapes the vault
        """
        if files:
            paths = [validate_note_path(self.config.vault_root, f) for f in files]
        else:
            paths = self.reader.list_documents()

        batch = parse_documents(paths, self.config)
        logger.debug(
            "cards_collected",
            files=len(paths),
            cards=len(batch.cards),
            file_errors=len(batch.file_errors),
        )
        return batch
