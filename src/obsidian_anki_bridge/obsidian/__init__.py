"""Obsidian note parsing, deck resolution and sync-state write-back."""

from .decks import SUBJECT_TO_DECK, resolve_deck, subject_deck_name
from .frontmatter import (
    FlashcardFrontmatter,
    FrontmatterSplit,
    normalize_tags,
    parse_frontmatter,
    split_frontmatter,
)
from .parser import (
    CardFormat,
    extract_raw_cards,
    parse_callout_format,
    parse_document,
    parse_documents,
    parse_flashcard_file,
    parse_heading_format,
    parse_separator_format,
)
from .sync_state import (
    merge_sync_state,
    read_sync_state,
    record_sync,
    render_with_sync_state,
)
from .vault_reader import VaultReader

__all__ = [
    "SUBJECT_TO_DECK",
    "CardFormat",
    "FlashcardFrontmatter",
    "FrontmatterSplit",
    "VaultReader",
    "extract_raw_cards",
    "merge_sync_state",
    "normalize_tags",
    "parse_callout_format",
    "parse_document",
    "parse_documents",
    "parse_flashcard_file",
    "parse_frontmatter",
    "parse_heading_format",
    "parse_separator_format",
    "read_sync_state",
    "record_sync",
    "render_with_sync_state",
    "resolve_deck",
    "split_frontmatter",
    "subject_deck_name",
]
