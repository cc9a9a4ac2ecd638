"""Flashcard extraction from Obsidian notes.

Three note formats are recognised, tried in a fixed order; the first one
that yields at least one card wins and the others are not consulted:

1. Separator: front text, a ``---`` line, back text
2. Callout: ``> [!flashcard]`` blocks with ``Q:`` and ``A:`` markers
3. Heading: ``## Question`` followed by the answer up to the next heading
"""

import re
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ..error_codes import ErrorCode
from ..exceptions import DocumentNotFoundError, ParserError, format_error
from ..models import FileError, Flashcard, ParseBatch, RawCard
from ..rendering.obsidian_syntax import RenderContext, process_obsidian_syntax
from ..utils.identity import generate_uid
from ..utils.logging import get_logger
from ..utils.path_validator import vault_relative
from .decks import resolve_deck
from .frontmatter import normalize_tags, parse_frontmatter, split_frontmatter

if TYPE_CHECKING:
    from ..config import Config

logger = get_logger(__name__)

_SEPARATOR_PATTERN = re.compile(r"^---+$")
_FLASHCARD_CALLOUT_PATTERN = re.compile(r"^>\s*\[!flashcard\]", re.IGNORECASE)
_QUESTION_MARKER = re.compile(r"^Q:", re.IGNORECASE)
_ANSWER_MARKER = re.compile(r"^A:", re.IGNORECASE)
_QUESTION_HEADING_PATTERN = re.compile(r"^##\s+(.+)$")
_ANY_HEADING_PATTERN = re.compile(r"^#{1,6}\s")
_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")


class CardFormat(str, Enum):
    """Note format a card set was extracted with."""

    SEPARATOR = "separator"
    CALLOUT = "callout"
    HEADING = "heading"


def _is_separator(line: str) -> bool:
    return bool(_SEPARATOR_PATTERN.match(line.strip()))


def _is_blank(line: str) -> bool:
    return not line.strip()


def parse_separator_format(lines: list[str]) -> list[RawCard]:
    """Extract ``front / --- / back`` cards.

    Blank lines directly around the separator are allowed. The front is the
    run of non-blank lines before it; the back is the run after it.
    """
    cards: list[RawCard] = []
    floor = 0  # lines before this index already belong to a card
    i = 0

    while i < len(lines):
        if not _is_separator(lines[i]):
            i += 1
            continue

        front_end = i - 1
        while front_end >= floor and _is_blank(lines[front_end]):
            front_end -= 1
        front_start = front_end
        while (
            front_start > floor
            and not _is_blank(lines[front_start - 1])
            and not _is_separator(lines[front_start - 1])
        ):
            front_start -= 1

        back_start = i + 1
        while back_start < len(lines) and _is_blank(lines[back_start]):
            back_start += 1
        back_end = back_start
        while (
            back_end < len(lines)
            and not _is_blank(lines[back_end])
            and not _is_separator(lines[back_end])
        ):
            back_end += 1

        has_front = front_end >= floor and not _is_separator(lines[front_end])
        front = "\n".join(lines[front_start : front_end + 1]).strip() if has_front else ""
        back = "\n".join(lines[back_start:back_end]).strip()

        if front and back:
            cards.append(RawCard(front=front, back=back, line=front_start))
            floor = back_end
            i = back_end
        else:
            i += 1

    return cards


def parse_callout_format(lines: list[str]) -> list[RawCard]:
    """Extract ``> [!flashcard]`` cards with ``Q:``/``A:`` markers."""
    cards: list[RawCard] = []
    i = 0

    while i < len(lines):
        if not _FLASHCARD_CALLOUT_PATTERN.match(lines[i]):
            i += 1
            continue

        card_line = i
        front_lines: list[str] = []
        back_lines: list[str] = []
        active: list[str] | None = None
        i += 1

        while i < len(lines) and lines[i].startswith(">"):
            content = lines[i][1:].strip()
            if _QUESTION_MARKER.match(content):
                front_lines = [content[2:].strip()]
                active = front_lines
            elif _ANSWER_MARKER.match(content):
                back_lines = [content[2:].strip()]
                active = back_lines
            elif active is not None:
                active.append(content)
            i += 1

        front = "\n".join(front_lines).strip()
        back = "\n".join(back_lines).strip()
        if front and back:
            cards.append(RawCard(front=front, back=back, line=card_line))

    return cards


def parse_heading_format(lines: list[str]) -> list[RawCard]:
    """Extract ``## Question`` cards; the answer runs to the next heading.

    ``#`` lines inside fenced code blocks are answer content, not headings.
    """
    cards: list[RawCard] = []
    i = 0

    while i < len(lines):
        match = _QUESTION_HEADING_PATTERN.match(lines[i])
        if not match:
            i += 1
            continue

        front = match.group(1).strip()
        card_line = i
        back_lines: list[str] = []
        in_fence = False
        i += 1

        while i < len(lines):
            line = lines[i]
            if _FENCE_PATTERN.match(line):
                in_fence = not in_fence
            elif not in_fence and _ANY_HEADING_PATTERN.match(line):
                break
            back_lines.append(line)
            i += 1

        back = "\n".join(back_lines).strip()
        if front and back:
            cards.append(RawCard(front=front, back=back, line=card_line))

    return cards


_STRATEGIES: list[tuple[CardFormat, Callable[[list[str]], list[RawCard]]]] = [
    (CardFormat.SEPARATOR, parse_separator_format),
    (CardFormat.CALLOUT, parse_callout_format),
    (CardFormat.HEADING, parse_heading_format),
]


def extract_raw_cards(body: str) -> tuple[CardFormat | None, list[RawCard]]:
    """Run the strategies in order and return the first non-empty result."""
    lines = [line.rstrip("\r") for line in body.split("\n")]
    for card_format, strategy in _STRATEGIES:
        cards = strategy(lines)
        if cards:
            return card_format, cards
    return None, []


def parse_document(text: str, relative_path: str, config: "Config") -> list[Flashcard]:
    """
    Extract rendered flashcards from note content.

    Args:
        text: Full note content, frontmatter included
        relative_path: Vault-relative POSIX path of the note
        config: Bridge configuration

    Returns:
        Flashcards in document order

    Raises:
        ParserError: If the note yields more than ``max_cards_per_note`` cards
    """
    split = split_frontmatter(text)
    frontmatter = parse_frontmatter(text, relative_path)
    deck = resolve_deck(frontmatter, config.deck_prefix)
    tags = normalize_tags(frontmatter.tags)

    card_format, raw_cards = extract_raw_cards(split.body)

    if len(raw_cards) > config.max_cards_per_note:
        raise ParserError(
            f"Too many flashcards in {relative_path}: {len(raw_cards)}",
            suggestion=f"Split the note; at most {config.max_cards_per_note} cards are allowed per note",
            error_code=ErrorCode.PAR_TOO_MANY_CARDS.value,
            context={"file": relative_path, "count": len(raw_cards)},
        )

    context = RenderContext(vault_name=config.vault_name, vault_path=config.vault_root)
    cards = [
        Flashcard(
            uid=generate_uid(raw.front, raw.back, relative_path),
            front=process_obsidian_syntax(raw.front, context),
            back=process_obsidian_syntax(raw.back, context),
            deck=deck,
            tags=list(tags),
            source_file=relative_path,
            source_line=split.line_offset + raw.line + 1,
        )
        for raw in raw_cards
    ]

    logger.debug(
        "parsed_document",
        file=relative_path,
        format=card_format.value if card_format else None,
        cards=len(cards),
        deck=deck,
    )
    return cards


def read_document(path: Path) -> str:
    """Read a note as UTF-8 text, raising ParserError on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParserError(
            f"Failed to read file {path}: {e}",
            error_code=ErrorCode.PAR_READ_FAILED.value,
            context={"file": str(path)},
        ) from e


def parse_flashcard_file(path: Path, config: "Config") -> list[Flashcard]:
    """
    Parse a note file inside the vault.

    Args:
        path: Absolute path of the note (must be inside the vault)
        config: Bridge configuration

    Raises:
        DocumentNotFoundError: If the file does not exist
        ParserError: If the file cannot be read or has too many cards
    """
    if not path.is_file():
        raise DocumentNotFoundError(
            f"File not found: {path}",
            error_code=ErrorCode.PTH_NOT_FOUND.value,
            context={"file": str(path)},
        )
    relative_path = vault_relative(config.vault_root, path)
    return parse_document(read_document(path), relative_path, config)


def parse_documents(paths: Iterable[Path], config: "Config") -> ParseBatch:
    """Parse several notes; a failing note is recorded and skipped."""
    batch = ParseBatch()
    for path in paths:
        try:
            batch.cards.extend(parse_flashcard_file(path, config))
        except (DocumentNotFoundError, ParserError) as e:
            try:
                file_label = vault_relative(config.vault_root, path)
            except ValueError:
                file_label = str(path)
            logger.warning(
                "document_parse_failed", file=file_label, error=format_error(e)
            )
            batch.file_errors.append(FileError(file=file_label, error=format_error(e)))
    return batch
