"""YAML frontmatter parsing for flashcard notes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..utils.logging import get_logger

logger = get_logger(__name__)

FRONTMATTER_DELIMITER = "---"

BOM = "\ufeff"

_TAG_SPLIT_PATTERN = re.compile(r"[,\s]+")
_INNER_WHITESPACE = re.compile(r"\s+")

_yaml_handler = YAMLHandler()


@dataclass
class FrontmatterSplit:
    """A document split into its metadata block and body."""

    yaml_text: str
    body: str
    line_offset: int  # lines consumed by the block, both delimiters included
    has_block: bool


class FlashcardFrontmatter(BaseModel):
    """Frontmatter fields that influence flashcard extraction."""

    model_config = ConfigDict(extra="allow")

    anki_deck: str | None = None
    scope: str | None = None
    subject: str | None = None
    tags: str | list[str] | None = None
    created: date | datetime | str | None = None
    updated: date | datetime | str | None = None
    anki_sync: dict[str, Any] | None = None

    @field_validator("anki_deck", "scope", "subject", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _stringify_tag_items(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [str(item) for item in v if item is not None]
        return v


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIMITER


def split_frontmatter(text: str) -> FrontmatterSplit:
    """Split a document into frontmatter YAML and body.

    A block exists only when the first line is ``---`` and a later line is
    ``---``. The body is the exact text after the closing delimiter line.
    A leading byte order mark is not part of either.
    """
    text = text.removeprefix(BOM)
    lines = text.split("\n")
    if not _is_delimiter(lines[0]):
        return FrontmatterSplit(yaml_text="", body=text, line_offset=0, has_block=False)

    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            return FrontmatterSplit(
                yaml_text="\n".join(lines[1:index]),
                body="\n".join(lines[index + 1 :]),
                line_offset=index + 1,
                has_block=True,
            )

    return FrontmatterSplit(yaml_text="", body=text, line_offset=0, has_block=False)


def load_yaml_mapping(yaml_text: str) -> dict[str, Any] | None:
    """Load a frontmatter block, returning None unless it is a mapping."""
    data = _yaml_handler.load(yaml_text) if yaml_text.strip() else {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return {str(key): value for key, value in data.items()}


def parse_frontmatter(text: str, file_path: Path | str) -> FlashcardFrontmatter:
    """
    Extract and validate frontmatter from note content.

    Never raises: malformed YAML, a non-mapping block or a schema violation
    yields an empty ``FlashcardFrontmatter`` and a warning.

    Args:
        text: Full note content
        file_path: Path to the file (for context)

    Returns:
        Parsed frontmatter
    """
    split = split_frontmatter(text)
    if not split.has_block:
        return FlashcardFrontmatter()

    try:
        data = load_yaml_mapping(split.yaml_text)
    except yaml.YAMLError as e:
        logger.warning(
            "frontmatter_invalid", file=str(file_path), reason="yaml", error=str(e)
        )
        return FlashcardFrontmatter()

    if data is None:
        logger.warning("frontmatter_invalid", file=str(file_path), reason="not_mapping")
        return FlashcardFrontmatter()

    try:
        return FlashcardFrontmatter.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "frontmatter_invalid",
            file=str(file_path),
            reason="schema",
            error_count=e.error_count(),
        )
        return FlashcardFrontmatter()


def normalize_tags(value: str | list[str] | None) -> list[str]:
    """Normalize a frontmatter ``tags`` value into Anki tags.

    A string is split on commas and whitespace. Inside list items, spaces
    become underscores because Anki tags cannot contain whitespace.
    """
    if not value:
        return []

    if isinstance(value, str):
        candidates = _TAG_SPLIT_PATTERN.split(value)
    else:
        candidates = [_INNER_WHITESPACE.sub("_", str(item).strip()) for item in value]

    tags: list[str] = []
    for tag in candidates:
        if tag and tag not in tags:
            tags.append(tag)
    return tags
