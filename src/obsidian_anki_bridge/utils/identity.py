"""Deterministic flashcard identity utilities.

A card's uid is a pure function of its raw (unrendered) front and back text
and the vault-relative path of the document it came from. Cosmetic
whitespace differences do not change the uid; any other content or path
change does.
"""

from __future__ import annotations

import hashlib
import re

UID_LENGTH = 16
UID_PATTERN = re.compile(r"^[a-f0-9]{16}$")

# ASCII unit separator; cannot appear in normal note text
_FIELD_SEPARATOR = "\x1f"

_LINE_TRAILING_WS = re.compile(r"[ \t]+$", re.MULTILINE)
_HORIZONTAL_WS = re.compile(r"[ \t]+")
_NEWLINE_RUNS = re.compile(r"\n+")


def normalize_content(text: str) -> str:
    """Normalize card text for hashing.

    Trims the text, unifies line endings, drops trailing spaces on each line,
    and collapses runs of spaces/tabs and runs of blank lines.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _LINE_TRAILING_WS.sub("", text)
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _NEWLINE_RUNS.sub("\n", text)
    return text.strip()


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path for hashing."""
    return path.replace("\\", "/").strip().lower()


def generate_uid(front: str, back: str, source_file: str) -> str:
    """Generate a stable uid for a card.

    Args:
        front: Raw front text
        back: Raw back text
        source_file: Vault-relative path of the source document

    Returns:
        First 16 lowercase hex characters of a SHA-256 digest
    """
    joined = _FIELD_SEPARATOR.join(
        [normalize_path(source_file), normalize_content(front), normalize_content(back)]
    )
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:UID_LENGTH]


def generate_content_hash(text: str) -> str:
    """Full SHA-256 hex digest of normalized text."""
    return hashlib.sha256(normalize_content(text).encode("utf-8")).hexdigest()


def is_valid_uid(value: object) -> bool:
    return isinstance(value, str) and bool(UID_PATTERN.match(value))
