"""AnkiConnect client and note model."""

from .client import AnkiClient
from .note_model import MODEL_NAME, build_note_fields, desired_tags, uid_tag

__all__ = [
    "MODEL_NAME",
    "AnkiClient",
    "build_note_fields",
    "desired_tags",
    "uid_tag",
]
