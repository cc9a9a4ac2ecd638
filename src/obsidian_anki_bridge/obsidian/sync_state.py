"""Record Anki sync state in a note's frontmatter.

Only the frontmatter block is rewritten; the body after the closing
delimiter is written back byte-for-byte.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError as RuamelYAMLError

from ..models import SyncState
from ..utils.logging import get_logger
from .frontmatter import FRONTMATTER_DELIMITER, load_yaml_mapping, split_frontmatter

if TYPE_CHECKING:
    from .vault_reader import VaultReader

logger = get_logger(__name__)

SYNC_STATE_KEY = "anki_sync"
UPDATED_KEY = "updated"


def _round_trip_yaml() -> YAML:
    ruamel_yaml = YAML()
    ruamel_yaml.preserve_quotes = True
    ruamel_yaml.default_flow_style = False
    ruamel_yaml.width = 4096  # Prevent line wrapping
    ruamel_yaml.indent(mapping=2, sequence=4, offset=2)
    return ruamel_yaml


def _coerce_note_ids(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        return {}
    note_ids: dict[str, int] = {}
    for uid, note_id in raw.items():
        if isinstance(note_id, bool):
            continue
        if isinstance(note_id, int):
            note_ids[str(uid)] = note_id
        elif isinstance(note_id, str) and note_id.strip().isdigit():
            note_ids[str(uid)] = int(note_id)
    return note_ids


def read_sync_state(text: str) -> SyncState | None:
    """Read the ``anki_sync`` block, or None when the note was never synced."""
    split = split_frontmatter(text)
    if not split.has_block:
        return None

    try:
        data = load_yaml_mapping(split.yaml_text)
    except yaml.YAMLError:
        return None

    raw = (data or {}).get(SYNC_STATE_KEY)
    if not isinstance(raw, dict):
        return None

    last_synced = raw.get("last_synced") or ""
    if isinstance(last_synced, datetime):
        # Unquoted timestamps load as datetimes; naive ones are UTC
        if last_synced.tzinfo is None:
            last_synced = last_synced.replace(tzinfo=timezone.utc)
        last_synced = utc_timestamp(last_synced)
    card_count = raw.get("card_count")
    return SyncState(
        note_ids=_coerce_note_ids(raw.get("note_ids")),
        last_synced=str(last_synced),
        card_count=card_count if isinstance(card_count, int) else 0,
    )


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def merge_sync_state(
    existing: SyncState | None,
    new_note_ids: dict[str, int],
    now: datetime | None = None,
) -> SyncState:
    """Merge this run's note ids into the stored state.

    New entries overwrite entries with the same uid; entries for uids not in
    this run are kept.
    """
    merged = dict(existing.note_ids) if existing else {}
    merged.update(new_note_ids)
    return SyncState(
        note_ids=merged,
        last_synced=utc_timestamp(now),
        card_count=len(merged),
    )


def _load_plain_block(
    yaml_text: str, file_label: str, ruamel_error: str
) -> CommentedMap:
    try:
        data = load_yaml_mapping(yaml_text)
    except yaml.YAMLError as e:
        logger.warning("frontmatter_replaced", file=file_label, error=str(e))
        return CommentedMap()
    if data is None:
        logger.warning("frontmatter_replaced", file=file_label, reason="not_mapping")
        return CommentedMap()
    logger.warning("frontmatter_reformatted", file=file_label, error=ruamel_error)
    return CommentedMap(data)


def _load_block(yaml_text: str, file_label: str) -> CommentedMap:
    if not yaml_text.strip():
        return CommentedMap()
    try:
        data = _round_trip_yaml().load(StringIO(yaml_text))
    except RuamelYAMLError as e:
        # ruamel rejects what PyYAML tolerates (duplicate keys); keep the
        # mapping the parser saw, losing only comments and formatting
        return _load_plain_block(yaml_text, file_label, str(e))
    if data is None:
        return CommentedMap()
    if not isinstance(data, CommentedMap):
        logger.warning("frontmatter_replaced", file=file_label, reason="not_mapping")
        return CommentedMap()
    return data


def render_with_sync_state(
    text: str,
    state: SyncState,
    today: date | None = None,
    file_label: str = "",
) -> str:
    """
    Return ``text`` with ``anki_sync`` set and ``updated`` refreshed.

    Existing keys keep their order and comments. A missing block is created;
    a malformed one is replaced.

    Args:
        text: Full note content
        state: Sync state to store
        today: Value for the ``updated`` field (defaults to today's UTC date)
        file_label: Note path for log context
    """
    split = split_frontmatter(text)
    data = _load_block(split.yaml_text, file_label) if split.has_block else CommentedMap()

    sync_block = CommentedMap()
    sync_block["note_ids"] = dict(state.note_ids)
    sync_block["last_synced"] = state.last_synced
    sync_block["card_count"] = state.card_count
    data[SYNC_STATE_KEY] = sync_block
    data[UPDATED_KEY] = today or datetime.now(timezone.utc).date()

    output = StringIO()
    _round_trip_yaml().dump(data, output)
    new_block = output.getvalue()
    if not new_block.endswith("\n"):
        new_block += "\n"

    return f"{FRONTMATTER_DELIMITER}\n{new_block}{FRONTMATTER_DELIMITER}\n{split.body}"


def record_sync(
    path: Path,
    new_note_ids: dict[str, int],
    reader: "VaultReader",
    now: datetime | None = None,
) -> SyncState:
    """Merge ``new_note_ids`` into the note's sync state and write it back.

    The note is read once and written once.
    """
    text = reader.read_document(path)
    state = merge_sync_state(read_sync_state(text), new_note_ids, now=now)
    today = (now or datetime.now(timezone.utc)).date()
    reader.write_document(path, render_with_sync_state(text, state, today, str(path)))
    logger.debug(
        "sync_state_recorded",
        file=str(path),
        new_ids=len(new_note_ids),
        card_count=state.card_count,
    )
    return state
