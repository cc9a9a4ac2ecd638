"""Reconciliation engine: bring Anki in line with the extracted flashcards."""

import time
from enum import Enum

from ..anki.note_model import build_note_fields, desired_tags, is_uid_tag
from ..domain.interfaces.anki_client import IAnkiClient
from ..error_codes import ErrorCode
from ..exceptions import AnkiError, AnkiUnreachableError, SyncError, format_error
from ..models import CardError, Flashcard, SyncResult
from ..utils.logging import get_logger
from .serial_queue import SerialTaskQueue

logger = get_logger(__name__)


class CardAction(str, Enum):
    """How a single card was reconciled."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class SyncEngine:
    """Orchestrate reconciliation of flashcards against Anki.

    Cards are matched to notes by uid only. Scheduling state is never
    touched: existing notes are updated in place, never recreated.
    """

    def __init__(
        self,
        anki_client: IAnkiClient,
        vault_name: str,
        max_field_size_bytes: int = 10_240,
    ):
        """
        Initialize sync engine.

        Args:
            anki_client: Remote store
            vault_name: Vault name used in source links
            max_field_size_bytes: Largest accepted rendered field, in UTF-8 bytes
        """
        self.anki = anki_client
        self.vault_name = vault_name
        self.max_field_size_bytes = max_field_size_bytes

    def _check_field_sizes(self, card: Flashcard, fields: dict[str, str]) -> None:
        for name, value in fields.items():
            size = len(value.encode("utf-8"))
            if size > self.max_field_size_bytes:
                raise AnkiError(
                    f"{name} field is {size} bytes (limit {self.max_field_size_bytes})",
                    suggestion="Shorten the card or split it into several cards",
                    error_code=ErrorCode.ANK_FIELD_TOO_LARGE.value,
                    context={"uid": card.uid, "field": name, "size": size},
                )

    async def _sync_card(self, card: Flashcard) -> tuple[CardAction, int]:
        fields = build_note_fields(card, self.vault_name)
        self._check_field_sizes(card, fields)

        note_id = await self.anki.find_note_by_uid(card.uid)
        if note_id is None:
            note_id = await self.anki.add_note(card, self.vault_name)
            return CardAction.CREATED, note_id

        snapshot = await self.anki.get_note(note_id)
        current_tags = await self.anki.get_note_tags(note_id)
        wanted_tags = desired_tags(card)
        fields_changed = any(snapshot.fields.get(k) != v for k, v in fields.items())
        stale_tags = [
            t for t in current_tags if t not in wanted_tags and not is_uid_tag(t)
        ]
        missing_tags = [t for t in wanted_tags if t not in current_tags]

        if not fields_changed and not stale_tags and not missing_tags:
            return CardAction.UNCHANGED, note_id

        if fields_changed:
            await self.anki.update_note_fields(note_id, fields)
        if stale_tags:
            await self.anki.remove_tags(note_id, stale_tags)
        if missing_tags:
            await self.anki.add_tags(note_id, missing_tags)
        return CardAction.UPDATED, note_id

    async def _prepare(self, cards: list[Flashcard]) -> None:
        decks = list(dict.fromkeys(card.deck for card in cards))
        try:
            await self.anki.ensure_note_model()
            for deck in decks:
                await self.anki.ensure_deck(deck)
        except AnkiError as e:
            raise SyncError(
                f"Failed to prepare Anki: {e.message}",
                suggestion=e.suggestion,
                error_code=ErrorCode.SYN_SETUP_FAILED.value,
                context=e.context,
            ) from e

    async def sync(self, cards: list[Flashcard]) -> SyncResult:
        """
        Reconcile ``cards`` against Anki, one card at a time.

        Args:
            cards: Flashcards in the order they should be processed

        Returns:
            Counts, per-card errors and the uid to note id mapping

        Raises:
            AnkiUnreachableError: If AnkiConnect does not answer (nothing is changed)
            SyncError: If the note model or a deck cannot be set up
        """
        started = time.monotonic()

        ping = await self.anki.ping()
        if not ping.connected:
            raise AnkiUnreachableError(
                "AnkiConnect is not reachable",
                suggestion="Start Anki and make sure the AnkiConnect add-on is installed",
                error_code=ErrorCode.ANK_UNREACHABLE.value,
            )

        result = SyncResult()
        if not cards:
            return result

        decks = {card.deck for card in cards}
        logger.info("sync_started", cards=len(cards), decks=len(decks))

        await self._prepare(cards)

        queue: SerialTaskQueue[tuple[CardAction, int]] = SerialTaskQueue()
        for index, card in enumerate(cards):
            queue.submit(index, lambda card=card: self._sync_card(card))

        for outcome in await queue.drain():
            card = cards[outcome.key]  # type: ignore[index]
            if outcome.error is not None or outcome.value is None:
                error = format_error(outcome.error) if outcome.error else "No result"
                logger.warning(
                    "card_sync_failed",
                    uid=card.uid,
                    file=card.source_file,
                    error=error,
                    error_code=ErrorCode.ANK_CARD_FAILED.value,
                )
                result.errors.append(
                    CardError(uid=card.uid, error=error, source_file=card.source_file)
                )
                continue

            action, note_id = outcome.value
            if action is CardAction.CREATED:
                result.created += 1
            elif action is CardAction.UPDATED:
                result.updated += 1
            else:
                result.unchanged += 1
            card.note_id = note_id
            result.note_ids[card.uid] = note_id
            file_uids = result.file_to_uids.setdefault(card.source_file, [])
            if card.uid not in file_uids:
                file_uids.append(card.uid)

        result.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "sync_completed",
            created=result.created,
            updated=result.updated,
            unchanged=result.unchanged,
            errors=len(result.errors),
            duration_ms=result.duration_ms,
        )
        return result
