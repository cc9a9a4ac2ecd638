"""Use case for synchronizing flashcards into Anki."""

from dataclasses import dataclass
from typing import Any

from ...anki.client import AnkiClient
from ...config import Config
from ...domain.interfaces.anki_client import IAnkiClient
from ...exceptions import (
    AnkiUnreachableError,
    BridgeError,
    InputValidationError,
    format_error,
)
from ...models import SyncResult
from ...obsidian.sync_state import record_sync
from ...obsidian.vault_reader import VaultReader
from ...sync.engine import SyncEngine
from ...utils.logging import get_logger
from ..schemas import ApplySyncRequest
from ..services.card_collector import deck_summary
from .base import error_response, invalid_input_response, validate_request
from .preview_sync import PreviewSyncUseCase, collect_or_error

logger = get_logger(__name__)


@dataclass
class ApplySyncUseCase:
    """Parse notes, reconcile them with Anki and record note ids.

    1. Validate the request (``dry_run`` delegates to the preview)
    2. Collect cards from the requested notes
    3. Reconcile through the sync engine
    4. Write each note's new note ids back into its frontmatter
    """

    config: Config
    anki_client: IAnkiClient | None = None
    reader: VaultReader | None = None

    async def execute(
        self, args: ApplySyncRequest | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            request = validate_request(ApplySyncRequest, args)
        except InputValidationError as e:
            return invalid_input_response(e)

        if request.dry_run:
            return await PreviewSyncUseCase(self.config, self.reader).execute(
                {"files": request.files}
            )

        reader = self.reader or VaultReader.from_config(self.config)
        collected = collect_or_error(self.config, reader, request.files)
        if isinstance(collected, dict):
            return collected

        owns_client = self.anki_client is None
        anki = self.anki_client or AnkiClient.from_config(self.config)
        engine = SyncEngine(
            anki,
            vault_name=self.config.vault_name,
            max_field_size_bytes=self.config.max_field_size_bytes,
        )
        try:
            result = await engine.sync(collected.cards)
        except AnkiUnreachableError:
            return error_response(
                "Anki not connected",
                "Cannot connect to AnkiConnect. Make sure Anki is running with AnkiConnect installed.",
            )
        except BridgeError as e:
            logger.error("sync_failed", error=format_error(e))
            return error_response("Sync failed", e.message, error_code=e.error_code)
        finally:
            if owns_client:
                await anki.aclose()

        write_back_errors = self._write_back(result, reader) if self.config.write_back else []

        return {
            "success": True,
            "created": result.created,
            "updated": result.updated,
            "unchanged": result.unchanged,
            "errors": [error.to_dict() for error in result.errors],
            "note_ids": result.note_ids,
            "file_to_uids": result.file_to_uids,
            "duration_ms": result.duration_ms,
            "deck_summary": deck_summary(collected.cards),
            "file_errors": [
                {"file": fe.file, "error": fe.error} for fe in collected.file_errors
            ],
            "write_back_errors": write_back_errors,
        }

    def _write_back(self, result: SyncResult, reader: VaultReader) -> list[dict[str, str]]:
        """Record each note's ids; a failing note does not stop the others."""
        failures: list[dict[str, str]] = []
        for source_file, uids in result.file_to_uids.items():
            note_ids = {uid: result.note_ids[uid] for uid in uids if uid in result.note_ids}
            if not note_ids:
                continue
            path = self.config.vault_root / source_file
            try:
                record_sync(path, note_ids, reader)
            except BridgeError as e:
                logger.warning(
                    "sync_write_back_failed", file=source_file, error=format_error(e)
                )
                failures.append({"file": source_file, "error": format_error(e)})
        return failures
