"""Use case for previewing a sync without touching Anki."""

from dataclasses import dataclass
from typing import Any

from ...config import Config
from ...error_codes import ErrorCode
from ...exceptions import ConfigurationError, InputValidationError, PathSecurityError
from ...models import ParseBatch
from ...obsidian.vault_reader import VaultReader
from ..schemas import PreviewSyncRequest
from ..services.card_collector import CardCollector, deck_summary, truncate
from .base import (
    configuration_error_response,
    error_response,
    invalid_input_response,
    validate_request,
)

SAMPLE_SIZE = 5
SAMPLE_FRONT_LENGTH = 80


def collect_or_error(
    config: Config, reader: VaultReader | None, files: list[str] | None
) -> ParseBatch | dict[str, Any]:
    """Collect cards, or return the error response that ends the request."""
    try:
        batch = CardCollector(config, reader).collect(files)
    except PathSecurityError as e:
        return error_response(
            "Security error",
            f"File path must be within vault: {e.context.get('path', '')}",
            error_code=e.error_code,
        )
    except ConfigurationError as e:
        return configuration_error_response(e)

    if len(batch.cards) > config.batch_size_limit:
        return error_response(
            "Too many cards",
            f"Found {len(batch.cards)} cards, max is {config.batch_size_limit}",
            error_code=ErrorCode.VAL_TOO_MANY_CARDS.value,
        )
    return batch


@dataclass
class PreviewSyncUseCase:
    """Parse the requested notes and summarize what would be synced."""

    config: Config
    reader: VaultReader | None = None

    async def execute(
        self, args: PreviewSyncRequest | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            request = validate_request(PreviewSyncRequest, args)
        except InputValidationError as e:
            return invalid_input_response(e)

        collected = collect_or_error(self.config, self.reader, request.files)
        if isinstance(collected, dict):
            return collected

        cards = collected.cards
        return {
            "success": True,
            "dry_run": True,
            "total_cards": len(cards),
            "deck_summary": deck_summary(cards),
            "sample_cards": [
                {
                    "uid": card.uid,
                    "front": truncate(card.front, SAMPLE_FRONT_LENGTH),
                    "deck": card.deck,
                    "source_file": card.source_file,
                }
                for card in cards[:SAMPLE_SIZE]
            ],
            "file_errors": [
                {"file": fe.file, "error": fe.error} for fe in collected.file_errors
            ],
        }
