"""Use case for checking AnkiConnect and vault health."""

from dataclasses import dataclass
from typing import Any

from ...anki.client import AnkiClient
from ...config import Config
from ...domain.interfaces.anki_client import IAnkiClient
from ...exceptions import (
    BridgeError,
    ConfigurationError,
    InputValidationError,
    format_error,
)
from ...models import Flashcard
from ...obsidian.parser import parse_document
from ...obsidian.sync_state import read_sync_state
from ...obsidian.vault_reader import VaultReader
from ...utils.logging import get_logger
from ..schemas import HealthCheckRequest
from ..services.card_collector import deck_summary
from .base import invalid_input_response, validate_request

logger = get_logger(__name__)


@dataclass
class HealthCheckUseCase:
    """Report whether a sync could run right now.

    ``success`` is true only when no issue was found.
    """

    config: Config
    anki_client: IAnkiClient | None = None
    reader: VaultReader | None = None

    async def execute(
        self, args: HealthCheckRequest | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            request = validate_request(HealthCheckRequest, args)
        except InputValidationError as e:
            return invalid_input_response(e)

        reader = self.reader or VaultReader.from_config(self.config)
        issues: list[str] = []

        vault_accessible = self.config.vault_root.is_dir()
        if not vault_accessible:
            issues.append(f"Vault path not accessible: {self.config.vault_root}")

        folder_exists = False
        if vault_accessible:
            try:
                folder_exists = reader.flashcards_dir.is_dir()
            except ConfigurationError as e:
                issues.append(f"Flashcards folder not usable: {format_error(e)}")
            else:
                if not folder_exists:
                    issues.append(
                        f"Flashcards folder not found: {self.config.flashcards_folder}"
                    )

        files = reader.list_documents() if folder_exists else []
        cards: list[Flashcard] = []
        last_sync: str | None = None
        for path in files:
            try:
                text = reader.read_document(path)
                cards.extend(parse_document(text, reader.relative_path(path), self.config))
            except BridgeError as e:
                issues.append(f"Error reading {reader.relative_path(path)}: {format_error(e)}")
                continue
            state = read_sync_state(text)
            if state and state.last_synced and (last_sync is None or state.last_synced > last_sync):
                last_sync = state.last_synced

        owns_client = self.anki_client is None
        anki = self.anki_client or AnkiClient.from_config(self.config)
        try:
            ping = await anki.ping()
        finally:
            if owns_client:
                await anki.aclose()
        if not ping.connected:
            issues.append(
                "AnkiConnect not accessible - ensure Anki is running with AnkiConnect add-on"
            )

        result: dict[str, Any] = {
            "success": not issues,
            "anki_connected": ping.connected,
            "anki_version": ping.version,
            "vault_accessible": vault_accessible,
            "flashcards_folder_exists": folder_exists,
            "flashcard_count": len(cards),
            "last_sync": last_sync,
            "issues": issues,
        }

        if request.verbose:
            result["flashcard_file_count"] = len(files)
            result["deck_summary"] = deck_summary(cards)
            result["config"] = {
                "vault_path": str(self.config.vault_root),
                "flashcards_folder": self.config.flashcards_folder,
                "deck_prefix": self.config.deck_prefix,
                "anki_connect_url": self.config.anki_connect_url,
            }

        logger.debug("health_checked", issues=len(issues))
        return result
