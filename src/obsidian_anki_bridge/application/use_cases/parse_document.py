"""Use case for parsing a single flashcard note."""

from dataclasses import dataclass
from typing import Any

from ...config import Config
from ...exceptions import (
    DocumentNotFoundError,
    InputValidationError,
    ParserError,
    PathSecurityError,
)
from ...obsidian.parser import parse_flashcard_file
from ...obsidian.vault_reader import VaultReader
from ...utils.logging import get_logger
from ..schemas import ParseDocumentRequest
from ..services.card_collector import truncate
from .base import error_response, invalid_input_response, validate_request

logger = get_logger(__name__)

PREVIEW_LENGTH = 100


@dataclass
class ParseDocumentUseCase:
    """Parse one note and return its cards with truncated previews."""

    config: Config
    reader: VaultReader | None = None

    async def execute(
        self, args: ParseDocumentRequest | dict[str, Any] | None
    ) -> dict[str, Any]:
        try:
            request = validate_request(ParseDocumentRequest, args)
        except InputValidationError as e:
            return invalid_input_response(e)

        reader = self.reader or VaultReader.from_config(self.config)

        try:
            path = reader.resolve_note(request.file_path)
        except PathSecurityError as e:
            return error_response(
                "Security error",
                "File path must be within the configured vault",
                path=request.file_path,
                error_code=e.error_code,
            )
        except DocumentNotFoundError:
            return error_response("File not found", path=request.file_path)

        try:
            cards = parse_flashcard_file(path, self.config)
        except ParserError as e:
            logger.warning("document_parse_failed", file=request.file_path, error=e.message)
            return error_response("Parse error", e.message, error_code=e.error_code)

        return {
            "success": True,
            "file": request.file_path,
            "card_count": len(cards),
            "cards": [
                {
                    "uid": card.uid,
                    "front": truncate(card.front, PREVIEW_LENGTH),
                    "back": truncate(card.back, PREVIEW_LENGTH),
                    "deck": card.deck,
                    "tags": card.tags,
                    "source_line": card.source_line,
                }
                for card in cards
            ],
        }
