"""Use case for listing flashcards in the vault."""

from dataclasses import dataclass
from typing import Any

from ...config import Config
from ...exceptions import ConfigurationError, InputValidationError
from ...models import Flashcard
from ...obsidian.decks import subject_deck_name
from ...obsidian.vault_reader import VaultReader
from ..schemas import ListCardsRequest
from ..services.card_collector import CardCollector, deck_summary, truncate
from .base import configuration_error_response, invalid_input_response, validate_request

PREVIEW_LENGTH = 100


def filter_cards(
    cards: list[Flashcard], deck: str | None = None, subject: str | None = None
) -> list[Flashcard]:
    """Apply the deck substring and subject filters (both case-insensitive)."""
    if deck:
        deck_lower = deck.lower()
        cards = [c for c in cards if deck_lower in c.deck.lower()]

    if subject:
        subject_lower = subject.lower()
        deck_name = subject_deck_name(subject).lower()
        cards = [
            c
            for c in cards
            if deck_name in c.deck.lower()
            or any(subject_lower in tag.lower() for tag in c.tags)
        ]

    return cards


@dataclass
class ListCardsUseCase:
    """List every card in the flashcards folder, optionally filtered."""

    config: Config
    reader: VaultReader | None = None

    async def execute(
        self, args: ListCardsRequest | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            request = validate_request(ListCardsRequest, args)
        except InputValidationError as e:
            return invalid_input_response(e)

        try:
            batch = CardCollector(self.config, self.reader).collect()
        except ConfigurationError as e:
            return configuration_error_response(e)
        cards = filter_cards(batch.cards, request.deck, request.subject)
        limited = cards[: request.limit]

        return {
            "success": True,
            "total_count": len(cards),
            "returned_count": len(limited),
            "has_more": len(cards) > request.limit,
            "deck_summary": deck_summary(cards),
            "cards": [
                {
                    "uid": card.uid,
                    "front": truncate(card.front, PREVIEW_LENGTH),
                    "back": truncate(card.back, PREVIEW_LENGTH),
                    "deck": card.deck,
                    "tags": card.tags,
                    "source_file": card.source_file,
                    "source_line": card.source_line,
                }
                for card in limited
            ],
        }
