"""Application use cases package."""

from .apply_sync import ApplySyncUseCase
from .health_check import HealthCheckUseCase
from .list_cards import ListCardsUseCase, filter_cards
from .parse_document import ParseDocumentUseCase
from .preview_sync import PreviewSyncUseCase

__all__ = [
    "ApplySyncUseCase",
    "HealthCheckUseCase",
    "ListCardsUseCase",
    "ParseDocumentUseCase",
    "PreviewSyncUseCase",
    "filter_cards",
]
