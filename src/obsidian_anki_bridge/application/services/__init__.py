"""Application services."""

from .card_collector import CardCollector, deck_summary, truncate

__all__ = ["CardCollector", "deck_summary", "truncate"]
