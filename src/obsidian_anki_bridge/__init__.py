"""Sync flashcards written in Obsidian notes into Anki."""

__version__ = "0.1.0"
