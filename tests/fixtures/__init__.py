"""Test fixtures package."""

from .fake_anki_client import FakeAnkiClient

__all__ = ["FakeAnkiClient"]
