"""Pytest configuration and fixtures for the test suite."""

from pathlib import Path

import pytest

from obsidian_anki_bridge.config import Config
from tests.fixtures import FakeAnkiClient

BIOLOGY_NOTE = """---
subject: BIOL
tags: [anatomy, skeleton]
---
What is the largest bone?
---
The femur. See [[Skeleton#Joints|the joints page]].
"""


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer env vars and config files out of the tests."""
    for name in ("VAULT_PATH", "OBSIDIAN_VAULT_PATH", "OBSIDIAN_ANKI_CONFIG", "DECK_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """A vault named ``MyVault`` with one biology note."""
    root = tmp_path / "MyVault"
    (root / "Flashcards").mkdir(parents=True)
    (root / "Flashcards" / "biology.md").write_text(BIOLOGY_NOTE, encoding="utf-8")
    return root


@pytest.fixture
def config(vault: Path) -> Config:
    return Config(vault_path=vault, anki_retry_delay=0)


@pytest.fixture
def fake_anki() -> FakeAnkiClient:
    return FakeAnkiClient()
