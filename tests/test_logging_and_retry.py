"""Tests for logging configuration and the retry decorator."""

import json
import logging
from pathlib import Path

import pytest

from obsidian_anki_bridge.utils.logging import (
    UserFacingConsoleFilter,
    configure_logging,
    get_logger,
)
from obsidian_anki_bridge.utils.retry import retry


class TestLogging:
    """Tests for structlog setup."""

    def test_json_file_written(self, tmp_path: Path) -> None:
        configure_logging("INFO", log_dir=tmp_path)
        get_logger("tests").info("sync_completed", created=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "obsidian-anki-bridge.log").read_text(encoding="utf-8").splitlines()
        events = [json.loads(line) for line in lines]
        assert any(e["event"] == "sync_completed" and e["created"] == 2 for e in events)

        configure_logging("INFO")

    def test_console_filter_keeps_user_facing_events(self) -> None:
        console_filter = UserFacingConsoleFilter(verbose=False)

        def record(event: str, level: int = logging.INFO) -> logging.LogRecord:
            rec = logging.LogRecord("x", level, __file__, 1, event, None, None)
            rec.msg = {"event": event}
            return rec

        assert console_filter.filter(record("sync_completed"))
        assert not console_filter.filter(record("anki_invoke"))
        assert console_filter.filter(record("anki_invoke", logging.ERROR))
        assert UserFacingConsoleFilter(verbose=True).filter(record("anki_invoke"))


class Flaky:
    def __init__(self, failures: int, attempts: int = 3):
        self.failures = failures
        self.retry_attempts = attempts
        self.calls = 0

    @retry(
        max_attempts=lambda self: self.retry_attempts,
        initial_delay=0,
        exceptions=(ConnectionError,),
    )
    async def call(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("down")
        return "ok"


class TestRetry:
    """Tests for async retry with backoff."""

    @pytest.mark.asyncio
    async def test_recovers(self) -> None:
        flaky = Flaky(failures=2)
        assert await flaky.call() == "ok"
        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_exhausted_reraises(self) -> None:
        flaky = Flaky(failures=5, attempts=2)
        with pytest.raises(ConnectionError):
            await flaky.call()
        assert flaky.calls == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        calls = 0

        @retry(max_attempts=3, initial_delay=0, exceptions=(ConnectionError,))
        async def broken() -> None:
            nonlocal calls
            calls += 1
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await broken()
        assert calls == 1
