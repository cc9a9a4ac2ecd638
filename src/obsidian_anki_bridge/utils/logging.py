"""Logging configuration using structlog for structured JSON logging."""

import logging
import sys
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer
from structlog.stdlib import LoggerFactory, add_log_level, add_logger_name

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Events shown on the terminal without --verbose, plus all ERROR/CRITICAL
USER_FACING_EVENTS: set[str] = {
    "sync_started",
    "sync_completed",
    "sync_failed",
    "sync_write_back_failed",
    "anki_unreachable",
    "config_warning",
    "document_parse_failed",
}


def _get_level_no(level_name: str) -> int:
    """Get numeric log level from name."""
    return _LOG_LEVELS.get(level_name.upper(), logging.INFO)


class UserFacingConsoleFilter(logging.Filter):
    """Logging filter that only passes user-facing events to console.

    Allows:
    - Events in USER_FACING_EVENTS set
    - All ERROR and CRITICAL level messages
    - All messages when verbose mode is enabled
    """

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose:
            return True

        if record.levelno >= logging.ERROR:
            return True

        event = record.getMessage()
        if isinstance(event, str):
            if event in USER_FACING_EVENTS:
                return True
            for user_event in USER_FACING_EVENTS:
                if user_event in event:
                    return True

        return False


class UserFriendlyConsoleRenderer:
    """Renders user-facing logs in a clean, readable format for terminal output.

    Falls back to the standard console renderer for other messages.
    """

    def __init__(self) -> None:
        self._fallback = ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        """Render log event as user-friendly string."""
        event = event_dict.get("event", "")
        level = str(event_dict.get("level", "info")).upper()

        if event == "sync_started":
            cards = event_dict.get("cards", 0)
            decks = event_dict.get("decks", 0)
            return f"Starting sync of {cards} cards into {decks} decks"

        elif event == "sync_completed":
            created = event_dict.get("created", 0)
            updated = event_dict.get("updated", 0)
            unchanged = event_dict.get("unchanged", 0)
            errors = event_dict.get("errors", 0)
            duration_ms = event_dict.get("duration_ms", 0)
            summary = (
                f"Sync completed in {duration_ms / 1000:.1f}s: "
                f"{created} created, {updated} updated, {unchanged} unchanged"
            )
            if errors:
                summary += f" | {errors} errors"
            return summary

        elif event == "sync_failed":
            error = event_dict.get("error", "Unknown error")
            return f"Sync failed: {error}"

        elif event == "anki_unreachable":
            url = event_dict.get("url", "")
            return f"AnkiConnect is not reachable at {url}"

        elif level == "ERROR":
            error = event_dict.get("error", event)
            return f"ERROR: {error}"

        elif level == "WARNING" and event in USER_FACING_EVENTS:
            file = event_dict.get("file")
            return f"WARNING: {event}" + (f" ({file})" if file else "")

        return str(self._fallback(logger, method_name, event_dict))


# Global state for handlers
_configured = False
_handlers: list[logging.Handler] = []


def _add_formatted_extra_processor(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Add a '_formatted' field with the extra context, key fields first."""
    priority_fields = ["file", "uid", "note_id", "deck"]
    important_parts = []
    other_parts = []

    for key, value in event_dict.items():
        if key in ("logger", "level", "event", "timestamp", "exception", "_formatted"):
            continue

        if key in priority_fields:
            if value:
                important_parts.append(f"{key}={value}")
        elif value is not None and value != "":
            other_parts.append(f"{key}={value}")

    all_parts = important_parts + other_parts
    event_dict["_formatted"] = " | " + " ".join(all_parts) if all_parts else ""
    return event_dict


def _base_pre_chain() -> list[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _setup_structlog() -> None:
    """Route structlog through the standard library logging handlers."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    structlog.configure(
        processors=[
            *_base_pre_chain(),
            _add_formatted_extra_processor,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure structlog logging.

    The console always receives human-readable output on stderr. When
    ``log_dir`` is given, every event is also written as JSON to a rotating
    ``obsidian-anki-bridge.log`` file in that directory.

    Args:
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the JSON log file (no file logging when None)
        verbose: If True, show all log messages on terminal (for debugging)
    """
    global _configured

    _setup_structlog()

    root_logger = logging.getLogger()
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_get_level_no(log_level))
    console_handler.addFilter(UserFacingConsoleFilter(verbose=verbose))

    if verbose:
        renderer: Any = ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        renderer = UserFriendlyConsoleRenderer()

    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[*_base_pre_chain(), _add_formatted_extra_processor],
        )
    )
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        # 10MB per file, 5 backups
        file_handler = RotatingFileHandler(
            filename=str(log_dir / "obsidian-anki-bridge.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=JSONRenderer(),
                foreign_pre_chain=[
                    *_base_pre_chain(),
                    _add_formatted_extra_processor,
                ],
            )
        )
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    _configured = True

    get_logger(__name__).debug(
        "logging_configured",
        console_level=log_level,
        log_dir=str(log_dir) if log_dir else None,
        verbose=verbose,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger bound to the given name
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)
