"""Centralized exception hierarchy for obsidian-anki-bridge.

All custom exceptions inherit from BridgeError, so callers can catch every
bridge-related failure with a single except clause.

Exception Hierarchy:
    BridgeError (base)
     ConfigurationError - Configuration loading/validation errors
     ValidationError - Caller input and document validation errors
        InputValidationError - Malformed request arguments
        ParserError - Flashcard document parsing errors
     PathSecurityError - Requested path escapes the vault
     DocumentNotFoundError - Referenced document does not exist
     SyncError - Reconciliation errors
     AnkiError - Anki-related errors
        AnkiConnectError - AnkiConnect communication errors
        AnkiUnreachableError - AnkiConnect did not answer the ping

Usage Examples:
    try:
        result = await engine.sync(cards)
    except AnkiUnreachableError as e:
        logger.error("sync_failed", error=str(e))

    raise ParserError(
        "Too many flashcards in note",
        error_code=ErrorCode.PAR_TOO_MANY_CARDS.value,
        context={"file": "Flashcards/biology.md", "count": 812},
    )
"""

from typing import Any


class BridgeError(Exception):
    """Base exception for all bridge errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
        error_code: Structured error code for machine-readable handling
        context: Additional context for debugging (e.g., file paths, uids)
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            suggestion: Optional suggestion for resolving the error
            error_code: Structured error code (e.g., "ANK-CONN-001")
            context: Additional context for debugging
        """
        self.message = message
        self.suggestion = suggestion
        self.error_code = error_code
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with error code and suggestion if available."""
        parts = []
        if self.error_code:
            parts.append(f"[{self.error_code}] {self.message}")
        else:
            parts.append(self.message)
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging and payloads.

        Returns:
            Dictionary with error details
        """
        return {
            "message": self.message,
            "error_code": self.error_code,
            "suggestion": self.suggestion,
            "context": self.context,
            "type": type(self).__name__,
        }


# Configuration Errors


class ConfigurationError(BridgeError):
    """Configuration loading or validation errors.

    Raised when:
    - Config file is missing or malformed
    - The vault path is not set or does not exist
    - Configuration values fail validation
    """


# Validation Errors


class ValidationError(BridgeError):
    """Caller input or document validation errors."""


class InputValidationError(ValidationError):
    """Malformed caller arguments.

    Raised before any side effect when a request does not match its schema.
    """


class ParserError(ValidationError):
    """Flashcard document parsing errors.

    Raised when:
    - The document cannot be read or decoded
    - The document yields more cards than the configured maximum
    """


# Path Errors


class PathSecurityError(BridgeError):
    """A requested document path resolves outside the configured vault."""


class DocumentNotFoundError(BridgeError):
    """A referenced document does not exist inside the vault."""


# Sync Errors


class SyncError(BridgeError):
    """Reconciliation errors that abort a whole sync run."""


# Anki Errors


class AnkiError(BridgeError):
    """Anki-related errors."""


class AnkiConnectError(AnkiError):
    """AnkiConnect communication errors.

    Raised when:
    - AnkiConnect returns an HTTP error or invalid JSON
    - An action returns a non-null ``error`` field
    - The request times out or the connection is refused
    """


class AnkiUnreachableError(AnkiError):
    """AnkiConnect did not answer the connectivity check.

    Raised before any mutation so a sync never runs against a store that is
    known to be down.
    """


def format_error(error: BaseException) -> str:
    """Return a single-line description for an error list entry."""
    if isinstance(error, BridgeError):
        if error.error_code:
            return f"[{error.error_code}] {error.message}"
        return error.message
    return str(error) or type(error).__name__


__all__ = [
    "AnkiConnectError",
    "AnkiError",
    "AnkiUnreachableError",
    "BridgeError",
    "ConfigurationError",
    "DocumentNotFoundError",
    "InputValidationError",
    "ParserError",
    "PathSecurityError",
    "SyncError",
    "ValidationError",
    "format_error",
]
