"""Structured error codes for machine-readable error handling.

Error codes follow the format: {DOMAIN}-{CATEGORY}-{NUMBER}

Error Domains:
    CFG - Configuration errors
    VAL - Caller input validation errors
    PTH - Path safety and lookup errors
    PAR - Document parsing errors
    ANK - Anki / AnkiConnect errors
    SYN - Sync run errors

Usage:
    from obsidian_anki_bridge.error_codes import ErrorCode

    logger.error(
        "card_sync_failed",
        error_code=ErrorCode.ANK_CARD_FAILED.value,
        uid=card.uid,
    )
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes for machine-readable handling.

    All error codes inherit from str for JSON serialization compatibility.
    """

    # =========================================================================
    # Configuration Errors (CFG-xxx-xxx)
    # =========================================================================
    CFG_VAULT_MISSING = "CFG-VAULT-001"
    """VAULT_PATH is not configured."""

    CFG_VAULT_INVALID = "CFG-VAULT-002"
    """Vault path does not exist or is not a directory."""

    CFG_FILE_INVALID = "CFG-FILE-001"
    """config.yaml could not be parsed."""

    # =========================================================================
    # Input Validation Errors (VAL-xxx-xxx)
    # =========================================================================
    VAL_INPUT_INVALID = "VAL-INPUT-001"
    """Request arguments did not match the operation schema."""

    VAL_TOO_MANY_CARDS = "VAL-LIMIT-001"
    """Extracted card count exceeds the configured batch size limit."""

    # =========================================================================
    # Path Errors (PTH-xxx-xxx)
    # =========================================================================
    PTH_OUTSIDE_VAULT = "PTH-SAFE-001"
    """Resolved document path escapes the vault root."""

    PTH_NOT_FOUND = "PTH-FOUND-001"
    """Referenced document does not exist."""

    # =========================================================================
    # Parse Errors (PAR-xxx-xxx)
    # =========================================================================
    PAR_READ_FAILED = "PAR-READ-001"
    """Document could not be read or decoded."""

    PAR_TOO_MANY_CARDS = "PAR-LIMIT-001"
    """A single document produced more cards than max_cards_per_note."""

    # =========================================================================
    # Anki Errors (ANK-xxx-xxx)
    # =========================================================================
    ANK_UNREACHABLE = "ANK-CONN-001"
    """AnkiConnect ping failed; the run was aborted before any mutation."""

    ANK_REQUEST_FAILED = "ANK-REQ-001"
    """An AnkiConnect action returned an error."""

    ANK_CARD_FAILED = "ANK-CARD-001"
    """A single card failed to reconcile; the batch continued."""

    ANK_FIELD_TOO_LARGE = "ANK-CARD-002"
    """A rendered field exceeds max_field_size_bytes."""

    # =========================================================================
    # Sync Errors (SYN-xxx-xxx)
    # =========================================================================
    SYN_SETUP_FAILED = "SYN-SETUP-001"
    """Note model or deck setup failed before any card was processed."""

    SYN_WRITE_BACK_FAILED = "SYN-WB-001"
    """Sync state could not be written back into a document."""


__all__ = ["ErrorCode"]
