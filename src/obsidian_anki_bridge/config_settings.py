"""Settings model for the bridge (split from config.py)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .error_codes import ErrorCode
from .exceptions import ConfigurationError
from .utils.path_validator import validate_source_dir, validate_vault_path

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config(BaseSettings):
    """Bridge configuration using pydantic-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Obsidian paths - vault_path can be empty string from env, will be validated
    vault_path: Path | str = Field(
        default="",
        validation_alias=AliasChoices("vault_path", "obsidian_vault_path"),
        description="Path to Obsidian vault",
    )
    flashcards_folder: str = Field(
        default="Flashcards",
        description="Folder inside the vault that holds flashcard documents",
    )
    vault_name: str = Field(
        default="",
        description="Vault name used in obsidian:// links (defaults to the vault directory name)",
    )

    # Decks
    deck_prefix: str = Field(default="Rina", description="Root deck for every card")

    # Anki settings
    anki_connect_url: str = Field(
        default="http://localhost:8765", description="AnkiConnect URL"
    )
    anki_timeout: float = Field(
        default=30.0, description="AnkiConnect request timeout in seconds"
    )
    anki_retry_attempts: int = Field(
        default=3, description="Attempts per AnkiConnect request on transport errors"
    )
    anki_retry_delay: float = Field(
        default=0.5, description="Initial backoff delay in seconds"
    )

    # Limits
    batch_size_limit: int = Field(
        default=50_000, description="Maximum cards accepted by one sync request"
    )
    max_cards_per_note: int = Field(
        default=500, description="Maximum cards extracted from a single document"
    )
    max_field_size_bytes: int = Field(
        default=10_240, description="Maximum UTF-8 size of a rendered field"
    )

    # Write-back
    write_back: bool = Field(
        default=True,
        description="Record Anki note ids in each document's frontmatter after sync",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_dir: Path | None = Field(
        default=None, description="Directory for JSON log files (disabled when unset)"
    )

    @field_validator("vault_path", mode="before")
    @classmethod
    def parse_vault_path(cls, v: Any) -> Path | str:
        """Convert string to Path for vault_path."""
        if v is None:
            return ""
        if isinstance(v, str):
            if not v:
                # Empty string means not set - will be caught by validation
                return ""
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        msg = f"vault_path must be string or Path, got {type(v).__name__}"
        raise ValueError(msg)

    @field_validator("log_dir", mode="before")
    @classmethod
    def parse_log_dir(cls, v: Any) -> Path | None:
        """Convert string to Path."""
        if v is None or v == "":
            return None
        return Path(str(v)).expanduser()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _VALID_LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @model_validator(mode="after")
    def validate_config(self) -> Config:
        """Validate configuration values after initialization."""
        vault_path = self.vault_path
        if isinstance(vault_path, str) or not str(vault_path):
            raise ConfigurationError(
                "vault_path is required",
                suggestion="Set VAULT_PATH environment variable or vault_path in config.yaml",
                error_code=ErrorCode.CFG_VAULT_MISSING.value,
            )

        validated_vault = validate_vault_path(vault_path)
        _ = validate_source_dir(validated_vault, self.flashcards_folder)

        positive_ints = [
            ("batch_size_limit", self.batch_size_limit),
            ("max_cards_per_note", self.max_cards_per_note),
            ("max_field_size_bytes", self.max_field_size_bytes),
            ("anki_retry_attempts", self.anki_retry_attempts),
        ]
        for attr_name, value in positive_ints:
            if value < 1:
                raise ConfigurationError(
                    f"{attr_name} must be >= 1: {value}",
                    suggestion=f"Set {attr_name} to a positive integer.",
                )

        if self.anki_timeout <= 0:
            raise ConfigurationError(
                f"anki_timeout must be positive: {self.anki_timeout}",
                suggestion="Set ANKI_TIMEOUT to a number of seconds greater than 0.",
            )

        if self.anki_retry_delay < 0:
            raise ConfigurationError(
                f"anki_retry_delay must be >= 0: {self.anki_retry_delay}",
                suggestion="Set anki_retry_delay to 0 or a positive number of seconds.",
            )

        if not self.deck_prefix.strip():
            raise ConfigurationError(
                "deck_prefix must not be empty",
                suggestion="Set deck_prefix to the root deck name, e.g. Rina",
            )

        if not self.anki_connect_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid anki_connect_url: {self.anki_connect_url}",
                suggestion="Use a full URL such as http://localhost:8765",
            )

        if validated_vault != self.vault_path:
            object.__setattr__(self, "vault_path", validated_vault)
        if not self.vault_name:
            object.__setattr__(self, "vault_name", validated_vault.name)

        return self

    @property
    def vault_root(self) -> Path:
        """Validated absolute vault path."""
        return Path(self.vault_path)

    def get_flashcards_dir(self) -> Path:
        """Get absolute path to the flashcards folder."""
        return validate_source_dir(self.vault_root, self.flashcards_folder)


__all__ = ["Config"]
