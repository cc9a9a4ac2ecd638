"""Config loader utilities (split from config.py)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from .config_settings import Config
from .error_codes import ErrorCode
from .exceptions import ConfigurationError
from .utils.logging import get_logger


def _candidate_paths(config_path: Path | None) -> list[Path]:
    if config_path:
        return [config_path.expanduser()]

    candidates: list[Path] = []
    env_path = os.getenv("OBSIDIAN_ANKI_CONFIG")
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.append(Path.cwd() / "config.yaml")
    return candidates


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to parse config file: {path}",
            suggestion=(
                "Check YAML syntax (indentation, colons, quotes) and that the file "
                f"is UTF-8. Original error: {e}"
            ),
            error_code=ErrorCode.CFG_FILE_INVALID.value,
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping: {path}",
            suggestion="Write settings as 'key: value' pairs at the top level",
            error_code=ErrorCode.CFG_FILE_INVALID.value,
        )
    return data


def load_config(config_path: Path | None = None, **overrides: Any) -> Config:
    """Load configuration from the environment, .env and config.yaml.

    Precedence, highest first: keyword ``overrides``, values from the YAML
    file, environment variables and ``.env``, field defaults.

    Args:
        config_path: Explicit YAML file. When omitted, ``$OBSIDIAN_ANKI_CONFIG``
            and ``./config.yaml`` are tried in that order.
        **overrides: Field values that win over every other source (None is ignored)

    Raises:
        ConfigurationError: If the file cannot be parsed or a value is invalid
    """
    logger = get_logger(__name__)

    candidates = _candidate_paths(config_path)
    resolved_config_path = next((p for p in candidates if p.exists()), None)

    if config_path and resolved_config_path is None:
        raise ConfigurationError(
            f"Config file not found: {config_path}",
            suggestion="Check the --config path",
            error_code=ErrorCode.CFG_FILE_INVALID.value,
        )

    yaml_data: dict[str, Any] = {}
    if resolved_config_path:
        yaml_data = _read_yaml(resolved_config_path)
        logger.debug(
            "config_yaml_loaded",
            config_path=str(resolved_config_path),
            keys_count=len(yaml_data),
        )
    else:
        logger.debug(
            "config_file_not_found", searched_paths=[str(p) for p in candidates]
        )

    config_kwargs: dict[str, Any] = {
        key: value
        for key, value in yaml_data.items()
        if key in Config.model_fields and value is not None
    }
    config_kwargs.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = Config(**config_kwargs)
    except ConfigurationError:
        raise
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise ConfigurationError(
            "Invalid configuration",
            suggestion=str(e),
            error_code=ErrorCode.CFG_FILE_INVALID.value,
        ) from e

    logger.debug(
        "config_loaded",
        vault_path=str(config.vault_path),
        flashcards_folder=config.flashcards_folder,
        config_path=str(resolved_config_path) if resolved_config_path else None,
    )
    return config


__all__ = ["Config", "load_config"]
