"""Shared utilities for CLI commands."""

import asyncio
import json
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from obsidian_anki_bridge.config import Config, load_config
from obsidian_anki_bridge.exceptions import ConfigurationError, format_error
from obsidian_anki_bridge.utils.logging import configure_logging, get_logger

# Shared console for all commands
console = Console()


def get_config_and_logger(
    config_path: Path | None = None,
    log_level: str | None = None,
    verbose: bool = False,
    vault: Path | None = None,
) -> tuple[Config, Any]:
    """Load configuration and configure logging for one command.

    Args:
        config_path: Optional path to config file
        log_level: Logging level, overriding the configured one
        verbose: Show all log messages on terminal
        vault: Optional vault path overriding the configured one

    Returns:
        Tuple of (Config, Logger)
    """
    try:
        config = load_config(config_path, vault_path=vault, log_level=log_level)
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(format_error(e))}")
        if e.suggestion:
            console.print(f"  [dim]TIP: {escape(e.suggestion)}[/dim]")
        raise typer.Exit(code=1) from e

    configure_logging(config.log_level, log_dir=config.log_dir, verbose=verbose)
    return config, get_logger("cli")


def run_use_case(coro: Coroutine[Any, Any, dict[str, Any]]) -> dict[str, Any]:
    return asyncio.run(coro)


def print_json(payload: dict[str, Any]) -> None:
    console.print_json(json.dumps(payload, ensure_ascii=False))


def print_failure(payload: dict[str, Any]) -> None:
    """Print an error payload and exit with status 1."""
    error = escape(str(payload.get("error", "Error")))
    console.print(f"[bold red]{error}:[/bold red] {escape(str(payload.get('message', '')))}")
    for detail in payload.get("details", []):
        console.print(f"  [yellow]{escape(detail['field'])}[/yellow]: {escape(detail['message'])}")
    raise typer.Exit(code=1)


def deck_table(deck_summary: dict[str, int], title: str = "Decks") -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Deck", style="cyan")
    table.add_column("Cards", style="green", justify="right")
    for deck, count in deck_summary.items():
        table.add_row(escape(deck), str(count))
    return table


def print_file_errors(file_errors: list[dict[str, str]]) -> None:
    for fe in file_errors:
        console.print(f"[yellow]WARN[/yellow] {escape(fe['file'])}: {escape(fe['error'])}")
