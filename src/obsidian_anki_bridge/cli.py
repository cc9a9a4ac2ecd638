"""Command-line interface for the flashcard bridge."""

from __future__ import annotations

import typer

from .cli_commands import flashcard_commands

app = typer.Typer(
    name="obsidian-anki-bridge",
    help="Sync flashcards written in Obsidian notes into Anki.",
    no_args_is_help=True,
)

flashcard_commands.register(app)


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
