"""Flashcard CLI commands: parse, preview, sync, list, check."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from ..application.use_cases import (
    ApplySyncUseCase,
    HealthCheckUseCase,
    ListCardsUseCase,
    ParseDocumentUseCase,
    PreviewSyncUseCase,
)
from .shared import (
    console,
    deck_table,
    get_config_and_logger,
    print_failure,
    print_file_errors,
    print_json,
    run_use_case,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to config.yaml", exists=True),
]
VaultOption = Annotated[
    Path | None,
    typer.Option("--vault", help="Path to the Obsidian vault (overrides config)"),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show all log messages on terminal"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the raw result as JSON"),
]
FilesArgument = Annotated[
    list[str] | None,
    typer.Argument(help="Vault-relative notes (default: the whole flashcards folder)"),
]


def register(app: typer.Typer) -> None:
    """Register flashcard commands on the given Typer app."""

    @app.command()
    def parse(
        file_path: Annotated[str, typer.Argument(help="Vault-relative path of the note")],
        config_path: ConfigOption = None,
        vault: VaultOption = None,
        log_level: LogLevelOption = None,
        as_json: JsonOption = False,
    ) -> None:
        """Show the flashcards extracted from one note."""
        config, _logger = get_config_and_logger(config_path, log_level, vault=vault)
        result = run_use_case(ParseDocumentUseCase(config).execute({"file_path": file_path}))

        if as_json:
            print_json(result)
        if not result["success"]:
            print_failure(result)
        if as_json:
            return

        table = Table(
            title=f"{result['file']} ({result['card_count']} cards)",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Line", style="dim", justify="right")
        table.add_column("Front", style="cyan")
        table.add_column("Back")
        table.add_column("Deck", style="green")
        for card in result["cards"]:
            table.add_row(
                str(card["source_line"]),
                escape(card["front"]),
                escape(card["back"]),
                escape(card["deck"]),
            )
        console.print(table)

    @app.command()
    def preview(
        files: FilesArgument = None,
        config_path: ConfigOption = None,
        vault: VaultOption = None,
        log_level: LogLevelOption = None,
        as_json: JsonOption = False,
    ) -> None:
        """Preview what a sync would send to Anki."""
        config, _logger = get_config_and_logger(config_path, log_level, vault=vault)
        result = run_use_case(PreviewSyncUseCase(config).execute({"files": files or None}))

        if as_json:
            print_json(result)
        if not result["success"]:
            print_failure(result)
        if as_json:
            return

        console.print(f"\n[bold cyan]{result['total_cards']} cards would be synced[/bold cyan]\n")
        console.print(deck_table(result["deck_summary"]))
        for card in result["sample_cards"]:
            console.print(f"  [dim]{card['uid']}[/dim] {escape(card['front'])}")
        print_file_errors(result["file_errors"])

    @app.command()
    def sync(
        files: FilesArgument = None,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="Preview changes without applying"),
        ] = False,
        config_path: ConfigOption = None,
        vault: VaultOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
        as_json: JsonOption = False,
    ) -> None:
        """Synchronize flashcards from Obsidian notes into Anki."""
        start_time = time.time()
        config, logger = get_config_and_logger(config_path, log_level, verbose, vault)
        logger.info("cli_command_started", command="sync", dry_run=dry_run)

        result = run_use_case(
            ApplySyncUseCase(config).execute({"files": files or None, "dry_run": dry_run})
        )
        logger.info(
            "cli_command_completed",
            command="sync",
            duration=round(time.time() - start_time, 2),
            success=result["success"],
        )

        if as_json:
            print_json(result)
        if not result["success"]:
            print_failure(result)
        if as_json:
            return

        if dry_run:
            console.print(f"\n[bold cyan]Dry run: {result['total_cards']} cards[/bold cyan]\n")
            console.print(deck_table(result["deck_summary"]))
            print_file_errors(result["file_errors"])
            return

        summary = Table(title="Sync Summary", show_header=True, header_style="bold magenta")
        summary.add_column("Status", style="cyan")
        summary.add_column("Count", style="green", justify="right")
        summary.add_row("Created", str(result["created"]))
        summary.add_row("Updated", str(result["updated"]))
        summary.add_row("Unchanged", str(result["unchanged"]))
        summary.add_row("Errors", str(len(result["errors"])))
        console.print(summary)

        for error in result["errors"]:
            console.print(
                f"[red]FAIL[/red] {escape(error['source_file'])} "
                f"({error['uid']}): {escape(error['error'])}"
            )
        print_file_errors(result["file_errors"])
        print_file_errors(result["write_back_errors"])

    @app.command(name="list")
    def list_cards(
        deck: Annotated[
            str | None, typer.Option("--deck", "-d", help="Filter by deck name")
        ] = None,
        subject: Annotated[
            str | None, typer.Option("--subject", "-s", help="Filter by subject")
        ] = None,
        limit: Annotated[
            int, typer.Option("--limit", "-n", help="Maximum cards to show", min=1, max=10000)
        ] = 100,
        config_path: ConfigOption = None,
        vault: VaultOption = None,
        log_level: LogLevelOption = None,
        as_json: JsonOption = False,
    ) -> None:
        """List flashcards in the vault."""
        config, _logger = get_config_and_logger(config_path, log_level, vault=vault)
        result = run_use_case(
            ListCardsUseCase(config).execute(
                {"deck": deck, "subject": subject, "limit": limit}
            )
        )

        if as_json:
            print_json(result)
        if not result["success"]:
            print_failure(result)
        if as_json:
            return

        table = Table(
            title=f"Flashcards ({result['returned_count']} of {result['total_count']})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Deck", style="green")
        table.add_column("Front", style="cyan")
        table.add_column("Source", style="dim")
        for card in result["cards"]:
            table.add_row(
                escape(card["deck"]),
                escape(card["front"]),
                escape(f"{card['source_file']}:{card['source_line']}"),
            )
        console.print(table)

    @app.command()
    def check(
        verbose: VerboseOption = False,
        config_path: ConfigOption = None,
        vault: VaultOption = None,
        log_level: LogLevelOption = None,
        as_json: JsonOption = False,
    ) -> None:
        """Check AnkiConnect and vault health."""
        config, logger = get_config_and_logger(config_path, log_level, vault=vault)
        result = run_use_case(HealthCheckUseCase(config).execute({"verbose": verbose}))

        if as_json:
            print_json(result)
        else:
            anki_status = (
                f"[green]PASS[/green] AnkiConnect {result['anki_version']}"
                if result["anki_connected"]
                else "[red]FAIL[/red] AnkiConnect not reachable"
            )
            console.print(anki_status)
            vault_icon = "[green]PASS[/green]" if result["vault_accessible"] else "[red]FAIL[/red]"
            console.print(f"{vault_icon} Vault: {config.vault_root}")
            console.print(
                f"[cyan]INFO[/cyan] {result['flashcard_count']} flashcards, "
                f"last sync: {result['last_sync'] or 'never'}"
            )
            for issue in result["issues"]:
                console.print(f"  [yellow]{escape(issue)}[/yellow]")
            if verbose:
                console.print(deck_table(result["deck_summary"]))

        if not result["success"]:
            logger.warning("check_failed", issues=len(result["issues"]))
            raise typer.Exit(code=1)
