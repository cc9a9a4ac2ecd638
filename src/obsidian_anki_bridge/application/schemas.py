"""Request models for the caller-facing operations."""

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ParseDocumentRequest(_Request):
    """Parse one note and show its cards."""

    file_path: str = Field(min_length=1, description="Note path, vault-relative or absolute")


class PreviewSyncRequest(_Request):
    """Show what a sync would do without contacting Anki."""

    files: list[str] | None = Field(
        default=None, description="Notes to include (default: every flashcard note)"
    )


class ApplySyncRequest(PreviewSyncRequest):
    """Synchronize notes into Anki."""

    dry_run: bool = Field(default=False, description="Only preview the sync")


class ListCardsRequest(_Request):
    """List cards in the vault."""

    deck: str | None = Field(default=None, description="Case-insensitive deck substring")
    subject: str | None = Field(default=None, description="Subject code, e.g. BIOL")
    limit: int = Field(default=100, ge=1, le=10_000)


class HealthCheckRequest(_Request):
    """Report AnkiConnect and vault status."""

    verbose: bool = False


__all__ = [
    "ApplySyncRequest",
    "HealthCheckRequest",
    "ListCardsRequest",
    "ParseDocumentRequest",
    "PreviewSyncRequest",
]
