"""AnkiConnect HTTP API client."""

from types import TracebackType
from typing import Any, Literal, cast

import httpx

from ..domain.interfaces.anki_client import IAnkiClient
from ..error_codes import ErrorCode
from ..exceptions import AnkiConnectError
from ..models import Flashcard, NoteSnapshot, PingResult
from ..utils.logging import get_logger
from ..utils.retry import retry
from .note_model import (
    CARD_TEMPLATES,
    FIELD_NAMES,
    MODEL_NAME,
    build_note_fields,
    desired_tags,
    get_model_css,
    uid_tag,
)

logger = get_logger(__name__)

ANKI_CONNECT_VERSION = 6


class AnkiClient(IAnkiClient):
    """Async client for the AnkiConnect HTTP API (protocol version 6).

    Transport failures (refused connections, timeouts) are retried with
    exponential backoff. Errors reported by AnkiConnect itself are not.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_delay: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            url: AnkiConnect URL
            timeout: Request timeout in seconds
            retry_attempts: Attempts per request on transport errors
            retry_delay: Initial backoff delay in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(
                max_keepalive_connections=5, max_connections=10, keepalive_expiry=30.0
            ),
            transport=transport,
        )
        logger.debug("anki_client_initialized", url=url, timeout=timeout)

    @classmethod
    def from_config(cls, config: Any) -> "AnkiClient":
        return cls(
            config.anki_connect_url,
            timeout=config.anki_timeout,
            retry_attempts=config.anki_retry_attempts,
            retry_delay=config.anki_retry_delay,
        )

    @retry(
        max_attempts=lambda self: self.retry_attempts,
        initial_delay=lambda self: self.retry_delay,
        exceptions=(httpx.TransportError,),
    )
    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        return await self._client.post(self.url, json=payload)

    async def _send(self, action: str, params: dict[str, Any] | None) -> Any:
        payload: dict[str, Any] = {"action": action, "version": ANKI_CONNECT_VERSION}
        if params is not None:
            payload["params"] = params

        logger.debug("anki_invoke", action=action)

        try:
            response = await self._post(payload)
            response.raise_for_status()
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            msg = f"Connection error to AnkiConnect: {e}"
            raise AnkiConnectError(
                msg,
                suggestion="Make sure Anki is running with the AnkiConnect add-on installed",
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action, "url": self.url},
            ) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from AnkiConnect"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action},
            ) from e
        except httpx.HTTPError as e:
            msg = f"HTTP error calling AnkiConnect: {e}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action},
            ) from e

        try:
            result = response.json()
        except ValueError as e:
            msg = f"Invalid JSON response: {e}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action},
            ) from e

        if not isinstance(result, dict):
            raise AnkiConnectError(
                "Unexpected AnkiConnect response shape",
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action},
            )

        if result.get("error"):
            msg = f"AnkiConnect error: {result['error']}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"action": action},
            )

        return result.get("result")

    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """
        Invoke AnkiConnect action.

        Args:
            action: Action name
            params: Action parameters

        Returns:
            Action result

        Raises:
            AnkiConnectError: If the action fails
        """
        return await self._send(action, params)

    # IAnkiClient interface implementation

    async def ping(self) -> PingResult:
        """Check if AnkiConnect is accessible and get its version."""
        payload = {"action": "version", "version": ANKI_CONNECT_VERSION}
        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("anki_unreachable", url=self.url, error=str(e))
            return PingResult(connected=False)

        if not isinstance(data, dict) or data.get("error"):
            logger.warning("anki_unreachable", url=self.url, response=str(data)[:200])
            return PingResult(connected=False)

        version = data.get("result")
        return PingResult(
            connected=True, version=version if isinstance(version, int) else None
        )

    async def ensure_deck(self, name: str) -> None:
        """Get or create a deck."""
        await self.invoke("createDeck", {"deck": name})

    async def ensure_note_model(self) -> None:
        """Create the note model if missing, otherwise refresh its CSS."""
        models = cast("list[str]", await self.invoke("modelNames"))
        css = get_model_css()

        if MODEL_NAME not in models:
            await self.invoke(
                "createModel",
                {
                    "modelName": MODEL_NAME,
                    "inOrderFields": FIELD_NAMES,
                    "css": css,
                    "cardTemplates": CARD_TEMPLATES,
                },
            )
            logger.info("anki_model_created", model=MODEL_NAME)
        else:
            await self.invoke(
                "updateModelStyling", {"model": {"name": MODEL_NAME, "css": css}}
            )

    async def find_note_by_uid(self, uid: str) -> int | None:
        """Find note by its identity tag."""
        note_ids = cast(
            "list[int]", await self.invoke("findNotes", {"query": f"tag:{uid_tag(uid)}"})
        )
        return note_ids[0] if note_ids else None

    async def add_note(self, card: Flashcard, vault_name: str) -> int:
        """Add a new note to Anki."""
        note = {
            "deckName": card.deck,
            "modelName": MODEL_NAME,
            "fields": build_note_fields(card, vault_name),
            "tags": desired_tags(card),
            "options": {"allowDuplicate": False, "duplicateScope": "deck"},
        }
        note_id = await self.invoke("addNote", {"note": note})
        if not isinstance(note_id, int):
            raise AnkiConnectError(
                "AnkiConnect did not return a note id",
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"uid": card.uid},
            )
        return note_id

    async def get_note(self, note_id: int) -> NoteSnapshot:
        """Get the fields and tags of a note via notesInfo."""
        infos = cast("list[dict]", await self.invoke("notesInfo", {"notes": [note_id]}))
        if not infos or not infos[0]:
            raise AnkiConnectError(
                f"Note not found: {note_id}",
                error_code=ErrorCode.ANK_REQUEST_FAILED.value,
                context={"note_id": note_id},
            )
        info = infos[0]
        fields = {
            name: (value.get("value", "") if isinstance(value, dict) else str(value))
            for name, value in (info.get("fields") or {}).items()
        }
        return NoteSnapshot(fields=fields, tags=list(info.get("tags") or []))

    async def update_note_fields(self, note_id: int, fields: dict[str, str]) -> None:
        """Update fields of an existing note."""
        await self.invoke("updateNoteFields", {"note": {"id": note_id, "fields": fields}})

    async def get_note_tags(self, note_id: int) -> list[str]:
        return cast("list[str]", await self.invoke("getNoteTags", {"note": note_id}))

    async def add_tags(self, note_id: int, tags: list[str]) -> None:
        if tags:
            await self.invoke("addTags", {"notes": [note_id], "tags": " ".join(tags)})

    async def remove_tags(self, note_id: int, tags: list[str]) -> None:
        if tags:
            await self.invoke(
                "removeTags", {"notes": [note_id], "tags": " ".join(tags)}
            )

    async def aclose(self) -> None:
        """Close HTTP client and cleanup resources."""
        await self._client.aclose()
        logger.debug("anki_client_closed", url=self.url)

    async def __aenter__(self) -> "AnkiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        """Async context manager exit with cleanup."""
        await self.aclose()
        return False
