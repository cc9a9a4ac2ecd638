"""Integration tests for the AnkiConnect client."""

import json

import httpx
import pytest
import respx

from obsidian_anki_bridge.anki.client import AnkiClient
from obsidian_anki_bridge.anki.note_model import MODEL_NAME, uid_tag
from obsidian_anki_bridge.exceptions import AnkiConnectError
from obsidian_anki_bridge.models import Flashcard

ANKI_URL = "http://localhost:8765"


def _ok(result):
    return httpx.Response(200, json={"result": result, "error": None})


def _sent(route: respx.Route, index: int = -1) -> dict:
    return json.loads(route.calls[index].request.content)


@pytest.fixture
def client() -> AnkiClient:
    return AnkiClient(ANKI_URL, retry_attempts=3, retry_delay=0)


@pytest.fixture
def card() -> Flashcard:
    return Flashcard(
        uid="0123456789abcdef",
        front="<p>Q</p>",
        back="<p>A</p>",
        deck="Rina::Biology",
        source_file="Flashcards/biology.md",
        source_line=5,
        tags=["anatomy"],
    )


class TestInvoke:
    """Tests for the request envelope and error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_successful_invoke(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(return_value=_ok("success"))

        assert await client.invoke("testAction", {"param": "value"}) == "success"
        assert _sent(route) == {"action": "testAction", "version": 6, "params": {"param": "value"}}

    @pytest.mark.asyncio
    @respx.mock
    async def test_params_omitted_when_none(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(return_value=_ok(["Default"]))

        await client.invoke("deckNames")

        assert "params" not in _sent(route)

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_response(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(
            return_value=httpx.Response(200, json={"result": None, "error": "Test error"})
        )

        with pytest.raises(AnkiConnectError, match="Test error"):
            await client.invoke("testAction")

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(AnkiConnectError, match="HTTP 500"):
            await client.invoke("testAction")

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_errors_retried(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(
            side_effect=[httpx.ConnectError("refused"), _ok(6)]
        )

        assert await client.invoke("version") == 6
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_exhausted(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(AnkiConnectError, match="Connection error"):
            await client.invoke("version")
        assert route.call_count == 3


class TestPing:
    """Tests for the connectivity check."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_connected(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(return_value=_ok(6))

        result = await client.ping()

        assert result.connected
        assert result.version == 6

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable_never_raises(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(side_effect=httpx.ConnectError("refused"))

        result = await client.ping()

        assert not result.connected
        assert route.call_count == 1


class TestNoteOperations:
    """Tests for the actions used during reconciliation."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_ensure_note_model_creates_missing(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(side_effect=[_ok(["Basic"]), _ok(None)])

        await client.ensure_note_model()

        created = _sent(route)
        assert created["action"] == "createModel"
        assert created["params"]["modelName"] == MODEL_NAME
        assert created["params"]["inOrderFields"] == ["Front", "Back", "SourceLink"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_ensure_note_model_refreshes_styling(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(side_effect=[_ok([MODEL_NAME]), _ok(None)])

        await client.ensure_note_model()

        assert _sent(route)["action"] == "updateModelStyling"

    @pytest.mark.asyncio
    @respx.mock
    async def test_find_note_by_uid(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(return_value=_ok([42, 43]))

        assert await client.find_note_by_uid("0123456789abcdef") == 42
        assert _sent(route)["params"] == {"query": f"tag:{uid_tag('0123456789abcdef')}"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_find_note_by_uid_none(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(return_value=_ok([]))

        assert await client.find_note_by_uid("0123456789abcdef") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_add_note(self, client: AnkiClient, card: Flashcard) -> None:
        route = respx.post(ANKI_URL).mock(return_value=_ok(1001))

        assert await client.add_note(card, "MyVault") == 1001

        note = _sent(route)["params"]["note"]
        assert note["deckName"] == "Rina::Biology"
        assert note["modelName"] == MODEL_NAME
        assert note["tags"] == ["anatomy", uid_tag(card.uid)]
        assert note["options"] == {"allowDuplicate": False, "duplicateScope": "deck"}
        assert "line=5" in note["fields"]["SourceLink"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_note(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(
            return_value=_ok(
                [
                    {
                        "noteId": 7,
                        "fields": {"Front": {"value": "Q", "order": 0}},
                        "tags": ["a"],
                    }
                ]
            )
        )

        snapshot = await client.get_note(7)

        assert snapshot.fields == {"Front": "Q"}
        assert snapshot.tags == ["a"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_missing_note(self, client: AnkiClient) -> None:
        respx.post(ANKI_URL).mock(return_value=_ok([{}]))

        with pytest.raises(AnkiConnectError, match="Note not found"):
            await client.get_note(7)

    @pytest.mark.asyncio
    @respx.mock
    async def test_tags_space_joined_and_empty_skipped(self, client: AnkiClient) -> None:
        route = respx.post(ANKI_URL).mock(return_value=_ok(None))

        await client.add_tags(7, ["a", "b"])
        await client.remove_tags(7, [])

        assert route.call_count == 1
        assert _sent(route)["params"] == {"notes": [7], "tags": "a b"}
