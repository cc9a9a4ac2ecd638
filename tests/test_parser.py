"""Tests for flashcard extraction from notes."""

from pathlib import Path

import pytest

from obsidian_anki_bridge.config import Config
from obsidian_anki_bridge.exceptions import DocumentNotFoundError, ParserError
from obsidian_anki_bridge.obsidian.parser import (
    CardFormat,
    extract_raw_cards,
    parse_callout_format,
    parse_document,
    parse_documents,
    parse_flashcard_file,
    parse_heading_format,
    parse_separator_format,
)
from obsidian_anki_bridge.utils.identity import generate_uid


class TestSeparatorFormat:
    """Tests for front / --- / back cards."""

    def test_single_card(self) -> None:
        cards = parse_separator_format(["Front", "---", "Back"])
        assert len(cards) == 1
        assert (cards[0].front, cards[0].back, cards[0].line) == ("Front", "Back", 0)

    def test_blank_lines_around_separator(self) -> None:
        cards = parse_separator_format(["Front", "", "---", "", "Back"])
        assert [(c.front, c.back) for c in cards] == [("Front", "Back")]

    def test_multiline_sides(self) -> None:
        cards = parse_separator_format(["Q line 1", "Q line 2", "---", "A 1", "A 2"])
        assert cards[0].front == "Q line 1\nQ line 2"
        assert cards[0].back == "A 1\nA 2"

    def test_consecutive_cards(self) -> None:
        lines = ["Q1", "---", "A1", "", "Q2", "---", "A2"]
        cards = parse_separator_format(lines)
        assert [(c.front, c.back, c.line) for c in cards] == [
            ("Q1", "A1", 0),
            ("Q2", "A2", 4),
        ]

    def test_back_is_not_reused_as_front(self) -> None:
        cards = parse_separator_format(["Q1", "---", "A1", "---", "A2"])
        assert [(c.front, c.back) for c in cards] == [("Q1", "A1")]

    def test_missing_side_skipped(self) -> None:
        assert parse_separator_format(["---", "Back only"]) == []
        assert parse_separator_format(["Front only", "---"]) == []


class TestCalloutFormat:
    """Tests for > [!flashcard] cards."""

    def test_single_card(self) -> None:
        lines = ["> [!flashcard]", "> Q: What is ATP?", "> A: Energy currency"]
        cards = parse_callout_format(lines)
        assert [(c.front, c.back, c.line) for c in cards] == [
            ("What is ATP?", "Energy currency", 0)
        ]

    def test_continuation_lines(self) -> None:
        lines = [
            "intro",
            "> [!FLASHCARD] optional title",
            "> Q: First line",
            "> second line",
            "> A: Answer",
            "> more answer",
        ]
        cards = parse_callout_format(lines)
        assert cards[0].front == "First line\nsecond line"
        assert cards[0].back == "Answer\nmore answer"
        assert cards[0].line == 1

    def test_incomplete_card_skipped(self) -> None:
        assert parse_callout_format(["> [!flashcard]", "> Q: only a question"]) == []


class TestHeadingFormat:
    """Tests for ## Question cards."""

    def test_cards_until_next_heading(self) -> None:
        lines = ["## What is mitosis?", "Cell division", "", "## What is meiosis?", "Gametes"]
        cards = parse_heading_format(lines)
        assert [(c.front, c.back, c.line) for c in cards] == [
            ("What is mitosis?", "Cell division", 0),
            ("What is meiosis?", "Gametes", 3),
        ]

    def test_hash_inside_code_fence_is_content(self) -> None:
        lines = ["## Comment syntax?", "```python", "# a comment", "```", "## Next", "x"]
        cards = parse_heading_format(lines)
        assert "# a comment" in cards[0].back
        assert len(cards) == 2

    def test_heading_without_answer_skipped(self) -> None:
        assert parse_heading_format(["## Empty", "## Also empty"]) == []


class TestStrategyOrder:
    """The first strategy that yields cards wins."""

    def test_separator_beats_heading(self) -> None:
        body = "## Heading\nQ\n---\nA"
        card_format, cards = extract_raw_cards(body)
        assert card_format is CardFormat.SEPARATOR
        assert len(cards) == 1

    def test_separator_excludes_callout_and_heading_cards(self) -> None:
        body = (
            "## What is osmosis?\n"
            "Diffusion of water\n"
            "\n"
            "What is the powerhouse of the cell?\n"
            "---\n"
            "Mitochondria\n"
            "\n"
            "> [!flashcard]\n"
            "> Q: What stores genetic code?\n"
            "> A: DNA\n"
        )
        card_format, cards = extract_raw_cards(body)
        assert card_format is CardFormat.SEPARATOR
        assert [(c.front, c.back) for c in cards] == [
            ("What is the powerhouse of the cell?", "Mitochondria")
        ]

    def test_callout_when_no_separator(self) -> None:
        body = "## Topic\n> [!flashcard]\n> Q: q\n> A: a"
        card_format, cards = extract_raw_cards(body)
        assert card_format is CardFormat.CALLOUT
        assert [(c.front, c.back) for c in cards] == [("q", "a")]

    def test_no_cards(self) -> None:
        assert extract_raw_cards("plain prose") == (None, [])


class TestParseDocument:
    """Tests for full document parsing."""

    def test_biology_example(self, config: Config, vault: Path) -> None:
        text = (vault / "Flashcards" / "biology.md").read_text(encoding="utf-8")
        cards = parse_document(text, "Flashcards/biology.md", config)

        assert len(cards) == 1
        card = cards[0]
        assert card.deck == "Rina::Biology"
        assert card.tags == ["anatomy", "skeleton"]
        assert card.source_file == "Flashcards/biology.md"
        assert card.source_line == 5
        assert "What is the largest bone?" in card.front
        assert ">the joints page</a>" in card.back
        assert "obsidian://open?vault=MyVault" in card.back

    def test_uid_uses_raw_text(self, config: Config) -> None:
        cards = parse_document("**Q**\n---\nA", "Flashcards/x.md", config)
        assert cards[0].uid == generate_uid("**Q**", "A", "Flashcards/x.md")

    def test_source_line_without_frontmatter(self, config: Config) -> None:
        cards = parse_document("intro\n\n## Q\nA", "Flashcards/x.md", config)
        assert cards[0].source_line == 3

    def test_frontmatter_delimiters_not_cards(self, config: Config) -> None:
        cards = parse_document("---\nsubject: MATH\n---\n", "Flashcards/x.md", config)
        assert cards == []

    def test_byte_order_mark_before_frontmatter(self, config: Config) -> None:
        text = "\ufeff---\nsubject: BIOL\n---\nQuestion\n\n---\n\nAnswer\n"
        cards = parse_document(text, "Flashcards/x.md", config)

        assert [(c.deck, c.front, c.back) for c in cards] == [
            ("Rina::Biology", "<p>Question</p>", "<p>Answer</p>")
        ]
        assert cards[0].source_line == 4

    def test_too_many_cards(self, vault: Path) -> None:
        config = Config(vault_path=vault, max_cards_per_note=1)
        with pytest.raises(ParserError) as exc_info:
            parse_document("Q1\n---\nA1\n\nQ2\n---\nA2", "Flashcards/x.md", config)
        assert exc_info.value.error_code == "PAR-LIMIT-001"


class TestParseFiles:
    """Tests for reading notes from disk."""

    def test_missing_file(self, config: Config, vault: Path) -> None:
        with pytest.raises(DocumentNotFoundError):
            parse_flashcard_file(vault / "Flashcards" / "nope.md", config)

    def test_batch_records_failures(self, config: Config, vault: Path) -> None:
        (vault / "Flashcards" / "bad.md").write_bytes(b"\xff\xfe\x00bad")
        batch = parse_documents(
            [vault / "Flashcards" / "biology.md", vault / "Flashcards" / "bad.md"], config
        )
        assert len(batch.cards) == 1
        assert [fe.file for fe in batch.file_errors] == ["Flashcards/bad.md"]
        assert "PAR-READ-001" in batch.file_errors[0].error
