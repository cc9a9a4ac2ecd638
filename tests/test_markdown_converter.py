"""Tests for Markdown to HTML conversion."""

from obsidian_anki_bridge.rendering.markdown_converter import (
    _basic_markdown_to_html,
    convert_markdown_to_html,
    get_pygments_css,
    sanitize_html,
)


class TestConvertMarkdownToHtml:
    """Tests for basic Markdown to HTML conversion."""

    def test_empty_content(self) -> None:
        """Empty content should return unchanged."""
        assert convert_markdown_to_html("") == ""
        assert convert_markdown_to_html("   ") == "   "

    def test_bold_text(self) -> None:
        result = convert_markdown_to_html("**bold text**")
        assert "<strong>bold text</strong>" in result

    def test_italic_text(self) -> None:
        result = convert_markdown_to_html("*italic text*")
        assert "<em>italic text</em>" in result

    def test_inline_code(self) -> None:
        result = convert_markdown_to_html("`x = 1`")
        assert '<code class="language-text">x = 1</code>' in result

    def test_hard_wrap(self) -> None:
        """Single newlines become line breaks."""
        assert "<br" in convert_markdown_to_html("line one\nline two")

    def test_fenced_code_highlighted(self) -> None:
        md = "```python\ndef hello():\n    return 1\n```"
        result = convert_markdown_to_html(md)
        assert 'class="codehilite"' in result
        assert "hello" in result

    def test_unknown_language_falls_back(self) -> None:
        md = "```notalanguage\na < b\n```"
        result = convert_markdown_to_html(md)
        assert "language-notalanguage" in result
        assert "a &lt; b" in result

    def test_strikethrough_plugin(self) -> None:
        assert "<del>gone</del>" in convert_markdown_to_html("~~gone~~")

    def test_table_plugin(self) -> None:
        md = "| a | b |\n|---|---|\n| 1 | 2 |"
        assert "<table>" in convert_markdown_to_html(md)

    def test_output_is_stripped(self) -> None:
        result = convert_markdown_to_html("text\n\n")
        assert result == result.strip()

    def test_raw_html_passes_through(self) -> None:
        result = convert_markdown_to_html('<div class="callout callout-note">\n\nhi\n\n</div>')
        assert '<div class="callout callout-note">' in result


class TestSanitizeHtml:
    """Tests for the nh3 allow-list."""

    def test_removes_event_handlers(self) -> None:
        result = sanitize_html('<img src="a.png" onerror="alert(1)">')
        assert "onerror" not in result

    def test_keeps_obsidian_scheme(self) -> None:
        result = sanitize_html('<a href="obsidian://open?vault=V">x</a>')
        assert "obsidian://open?vault=V" in result

    def test_drops_javascript_scheme(self) -> None:
        result = sanitize_html('<a href="javascript:alert(1)">x</a>')
        assert "javascript:" not in result

    def test_link_rel_added(self) -> None:
        assert 'rel="noopener noreferrer"' in sanitize_html('<a href="https://x.org">x</a>')


def test_basic_fallback() -> None:
    result = _basic_markdown_to_html("**b** and `c`")
    assert "<strong>b</strong>" in result
    assert '<code class="language-text">c</code>' in result


def test_pygments_css() -> None:
    assert ".codehilite" in get_pygments_css()
