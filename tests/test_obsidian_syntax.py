"""Tests for Obsidian markup rewriting."""

from obsidian_anki_bridge.models import Flashcard
from obsidian_anki_bridge.rendering.obsidian_syntax import (
    RenderContext,
    build_obsidian_url,
    build_source_link,
    convert_callouts,
    convert_images,
    convert_wikilinks,
    encode_uri_component,
    escape_html,
    process_obsidian_syntax,
)


class TestWikilinks:
    """Tests for [[wikilink]] conversion."""

    def test_plain_link(self) -> None:
        result = convert_wikilinks("See [[Cell Biology]]", "MyVault")
        assert result == (
            'See <a href="obsidian://open?vault=MyVault&file=Cell%20Biology">'
            "Cell Biology</a>"
        )

    def test_alias_wins(self) -> None:
        result = convert_wikilinks("[[Skeleton#Joints|the joints page]]", "MyVault")
        assert ">the joints page</a>" in result
        assert "file=Skeleton%23Joints" in result

    def test_heading_reference_uses_heading_text(self) -> None:
        result = convert_wikilinks("[[Skeleton#Joints]]", "MyVault")
        assert ">Joints</a>" in result

    def test_label_is_escaped(self) -> None:
        result = convert_wikilinks("[[A|x < y]]", "V")
        assert ">x &lt; y</a>" in result

    def test_embed_is_not_a_link(self) -> None:
        assert convert_wikilinks("![[diagram.png]]", "V") == "![[diagram.png]]"

    def test_unclosed_link_passes_through(self) -> None:
        assert convert_wikilinks("[[broken", "V") == "[[broken"


class TestImages:
    """Tests for ![[image]] embeds."""

    def test_image_embed(self) -> None:
        result = convert_images("![[heart.png]]")
        assert result == '<img src="heart.png" alt="heart.png" style="max-width: 100%;">'

    def test_size_suffix_dropped(self) -> None:
        assert 'src="heart.png"' in convert_images("![[heart.png|300]]")


class TestCallouts:
    """Tests for > [!type] callout blocks."""

    def test_callout_wrapped(self) -> None:
        result = convert_callouts("> [!note] Remember\n> body text")
        lines = result.split("\n")
        assert lines[0] == '<div class="callout callout-note"><strong>Remember</strong><br>'
        assert "> body text" in lines
        assert lines[-1] == "</div>"

    def test_callout_without_title(self) -> None:
        result = convert_callouts("> [!WARNING]\n> careful")
        assert result.startswith('<div class="callout callout-warning">\n')

    def test_text_after_callout_kept(self) -> None:
        result = convert_callouts("> [!tip] T\n> a\nafter")
        assert result.endswith("</div>\n\nafter")

    def test_plain_blockquote_untouched(self) -> None:
        assert convert_callouts("> just a quote") == "> just a quote"


class TestLinks:
    """Tests for obsidian:// URLs."""

    def test_encode_uri_component_matches_js(self) -> None:
        assert encode_uri_component("a b/c?d(e)!") == "a%20b%2Fc%3Fd(e)!"

    def test_url_with_line(self) -> None:
        url = build_obsidian_url("My Vault", "Flashcards/bio.md", 5)
        assert url == "obsidian://open?vault=My%20Vault&file=Flashcards%2Fbio.md&line=5"

    def test_source_link(self) -> None:
        card = Flashcard(
            uid="0123456789abcdef",
            front="f",
            back="b",
            deck="Rina",
            source_file="Flashcards/bio.md",
            source_line=4,
        )
        link = build_source_link(card, "MyVault")
        assert link.endswith(">View in Obsidian</a>")
        assert "&line=4" in link


def test_escape_html() -> None:
    assert escape_html("<a href=\"x\">&'") == "&lt;a href=&quot;x&quot;&gt;&amp;&#39;"


class TestProcessObsidianSyntax:
    """Tests for the full rendering pipeline."""

    def test_markdown_rendered(self) -> None:
        html = process_obsidian_syntax("**bold**", RenderContext(vault_name="V"))
        assert "<strong>bold</strong>" in html

    def test_wikilink_survives_sanitizer(self) -> None:
        html = process_obsidian_syntax("See [[Heart]]", RenderContext(vault_name="V"))
        assert 'href="obsidian://open?vault=V&amp;file=Heart"' in html or (
            'href="obsidian://open?vault=V&file=Heart"' in html
        )
        assert ">Heart</a>" in html

    def test_script_removed(self) -> None:
        html = process_obsidian_syntax(
            "<script>alert(1)</script>text", RenderContext(vault_name="V")
        )
        assert "<script" not in html
