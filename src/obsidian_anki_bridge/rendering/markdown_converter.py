"""Convert flashcard Markdown to HTML for Anki.

Uses mistune for Markdown parsing, Pygments for syntax highlighting of
fenced code, and nh3 for HTML sanitization. Raw HTML produced by the
Obsidian syntax stages (links, images, callout containers) passes through
the parser and is then checked against the sanitizer allow-list.
"""

import re

import mistune
import nh3
from mistune.util import escape as escape_text
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..utils.logging import get_logger

logger = get_logger(__name__)

# Allowed HTML tags for Anki cards (used by nh3 sanitizer)
ALLOWED_TAGS = {
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "s",
    "del",
    "code",
    "pre",
    "ul",
    "ol",
    "li",
    "input",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "blockquote",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "a",
    "img",
    "div",
    "span",
    "sup",
    "sub",
    "hr",
    "section",
}

# Global attributes allowed on all tags
_GLOBAL_ATTRIBUTES = {"class", "id", "style"}

# "rel" is excluded from "a" because nh3.clean() sets it via link_rel
_TAG_SPECIFIC_ATTRIBUTES = {
    "a": {"href", "title"},
    "img": {"src", "alt", "title", "width", "height"},
    "input": {"type", "checked", "disabled"},
    "td": {"colspan", "rowspan", "align"},
    "th": {"colspan", "rowspan", "align"},
}

# obsidian:// links must survive sanitization
ALLOWED_URL_SCHEMES = {"http", "https", "mailto", "obsidian"}


def _build_allowed_attributes() -> dict[str, set[str]]:
    """Build allowed attributes dict with global attrs applied to all tags."""
    result: dict[str, set[str]] = {}
    for tag in ALLOWED_TAGS:
        tag_attrs = _TAG_SPECIFIC_ATTRIBUTES.get(tag, set())
        result[tag] = _GLOBAL_ATTRIBUTES | tag_attrs
    return result


ALLOWED_ATTRIBUTES = _build_allowed_attributes()


class AnkiHighlightRenderer(mistune.HTMLRenderer):
    """Custom mistune renderer with Pygments syntax highlighting for Anki."""

    def __init__(self) -> None:
        # Raw HTML from earlier stages must pass through untouched
        super().__init__(escape=False)
        self._formatter = HtmlFormatter(
            cssclass="codehilite",
            linenos=False,
            nowrap=False,
        )

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render code block with syntax highlighting."""
        lang = info.split()[0] if info and info.strip() else None

        try:
            lexer = get_lexer_by_name(lang, stripall=True) if lang else TextLexer()
        except ClassNotFound:
            escaped_code = escape_text(code.rstrip("\n"))
            return f'<pre><code class="language-{lang}">{escaped_code}</code></pre>\n'

        highlighted: str = highlight(code, lexer, self._formatter)
        return highlighted

    def codespan(self, text: str) -> str:
        """Render inline code with language-text class."""
        return f'<code class="language-text">{escape_text(text)}</code>'


def _create_mistune_converter() -> mistune.Markdown:
    """Create a configured mistune Markdown converter."""
    return mistune.create_markdown(
        renderer=AnkiHighlightRenderer(),
        hard_wrap=True,
        plugins=[
            "strikethrough",
            "table",
            "task_lists",
            "url",
            "footnotes",
        ],
    )


def convert_markdown_to_html(md_content: str, sanitize: bool = True) -> str:
    """
    Convert Markdown content to HTML using mistune.

    Never raises: if the parser fails, a basic regex conversion is used
    instead and a warning is logged.

    Args:
        md_content: Markdown-formatted text
        sanitize: Whether to sanitize HTML output (default True)

    Returns:
        HTML-formatted text suitable for Anki
    """
    if not md_content or not md_content.strip():
        return md_content

    try:
        converter = _create_mistune_converter()
        result = converter(md_content)
        html: str = result if isinstance(result, str) else str(result)
    except Exception as e:
        logger.warning("mistune_conversion_failed", error=str(e))
        html = _basic_markdown_to_html(md_content)

    html = html.strip()

    if sanitize:
        html = sanitize_html(html)

    return html


def _basic_markdown_to_html(md_content: str) -> str:
    """Basic Markdown to HTML conversion fallback."""
    html = md_content

    # Code blocks (must be first to avoid conflicts)
    html = re.sub(
        r"```(\w*)\n(.*?)\n```",
        lambda m: (
            f'<pre><code class="language-{m.group(1) or "text"}">'
            f"{escape_text(m.group(2))}</code></pre>"
        ),
        html,
        flags=re.DOTALL,
    )

    html = re.sub(r"`([^`]+)`", r'<code class="language-text">\1</code>', html)
    html = re.sub(r"\*\*([^*]+)\*\*", r"<strong>\1</strong>", html)
    html = re.sub(r"(?<!\*)\*([^*]+)\*(?!\*)", r"<em>\1</em>", html)

    html = re.sub(r"^- (.+)$", r"<li>\1</li>", html, flags=re.MULTILINE)
    html = re.sub(r"(<li>.*</li>\n?)+", r"<ul>\g<0></ul>", html)

    html = html.replace("\n\n", "</p><p>")
    html = html.replace("\n", "<br />\n")
    html = f"<p>{html}</p>"
    html = html.replace("<p></p>", "")

    return html


def sanitize_html(html: str) -> str:
    """
    Sanitize HTML using nh3.

    Args:
        html: Raw HTML string

    Returns:
        Sanitized HTML string
    """
    if not html:
        return html

    return nh3.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
        link_rel="noopener noreferrer",
    )


def get_pygments_css(style: str = "default") -> str:
    """
    Get CSS for Pygments syntax highlighting.

    Args:
        style: Pygments style name (default, monokai, github-dark, etc.)

    Returns:
        CSS string for the specified style
    """
    formatter = HtmlFormatter(style=style, cssclass="codehilite")
    result: str = formatter.get_style_defs()
    return result
