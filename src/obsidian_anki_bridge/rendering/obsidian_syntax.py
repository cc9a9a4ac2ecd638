"""Rewrite Obsidian-only markup into portable HTML.

Stages run in a fixed order: wikilinks, image embeds, callouts, then
Markdown. Each stage leaves text it does not recognise untouched, so a
malformed construct passes through literally.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from .markdown_converter import convert_markdown_to_html

if TYPE_CHECKING:
    from ..models import Flashcard

# [[target]] or [[target|alias]], but not ![[embed]]
_WIKILINK_PATTERN = re.compile(r"(?<!!)\[\[([^\]|]+)(?:\|([^\]]+))?\]\]")
_IMAGE_EMBED_PATTERN = re.compile(r"!\[\[([^\]]+)\]\]")
_CALLOUT_PATTERN = re.compile(r"^>\s*\[!(\w+)\][+-]?\s*(.*)$")

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

_HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}


@dataclass(frozen=True)
class RenderContext:
    """Vault details needed while rendering a card."""

    vault_name: str
    vault_path: Path | None = None


def escape_html(text: str) -> str:
    """Escape the five HTML special characters."""
    return "".join(_HTML_ENTITIES.get(c, c) for c in text)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_obsidian_url(vault_name: str, file: str, line: int | None = None) -> str:
    """Build an ``obsidian://open`` deep link."""
    url = (
        f"obsidian://open?vault={encode_uri_component(vault_name)}"
        f"&file={encode_uri_component(file)}"
    )
    if line is not None:
        url += f"&line={line}"
    return url


def build_source_link(card: "Flashcard", vault_name: str) -> str:
    """The "View in Obsidian" back-link shown under the answer."""
    url = build_obsidian_url(vault_name, card.source_file, card.source_line)
    return f'<a href="{url}">View in Obsidian</a>'


def convert_wikilinks(text: str, vault_name: str) -> str:
    """Convert ``[[wikilinks]]`` to anchors pointing back into the vault.

    The label is the alias when present, otherwise the text after the last
    ``#`` of a heading reference, otherwise the raw target.
    """

    def replace(match: re.Match[str]) -> str:
        target, alias = match.group(1), match.group(2)
        if alias:
            label = alias
        elif "#" in target:
            label = target.rsplit("#", 1)[-1]
        else:
            label = target
        url = build_obsidian_url(vault_name, target)
        return f'<a href="{url}">{escape_html(label)}</a>'

    return _WIKILINK_PATTERN.sub(replace, text)


def convert_images(text: str) -> str:
    """Convert ``![[image]]`` embeds to ``<img>`` tags referencing the path.

    Media is not copied into Anki. A ``|size`` suffix is dropped.
    """

    def replace(match: re.Match[str]) -> str:
        image_path = match.group(1).split("|", 1)[0].strip()
        escaped = escape_html(image_path)
        return f'<img src="{escaped}" alt="{escaped}" style="max-width: 100%;">'

    return _IMAGE_EMBED_PATTERN.sub(replace, text)


def convert_callouts(text: str) -> str:
    """Wrap ``> [!type] title`` blockquotes in a styled callout container.

    The quoted lines are left for the Markdown stage to render as a
    blockquote inside the container.
    """
    lines = text.split("\n")
    out: list[str] = []
    i = 0
    while i < len(lines):
        match = _CALLOUT_PATTERN.match(lines[i])
        if not match:
            out.append(lines[i])
            i += 1
            continue

        callout_type = match.group(1).lower()
        title = match.group(2).strip()
        title_html = f"<strong>{escape_html(title)}</strong><br>" if title else ""
        out.append(f'<div class="callout callout-{callout_type}">{title_html}')
        out.append("")
        i += 1
        while i < len(lines) and lines[i].lstrip().startswith(">"):
            out.append(lines[i])
            i += 1
        out.append("")
        out.append("</div>")
        if i < len(lines):
            out.append("")

    return "\n".join(out)


def process_obsidian_syntax(text: str, context: RenderContext) -> str:
    """Render card text to sanitized HTML. Never raises."""
    result = convert_wikilinks(text, context.vault_name)
    result = convert_images(result)
    result = convert_callouts(result)
    return convert_markdown_to_html(result)
