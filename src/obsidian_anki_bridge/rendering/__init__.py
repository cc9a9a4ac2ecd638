"""Markdown and Obsidian syntax rendering."""

from .markdown_converter import convert_markdown_to_html, sanitize_html
from .obsidian_syntax import (
    RenderContext,
    build_obsidian_url,
    build_source_link,
    convert_callouts,
    convert_images,
    convert_wikilinks,
    escape_html,
    process_obsidian_syntax,
)

__all__ = [
    "RenderContext",
    "build_obsidian_url",
    "build_source_link",
    "convert_callouts",
    "convert_images",
    "convert_markdown_to_html",
    "convert_wikilinks",
    "escape_html",
    "process_obsidian_syntax",
    "sanitize_html",
]
