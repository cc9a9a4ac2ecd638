"""The ObsidianFlashcard note type: fields, template and stylesheet."""

from ..models import Flashcard
from ..rendering.markdown_converter import get_pygments_css
from ..rendering.obsidian_syntax import build_source_link

MODEL_NAME = "ObsidianFlashcard"
FIELD_NAMES = ["Front", "Back", "SourceLink"]

UID_TAG_PREFIX = "obsidian-uid::"

CARD_TEMPLATES = [
    {
        "Name": "Card 1",
        "Front": "{{Front}}",
        "Back": (
            '{{FrontSide}}<hr id="answer">{{Back}}'
            '<div class="source-link">{{SourceLink}}</div>'
        ),
    }
]

_BASE_CSS = """
.card {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
  font-size: 18px;
  text-align: left;
  color: #333;
  background-color: #fff;
  padding: 20px;
  max-width: 800px;
  margin: 0 auto;
  line-height: 1.6;
}
.card h1, .card h2, .card h3 { text-align: center; margin-bottom: 1em; }
.card ul, .card ol { text-align: left; padding-left: 2em; }
.card li { margin-bottom: 0.5em; }
.card strong { color: #1a1a1a; }
.card code {
  background: #f4f4f4;
  padding: 2px 6px;
  border-radius: 3px;
  font-family: 'SF Mono', Monaco, monospace;
}
.card pre { background: #f4f4f4; padding: 12px; border-radius: 6px; overflow-x: auto; }
.card blockquote { border-left: 4px solid #ddd; margin: 1em 0; padding-left: 1em; color: #666; }
.card hr { border: none; border-top: 1px solid #ddd; margin: 1.5em 0; }
.card table { border-collapse: collapse; margin: 1em auto; }
.card th, .card td { border: 1px solid #ddd; padding: 4px 8px; }

/* Callouts */
.callout { padding: 12px 16px; margin: 1em 0; border-radius: 6px; border-left: 4px solid; }
.callout-tip { background: #e8f5e9; border-color: #4caf50; }
.callout-info { background: #e3f2fd; border-color: #2196f3; }
.callout-warning { background: #fff3e0; border-color: #ff9800; }
.callout-danger, .callout-error { background: #ffebee; border-color: #f44336; }
.callout-note { background: #f3e5f5; border-color: #9c27b0; }

.source-link { font-size: 12px; color: #888; margin-top: 20px; text-align: center; }
.source-link a { color: #666; text-decoration: none; }
.source-link a:hover { text-decoration: underline; }

/* Dark mode */
.night_mode .card { background-color: #1e1e1e; color: #e0e0e0; }
.night_mode .card code, .night_mode .card pre { background: #2d2d2d; }
"""


def get_model_css() -> str:
    """Stylesheet for the note type, including code highlighting classes."""
    return _BASE_CSS + "\n/* Code highlighting */\n" + get_pygments_css()


def uid_tag(uid: str) -> str:
    """The tag that carries a card's identity inside Anki."""
    return f"{UID_TAG_PREFIX}{uid}"


def is_uid_tag(tag: str) -> bool:
    return tag.startswith(UID_TAG_PREFIX)


def build_note_fields(card: Flashcard, vault_name: str) -> dict[str, str]:
    """Field values for ``card`` in field order."""
    return {
        "Front": card.front,
        "Back": card.back,
        "SourceLink": build_source_link(card, vault_name),
    }


def desired_tags(card: Flashcard) -> list[str]:
    """The card's own tags plus its identity tag."""
    tags = [t for t in card.tags if not is_uid_tag(t)]
    tags.append(uid_tag(card.uid))
    return tags
