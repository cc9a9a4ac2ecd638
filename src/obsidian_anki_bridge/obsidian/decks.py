"""Deck name resolution from frontmatter."""

from .frontmatter import FlashcardFrontmatter

DECK_SEPARATOR = "::"

SUBJECT_TO_DECK: dict[str, str] = {
    "MATH": "Mathematics",
    "BIOL": "Biology",
    "PHYS": "Physics",
    "CHEM": "Chemistry",
    "ENLA": "EnglishLanguage",
    "ENLI": "EnglishLiterature",
    "HIST": "History",
    "GEOG": "Geography",
    "COMP": "Computing",
    "SPAN": "Spanish",
    "LATN": "Latin",
    "CITI": "Citizenship",
}


def subject_deck_name(code: str) -> str:
    """Deck segment for a subject code, falling back to the code itself."""
    return SUBJECT_TO_DECK.get(code.strip().upper(), code.strip())


def resolve_deck(frontmatter: FlashcardFrontmatter, deck_prefix: str) -> str:
    """Resolve the Anki deck for a document.

    An explicit ``anki_deck`` wins verbatim. Otherwise the deck is built as
    ``prefix::scope::subject``, skipping absent segments.
    """
    if frontmatter.anki_deck:
        return frontmatter.anki_deck

    parts = [deck_prefix]
    if frontmatter.scope:
        parts.append(frontmatter.scope.strip())
    if frontmatter.subject:
        parts.append(subject_deck_name(frontmatter.subject))
    return DECK_SEPARATOR.join(p for p in parts if p)
