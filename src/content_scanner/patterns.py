"""Catalog of markup bloat patterns.

These substrings show up when content is pasted from design tools, word
processors and rich text editors without stripping formatting. Pasting as
plain text (Ctrl+Shift+V) avoids introducing them.

Review each finding in context before cleaning it up: sometimes only the
attribute should go (data-contrast="auto"), sometimes the attribute and its
value (onclick="..."), sometimes the whole element.
"""

from functools import lru_cache
from typing import NamedTuple


class BloatPattern(NamedTuple):
    """A catalog entry with the tool family that produces it."""

    pattern: str
    source: str
    description: str


MICROSOFT_OFFICE = "Microsoft Office"
FIGMA = "Figma"
GOOGLE_DOCS = "Google Docs"
PROSEMIRROR = "ProseMirror"
INLINE_HANDLER = "Inline event handler"
GENERIC_DATA = "Generic data attribute"


MARKUP_BLOAT_PATTERNS: tuple[BloatPattern, ...] = (
    # Microsoft Office attributes
    BloatPattern("mso-", MICROSOFT_OFFICE, "Office style declaration"),
    BloatPattern("paraid=", MICROSOFT_OFFICE, "Word paragraph id"),
    BloatPattern("paraeid=", MICROSOFT_OFFICE, "Word paragraph edit id"),
    BloatPattern("o:gfxdata=", MICROSOFT_OFFICE, "Embedded Office graphics data"),
    BloatPattern("o:p", MICROSOFT_OFFICE, "Office paragraph element"),
    BloatPattern("w:st=", MICROSOFT_OFFICE, "Word smart tag"),
    BloatPattern("w:wrap=", MICROSOFT_OFFICE, "Word text wrapping attribute"),
    BloatPattern("w:wrap>", MICROSOFT_OFFICE, "Word text wrapping element"),
    BloatPattern("v:shapes=", MICROSOFT_OFFICE, "VML shape reference"),
    BloatPattern("v:imagedata", MICROSOFT_OFFICE, "VML image data"),
    BloatPattern("xml:namespace", MICROSOFT_OFFICE, "Inline XML namespace declaration"),
    BloatPattern("xml:lang", MICROSOFT_OFFICE, "XML language attribute"),
    BloatPattern("data-ccp", MICROSOFT_OFFICE, "Office clipboard property"),
    BloatPattern("data-contrast", MICROSOFT_OFFICE, "Office contrast setting"),
    BloatPattern("data-font", MICROSOFT_OFFICE, "Office font metadata"),
    BloatPattern("data-listid", MICROSOFT_OFFICE, "Office list id"),
    BloatPattern("data-leveltext", MICROSOFT_OFFICE, "Office list level text"),
    BloatPattern("data-defn-prop", MICROSOFT_OFFICE, "Office list definition properties"),
    # Figma attributes
    BloatPattern("figma=", FIGMA, "Figma clipboard payload"),
    BloatPattern("figmeta=", FIGMA, "Figma clipboard metadata"),
    BloatPattern("data-figma", FIGMA, "Figma data attribute"),
    # Google Docs attributes
    BloatPattern("google-", GOOGLE_DOCS, "Google Docs class or id"),
    BloatPattern("docs-", GOOGLE_DOCS, "Google Docs internal marker"),
    # Rich text editors (Evernote and other note apps)
    BloatPattern("data-pm", PROSEMIRROR, "ProseMirror slice metadata"),
    # Inline event handlers
    BloatPattern("onclick=", INLINE_HANDLER, "Inline click handler"),
    BloatPattern("onload=", INLINE_HANDLER, "Inline load handler"),
    BloatPattern("onerror=", INLINE_HANDLER, "Inline error handler"),
    BloatPattern("onmouseover=", INLINE_HANDLER, "Inline mouseover handler"),
    BloatPattern("onmouseout=", INLINE_HANDLER, "Inline mouseout handler"),
    # Anything else carrying data attributes
    BloatPattern("data-", GENERIC_DATA, "Data attribute"),
)

PATTERN_SOURCES: dict[str, str] = {p.pattern: p.source for p in MARKUP_BLOAT_PATTERNS}


def pattern_strings(catalog: tuple[BloatPattern, ...] = MARKUP_BLOAT_PATTERNS) -> tuple[str, ...]:
    """Return the catalog's substrings in catalog order."""
    return tuple(entry.pattern for entry in catalog)


@lru_cache(maxsize=None)
def generic_pattern_specifics(patterns: tuple[str, ...]) -> dict[str, tuple[str, ...]]:
    """
    Map each generic pattern to the catalog patterns it prefixes.

    A pattern is generic when another pattern starts with it, e.g. 'data-'
    prefixes 'data-contrast' and 'data-figma'. Comparison is case-folded.
    Patterns that prefix nothing are absent from the mapping.
    """
    mapping: dict[str, tuple[str, ...]] = {}

    for pattern in patterns:
        folded = pattern.lower()
        specifics = tuple(
            other
            for other in patterns
            if other.lower() != folded and other.lower().startswith(folded)
        )
        if specifics:
            mapping[pattern] = specifics

    return mapping


def is_generic(pattern: str, patterns: tuple[str, ...]) -> bool:
    """Whether pattern prefixes another pattern of the catalog."""
    return pattern in generic_pattern_specifics(patterns)
