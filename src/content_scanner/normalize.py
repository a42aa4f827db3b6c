"""Text normalization shared by search and audit.

Folds HTML entities and Unicode typography to plain ASCII equivalents so a
query typed on a keyboard matches content pasted from a word processor.
"""

import re

DEFAULT_CONTEXT_SIZE = 100

# Order matters: whitespace rules run last so entity-to-space
# substitutions are collapsed too.
_REPLACEMENTS: list[tuple[re.Pattern, str]] = [
    # Quotes
    (re.compile(r"&quot;", re.IGNORECASE), '"'),
    (re.compile(r"&apos;", re.IGNORECASE), "'"),
    (re.compile(r"&#39;", re.IGNORECASE), "'"),
    (re.compile("[\u2018\u2019]"), "'"),
    (re.compile("[\u201c\u201d]"), '"'),
    # Common entities
    (re.compile(r"&pound;", re.IGNORECASE), "£"),
    (re.compile(r"&euro;", re.IGNORECASE), "€"),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
    (re.compile(r"&lt;", re.IGNORECASE), "<"),
    (re.compile(r"&gt;", re.IGNORECASE), ">"),
    # Dashes
    (re.compile(r"&ndash;", re.IGNORECASE), "-"),
    (re.compile(r"&mdash;", re.IGNORECASE), "-"),
    (re.compile("[\u2013\u2014]"), "-"),
    # Whitespace
    (re.compile(r"&nbsp;", re.IGNORECASE), " "),
    (re.compile("\u00a0"), " "),
    (re.compile(r"\s+"), " "),
]


def normalize_text(text: str) -> str:
    """Return the canonical comparable form of text.

    Passes repeat until the text is stable, so double-encoded entities such as
    ``&amp;quot;`` fold all the way and normalizing twice is a no-op.
    """
    while True:
        folded = text
        for pattern, replacement in _REPLACEMENTS:
            folded = pattern.sub(replacement, folded)
        if folded == text:
            return folded
        text = folded


def fold_case(text: str) -> str:
    """Lowercase text without changing its length.

    Characters whose lowercase form is longer than one character (e.g. U+0130)
    are kept as-is so offsets in the folded string index the original.
    """
    folded = text.lower()
    if len(folded) == len(text):
        return folded
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)


def create_context_snippet(
    normalized_text: str,
    match_index: int,
    match_length: int,
    context_size: int = DEFAULT_CONTEXT_SIZE,
) -> str:
    """Excerpt normalized_text around a match.

    Args:
        normalized_text: The normalized text to extract from.
        match_index: Start offset of the match.
        match_length: Length of the match.
        context_size: Characters to include on each side of the match.

    Returns:
        The excerpt, with "..." prefixed/suffixed where it was clipped.
    """
    context_start = max(0, match_index - context_size)
    context_end = min(len(normalized_text), match_index + match_length + context_size)

    snippet = normalized_text[context_start:context_end]

    if context_start > 0:
        snippet = "..." + snippet
    if context_end < len(normalized_text):
        snippet = snippet + "..."

    return snippet
