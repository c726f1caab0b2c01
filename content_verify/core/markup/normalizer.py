"""
Plain-text normalization for storage.
"""

import html

from .stripper import TAG_PATTERN


def to_plain_text(text: str | None) -> str:
    """
    Decode HTML entities, then remove every remaining tag.

    Entities are decoded first, so an escaped tag such as ``&lt;b&gt;`` is
    removed as well. Whitespace is left as-is.

    Args:
        text: Marked-up text (may be None)

    Returns:
        Storage-ready plain text
    """
    if not text:
        return ""

    decoded = html.unescape(text)
    return TAG_PATTERN.sub("", decoded)
