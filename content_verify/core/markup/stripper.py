"""
Reviewer markup stripping.

The review tool marks error spans inline. The legacy schema highlights them
with a background-color style and may embed reviewer notes such as
``【错别字错误】`` inside the span; the revised schema wraps them in a span
carrying an error class. Both rules are whole-text regex substitutions.
"""

import re

from content_verify.core.models import SchemaVariant

DEFAULT_LEGACY_STYLE = "background-color"
DEFAULT_REVISED_CLASS = "error"

# Any tag, used to flatten the inside of a legacy highlight span
TAG_PATTERN = re.compile(r"<[^>]*>")

# Reviewer notes like 【语法错误】 embedded in a highlight span
REVIEWER_NOTE_PATTERN = re.compile(r"【[^【】]*错误】")


def _legacy_span_pattern(style_keyword: str) -> re.Pattern:
    return re.compile(
        r"<span\b[^>]*\bstyle\s*=\s*([\"'])[^\"']*"
        + re.escape(style_keyword)
        + r"[^\"']*\1[^>]*>(?P<inner>.*?)</span\s*>",
        re.IGNORECASE | re.DOTALL,
    )


def _revised_span_pattern(span_class: str) -> re.Pattern:
    return re.compile(
        r"<span\b[^>]*\bclass\s*=\s*([\"'])(?:[^\"']*\s)?"
        + re.escape(span_class)
        + r"(?:\s[^\"']*)?\1[^>]*>(?P<inner>.*?)</span\s*>",
        re.IGNORECASE | re.DOTALL,
    )


class MarkupStripper:
    """
    Removes reviewer markup for either schema flavor.

    Args:
        legacy_style: Style keyword identifying legacy highlight spans
        revised_class: Class name identifying revised wrapper spans
    """

    def __init__(
        self,
        legacy_style: str = DEFAULT_LEGACY_STYLE,
        revised_class: str = DEFAULT_REVISED_CLASS,
    ):
        self.legacy_style = legacy_style
        self.revised_class = revised_class
        self._legacy_span = _legacy_span_pattern(legacy_style)
        self._revised_span = _revised_span_pattern(revised_class)

    def strip_legacy(self, text: str) -> str:
        """
        Replace each highlight span with its cleaned inner text.

        Nested tags and reviewer notes inside the span are dropped; text
        outside highlight spans is untouched.
        """
        if not text:
            return text

        def _clean(match: re.Match) -> str:
            inner = TAG_PATTERN.sub("", match.group("inner"))
            return REVIEWER_NOTE_PATTERN.sub("", inner)

        return self._legacy_span.sub(_clean, text)

    def strip_revised(self, text: str) -> str:
        """
        Unwrap each error-class span, keeping its inner content verbatim.

        Repeats until no wrapper is left so that nested wrappers are fully
        removed and a second call is a no-op.
        """
        if not text:
            return text

        while True:
            text, count = self._revised_span.subn(lambda m: m.group("inner"), text)
            if count == 0:
                return text

    def strip(self, text: str, variant: SchemaVariant) -> str:
        """Strip with the rule matching ``variant``; unrecognized text is returned as-is."""
        if variant == SchemaVariant.LEGACY:
            return self.strip_legacy(text)
        if variant == SchemaVariant.REVISED:
            return self.strip_revised(text)
        return text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(legacy_style={self.legacy_style!r}, revised_class={self.revised_class!r})"


_default_stripper = MarkupStripper()


def strip_legacy_markup(text: str) -> str:
    """Legacy-flavor stripping with the default highlight style."""
    return _default_stripper.strip_legacy(text)


def strip_revised_markup(text: str) -> str:
    """Revised-flavor stripping with the default wrapper class."""
    return _default_stripper.strip_revised(text)
