"""
Markup stripping and plain-text normalization.
"""

from .normalizer import to_plain_text
from .stripper import MarkupStripper, strip_legacy_markup, strip_revised_markup

__all__ = [
    "MarkupStripper",
    "strip_legacy_markup",
    "strip_revised_markup",
    "to_plain_text",
]
