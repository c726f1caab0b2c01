"""
Patch engine for legacy ``checkresultjson`` corrections.

Legacy positions are byte offsets into the UTF-8 encoded marked-source
text, while splicing works on codepoints.
"""

from typing import Literal

from content_verify.core.models import Correction, PatchOutcome, SchemaVariant

from .base_engine import BasePatchEngine


def byte_to_codepoint_offset(text: str, byte_offset: int) -> int | None:
    """
    Convert a UTF-8 byte offset into a codepoint offset of ``text``.

    Returns:
        The codepoint offset, or None if the offset is negative, past the
        end, or falls inside a multi-byte codepoint
    """
    if byte_offset < 0:
        return None

    encoded = text.encode("utf-8", errors="surrogatepass")
    if byte_offset > len(encoded):
        return None

    try:
        return len(encoded[:byte_offset].decode("utf-8", errors="surrogatepass"))
    except UnicodeDecodeError:
        return None


class LegacyPatchEngine(BasePatchEngine):
    """
    Applies legacy corrections.

    When an item fails its positional check and ``fallback_enabled`` is set,
    the first occurrence of the error word anywhere in the text is replaced
    instead. That match is logged as ``fallback_applied``; it can hit the
    wrong occurrence when the word recurs.
    """

    item_model = Correction

    def __init__(
        self,
        fallback_enabled: bool = True,
        position_unit: Literal["byte", "codepoint"] = "byte",
    ):
        """
        Initialize legacy engine.

        Args:
            fallback_enabled: Replace the first occurrence when the positional match fails
            position_unit: Unit of ``Correction.position``
        """
        if position_unit not in ("byte", "codepoint"):
            raise ValueError(f"position_unit must be 'byte' or 'codepoint', got {position_unit!r}")
        self.fallback_enabled = fallback_enabled
        self.position_unit = position_unit

    @property
    def variant(self) -> SchemaVariant:
        return SchemaVariant.LEGACY

    def resolve_span(self, text: str, item: Correction) -> tuple[int, int] | None:
        if self.position_unit == "byte":
            start = byte_to_codepoint_offset(text, item.position)
            if start is None:
                return None
        else:
            start = item.position
        return start, start + len(item.error_word)

    def on_miss(
        self, text: str, item: Correction, replacement: str, outcome: PatchOutcome
    ) -> tuple[str, PatchOutcome]:
        if not self.fallback_enabled:
            return text, outcome
        if item.error_word not in text:
            return text, PatchOutcome.SKIPPED_NOT_FOUND
        return text.replace(item.error_word, replacement, 1), PatchOutcome.FALLBACK_APPLIED
