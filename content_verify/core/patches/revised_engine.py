"""
Patch engine for revised ``checklist`` items.
"""

from content_verify.core.models import ChecklistItem, SchemaVariant

from .base_engine import BasePatchEngine


class RevisedPatchEngine(BasePatchEngine):
    """
    Applies revised checklist items.

    Positions and lengths are codepoint offsets into the marked-result text
    with its wrapper spans already stripped. There is no fallback: an item
    that does not match exactly is skipped.
    """

    item_model = ChecklistItem

    @property
    def variant(self) -> SchemaVariant:
        return SchemaVariant.REVISED

    def resolve_span(self, text: str, item: ChecklistItem) -> tuple[int, int] | None:
        return item.position, item.position + item.length
