"""
Base positional patch engine.

Engines apply an ordered list of correction items to a text. Each item names
a position, the original word expected there and its replacement
candidates. Items are applied from the highest position to the lowest, so a
splice never shifts the offsets of the items still to be applied.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ValidationError

from content_verify.core.models import PatchLogEntry, PatchOutcome, PatchReport, SchemaVariant
from content_verify.core.schema.fields import ItemListDecodeError, load_item_list


class PatchResult(BaseModel):
    """Patched text plus the audit trail of every item."""

    text: str
    report: PatchReport


class BasePatchEngine(ABC):
    """
    Abstract base class for the schema-specific patch engines.

    Subclasses declare the item model and resolve an item to a codepoint
    span of the current text.
    """

    item_model: type[BaseModel]

    @property
    @abstractmethod
    def variant(self) -> SchemaVariant:
        """Return the schema variant this engine handles."""
        pass

    @abstractmethod
    def resolve_span(self, text: str, item: Any) -> tuple[int, int] | None:
        """
        Map an item to a ``(start, end)`` codepoint range of ``text``.

        Returns:
            The range, or None when the position cannot be resolved
        """
        pass

    def on_miss(
        self, text: str, item: Any, replacement: str, outcome: PatchOutcome
    ) -> tuple[str, PatchOutcome]:
        """Hook for items that failed the bounds or content check; default leaves text as-is."""
        return text, outcome

    def decode(self, items: Any) -> list[Any]:
        """
        Decode a raw item list (JSON string, list of dicts or list of models).

        Raises:
            ItemListDecodeError: If the list or any item cannot be decoded
        """
        decoded = []
        for idx, entry in enumerate(load_item_list(items)):
            if isinstance(entry, self.item_model):
                decoded.append(entry)
                continue
            if not isinstance(entry, dict):
                raise ItemListDecodeError(f"item {idx} is not an object")
            try:
                decoded.append(self.item_model.model_validate(entry))
            except ValidationError as e:
                first = e.errors()[0]
                location = ".".join(str(part) for part in first["loc"])
                raise ItemListDecodeError(f"item {idx} field {location}: {first['msg']}") from e
        return decoded

    def run(self, text: str, items: Any) -> PatchResult:
        """
        Validate and apply ``items`` to ``text``.

        Items that fail a check are skipped individually; the rest still apply.

        Args:
            text: Text the item positions refer to
            items: Raw or decoded item list

        Returns:
            PatchResult with the spliced text and one log entry per item

        Raises:
            ItemListDecodeError: If the item list cannot be decoded
        """
        corrections = self.decode(items)
        report = PatchReport()

        # stable: items sharing a position keep their listed order
        for item in sorted(corrections, key=lambda c: c.position, reverse=True):
            text, outcome = self._apply_one(text, item)
            report.entries.append(
                PatchLogEntry(
                    position=item.position,
                    expected=item.expected,
                    replacement=item.replacement,
                    outcome=outcome,
                )
            )

        return PatchResult(text=text, report=report)

    def apply(self, text: str, items: Any) -> str:
        """Return only the patched text of :meth:`run`."""
        return self.run(text, items).text

    def _apply_one(self, text: str, item: Any) -> tuple[str, PatchOutcome]:
        replacement = item.replacement
        if replacement is None:
            return text, PatchOutcome.SKIPPED_NO_REPLACEMENT
        if not item.expected:
            return text, PatchOutcome.SKIPPED_EMPTY_WORD

        span = self.resolve_span(text, item)
        if span is None or span[0] < 0 or span[1] > len(text):
            return self.on_miss(text, item, replacement, PatchOutcome.SKIPPED_OUT_OF_BOUNDS)

        start, end = span
        if text[start:end] != item.expected:
            return self.on_miss(text, item, replacement, PatchOutcome.SKIPPED_MISMATCH)

        return text[:start] + replacement + text[end:], PatchOutcome.APPLIED

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(variant={self.variant.value})"
