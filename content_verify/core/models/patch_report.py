"""
Patch audit models: what happened to each correction item of a record.
"""

from enum import Enum

from pydantic import BaseModel, Field


class PatchOutcome(str, Enum):
    """Result of applying a single correction item."""

    APPLIED = "applied"
    FALLBACK_APPLIED = "fallback_applied"
    SKIPPED_NO_REPLACEMENT = "skipped_no_replacement"
    SKIPPED_EMPTY_WORD = "skipped_empty_word"
    SKIPPED_OUT_OF_BOUNDS = "skipped_out_of_bounds"
    SKIPPED_MISMATCH = "skipped_mismatch"
    SKIPPED_NOT_FOUND = "skipped_not_found"


class PatchLogEntry(BaseModel):
    """
    One audited correction item.

    Attributes:
        position: Position as recorded in the item (schema-dependent unit)
        expected: Original word the item expects at that position
        replacement: Replacement that was (or would have been) spliced in
        outcome: What the engine did with the item
    """

    position: int
    expected: str
    replacement: str | None = None
    outcome: PatchOutcome


class PatchReport(BaseModel):
    """Ordered audit trail of a patch run, in application (descending position) order."""

    entries: list[PatchLogEntry] = Field(default_factory=list)

    def count(self, outcome: PatchOutcome) -> int:
        return sum(1 for entry in self.entries if entry.outcome == outcome)

    @property
    def applied(self) -> int:
        return self.count(PatchOutcome.APPLIED)

    @property
    def fallback_applied(self) -> int:
        return self.count(PatchOutcome.FALLBACK_APPLIED)

    @property
    def skipped(self) -> int:
        return len(self.entries) - self.applied - self.fallback_applied

    def summary(self) -> dict[str, int]:
        """Outcome counts keyed by outcome value (only non-zero counts)."""
        counts: dict[str, int] = {}
        for entry in self.entries:
            counts[entry.outcome.value] = counts.get(entry.outcome.value, 0) + 1
        return counts
