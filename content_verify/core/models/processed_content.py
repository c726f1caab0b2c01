"""
ProcessedContent model representing the reconstructed original/modified pair.
"""

import uuid
from enum import Enum

from pydantic import BaseModel, Field

from .patch_report import PatchReport
from .schema_variant import SchemaVariant


class ReasonKind(str, Enum):
    """
    Kind of per-record condition attached to a result.

    None of these abort a batch. ``no_corrections_needed`` is informational
    and ``checklist_missing`` marks a degraded success.
    """

    PAYLOAD_EMPTY = "payload_empty"
    DECODE_FAILED = "decode_failed"
    FIELD_MISSING = "field_missing"
    SCHEMA_UNRECOGNIZED = "schema_unrecognized"
    CORRECTIONS_EMPTY = "corrections_empty"
    CORRECTIONS_DECODE_FAILED = "corrections_decode_failed"
    NO_CORRECTIONS_NEEDED = "no_corrections_needed"
    CHECKLIST_MISSING = "checklist_missing"


class ProcessedContent(BaseModel):
    """
    One processed record, persisted whether or not a reason is set.

    Attributes:
        id: Carried-forward source id, or a generated UUID
        original_text: Plain-text original
        modified_text: Plain-text corrected text (empty when reconstruction did not occur)
        task_id: Originating task identifier (persisted as pid)
        reason: Human-readable failure/skip reason
        reason_kind: Machine-readable kind of ``reason``
        variant: Schema the record was processed as
        patch_report: Per-item audit trail when corrections were applied
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    original_text: str = ""
    modified_text: str = ""
    task_id: str = ""
    reason: str | None = None
    reason_kind: ReasonKind | None = None
    variant: SchemaVariant = SchemaVariant.UNRECOGNIZED
    patch_report: PatchReport | None = None

    def set_reason(self, kind: ReasonKind, message: str) -> "ProcessedContent":
        self.reason_kind = kind
        self.reason = message
        return self

    @property
    def has_reason(self) -> bool:
        return bool(self.reason)

    def to_row(self) -> tuple[str, str, str, str, str | None]:
        """Row for the processed_content table: (id, original_text, modified_text, pid, error_reason)."""
        return (self.id, self.original_text, self.modified_text, self.task_id, self.reason)

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "id": "1024",
                "original_text": "bad text",
                "modified_text": "good text",
                "task_id": "430aa1b775c143e6bfcf1d5f78c115ce",
                "reason": None,
                "variant": "legacy",
            }
        }
