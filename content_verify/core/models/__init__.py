"""
Core data models for the content verification log processor.

All models use Pydantic for runtime validation and type safety.
"""

from .corrections import ChecklistItem, Correction
from .patch_report import PatchLogEntry, PatchOutcome, PatchReport
from .processed_content import ProcessedContent, ReasonKind
from .raw_record import RawRecord
from .schema_variant import SchemaVariant

__all__ = [
    "RawRecord",
    "SchemaVariant",
    "Correction",
    "ChecklistItem",
    "PatchOutcome",
    "PatchLogEntry",
    "PatchReport",
    "ReasonKind",
    "ProcessedContent",
]
