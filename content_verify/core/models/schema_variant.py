"""
SchemaVariant tag for the annotation schema a record uses.
"""

from enum import Enum


class SchemaVariant(str, Enum):
    """Annotation schema of a decoded payload."""

    LEGACY = "legacy"  # checkresultstr + checkresultjson
    REVISED = "revised"  # replace_text + checklist
    UNRECOGNIZED = "unrecognized"
