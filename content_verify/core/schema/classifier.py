"""
Schema classification for decoded review payloads.

Revised records (replace_text + checklist) take precedence over legacy
records (checkresultstr + checkresultjson) whenever their marked-result text
is non-empty.
"""

from typing import Any

from pydantic import BaseModel, Field

from content_verify.core.models import SchemaVariant
from content_verify.core.settings import FieldAliases

from .fields import decode_item_list, lookup_field, lookup_text


class Classification(BaseModel):
    """
    Outcome of classifying one data object (ephemeral).

    Attributes:
        variant: Schema variant by the strict classification rule
        route: Variant the processor dispatches on. Equals ``variant`` except
            when the legacy marked-source field exists but its corrections
            list is absent, empty or undecodable: such records still take the
            legacy path so that the precise reason gets recorded.
        text_key: Resolved key of the marked text for ``route``
        items_key: Resolved key of the correction list for ``route``
        legacy_eligible: Legacy marked source and a non-empty corrections list
        revised_eligible: Revised marked result and a non-empty checklist
        missing_fields: Canonical names of the fields that were not found
    """

    variant: SchemaVariant
    route: SchemaVariant
    text_key: str | None = None
    items_key: str | None = None
    legacy_eligible: bool = False
    revised_eligible: bool = False
    missing_fields: list[str] = Field(default_factory=list)

    @property
    def eligible(self) -> bool:
        """True when either schema is complete with a non-empty list."""
        return self.legacy_eligible or self.revised_eligible


class SchemaClassifier:
    """
    Decides which annotation schema a data object uses.
    """

    def __init__(self, fields: FieldAliases | None = None):
        """
        Initialize classifier.

        Args:
            fields: Field name spellings (defaults to the known historical ones)
        """
        self.fields = fields or FieldAliases()

    def classify(self, data: dict[str, Any]) -> Classification:
        """
        Classify an unwrapped data object.

        Args:
            data: The ``data`` object of a decoded payload

        Returns:
            Classification for the record
        """
        fields = self.fields

        revised_text_key, revised_text = lookup_text(data, fields.marked_result)
        checklist_key, checklist = lookup_field(data, fields.checklist)
        legacy_text_key, _ = lookup_text(data, fields.marked_source)
        if legacy_text_key is None:
            legacy_text_key, _ = lookup_field(data, fields.marked_source)
        corrections_key, corrections = lookup_field(data, fields.corrections)

        revised_eligible = bool(
            revised_text_key is not None
            and checklist_key is not None
            and decode_item_list(checklist)
        )
        legacy_eligible = bool(
            legacy_text_key is not None
            and corrections_key is not None
            and decode_item_list(corrections)
        )

        if revised_text:
            return Classification(
                variant=SchemaVariant.REVISED,
                route=SchemaVariant.REVISED,
                text_key=revised_text_key,
                items_key=checklist_key,
                legacy_eligible=legacy_eligible,
                revised_eligible=revised_eligible,
            )

        if legacy_text_key is not None:
            return Classification(
                variant=SchemaVariant.LEGACY if legacy_eligible else SchemaVariant.UNRECOGNIZED,
                route=SchemaVariant.LEGACY,
                text_key=legacy_text_key,
                items_key=corrections_key,
                legacy_eligible=legacy_eligible,
                revised_eligible=revised_eligible,
            )

        missing = [fields.marked_result[0], fields.marked_source[0]]
        if checklist_key is None:
            missing.append(fields.checklist[0])
        if corrections_key is None:
            missing.append(fields.corrections[0])

        return Classification(
            variant=SchemaVariant.UNRECOGNIZED,
            route=SchemaVariant.UNRECOGNIZED,
            legacy_eligible=legacy_eligible,
            revised_eligible=revised_eligible,
            missing_fields=missing,
        )
