"""
Content processor: reconstructs the original and corrected text of one
verification record.

Flow: decode payload → unwrap data → classify → strip → patch → strip → normalize

Every record yields exactly one ProcessedContent. Content problems are
recorded as a reason on the result and never raised.
"""

import json
from typing import Any, Iterable, Iterator

from content_verify.core.markup import MarkupStripper, to_plain_text
from content_verify.core.models import ProcessedContent, RawRecord, ReasonKind, SchemaVariant
from content_verify.core.patches import create_engine
from content_verify.core.schema import Classification, ItemListDecodeError, SchemaClassifier, unwrap_payload
from content_verify.core.settings import ProcessorSettings
from content_verify.observability.logger import get_logger

logger = get_logger(__name__)


class ContentProcessor:
    """
    Turns RawRecords into ProcessedContent.

    Holds no per-record state, so one instance can be shared across threads
    or rebuilt per Spark partition.
    """

    def __init__(self, settings: ProcessorSettings | None = None):
        """
        Initialize content processor.

        Args:
            settings: Processing options (defaults are used when omitted)
        """
        self.settings = settings or ProcessorSettings()
        self.classifier = SchemaClassifier(self.settings.fields)
        self.stripper = MarkupStripper(
            legacy_style=self.settings.legacy_style,
            revised_class=self.settings.revised_class,
        )
        self.legacy_engine = create_engine(SchemaVariant.LEGACY, self.settings)
        self.revised_engine = create_engine(SchemaVariant.REVISED, self.settings)

    def process(self, record: RawRecord) -> ProcessedContent:
        """
        Process one record.

        Args:
            record: Source record

        Returns:
            ProcessedContent, with ``reason``/``reason_kind`` set when the
            record was skipped, failed or only partially reconstructed
        """
        result = ProcessedContent(task_id=record.task_id)
        if record.record_id is not None:
            result.id = record.record_id

        self._process_into(record, result)

        if result.reason:
            logger.debug(
                f"Record {result.id}: {result.reason}",
                extra={
                    "task_id": result.task_id,
                    "reason_kind": result.reason_kind.value if result.reason_kind else None,
                    "variant": result.variant.value,
                },
            )
        if result.patch_report and result.patch_report.fallback_applied:
            logger.debug(
                f"Record {result.id}: {result.patch_report.fallback_applied} correction(s) "
                f"applied by first-occurrence fallback"
            )

        return result

    def process_many(self, records: Iterable[RawRecord]) -> Iterator[ProcessedContent]:
        """Process records lazily, one result per record."""
        for record in records:
            yield self.process(record)

    def _process_into(self, record: RawRecord, result: ProcessedContent) -> None:
        content = record.content
        if content is None or not content.strip():
            result.set_reason(ReasonKind.PAYLOAD_EMPTY, "payload empty")
            return

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            result.set_reason(ReasonKind.DECODE_FAILED, f"JSON decode failed: {e}")
            return

        if not isinstance(document, dict):
            result.set_reason(
                ReasonKind.DECODE_FAILED,
                f"JSON decode failed: expected an object, got {type(document).__name__}",
            )
            return

        data = unwrap_payload(document)
        classification = self.classifier.classify(data)
        result.variant = classification.route

        if classification.route == SchemaVariant.REVISED:
            self._process_revised(data, classification, result)
        elif classification.route == SchemaVariant.LEGACY:
            self._process_legacy(data, classification, result)
        else:
            missing = ", ".join(classification.missing_fields)
            result.set_reason(ReasonKind.SCHEMA_UNRECOGNIZED, f"schema unrecognized: missing {missing}")

    def _process_revised(
        self, data: dict[str, Any], classification: Classification, result: ProcessedContent
    ) -> None:
        # offsets refer to the text with wrapper spans removed
        stripped = self.stripper.strip_revised(data[classification.text_key])
        result.original_text = to_plain_text(stripped)

        if classification.items_key is None:
            result.modified_text = result.original_text
            result.set_reason(ReasonKind.CHECKLIST_MISSING, "checklist missing")
            return

        try:
            patched = self.revised_engine.run(stripped, data[classification.items_key])
        except ItemListDecodeError as e:
            result.set_reason(ReasonKind.CORRECTIONS_DECODE_FAILED, f"checklist decode failed: {e}")
            return

        result.patch_report = patched.report
        result.modified_text = to_plain_text(self.stripper.strip_revised(patched.text))
        if not patched.report.entries:
            result.set_reason(ReasonKind.NO_CORRECTIONS_NEEDED, "no errors")

    def _process_legacy(
        self, data: dict[str, Any], classification: Classification, result: ProcessedContent
    ) -> None:
        marked = data.get(classification.text_key)
        if not isinstance(marked, str) or not marked:
            field_name = self.settings.fields.marked_source[0]
            result.set_reason(ReasonKind.FIELD_MISSING, f"original field missing: {field_name}")
            return

        result.original_text = to_plain_text(self.stripper.strip_legacy(marked))

        corrections = data.get(classification.items_key) if classification.items_key else None
        if corrections is None or corrections == "":
            result.set_reason(ReasonKind.CORRECTIONS_EMPTY, "corrections field empty")
            return

        # legacy positions refer to the markup-inclusive text
        try:
            patched = self.legacy_engine.run(marked, corrections)
        except ItemListDecodeError as e:
            result.set_reason(ReasonKind.CORRECTIONS_DECODE_FAILED, f"corrections decode failed: {e}")
            return

        if not patched.report.entries:
            result.set_reason(ReasonKind.NO_CORRECTIONS_NEEDED, "no errors")
            return

        result.patch_report = patched.report
        result.modified_text = to_plain_text(self.stripper.strip_legacy(patched.text))
