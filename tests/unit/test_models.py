"""
Unit tests for Pydantic models.
"""

import pytest
from pydantic import ValidationError

from content_verify.core.models import (
    ChecklistItem,
    Correction,
    PatchLogEntry,
    PatchOutcome,
    PatchReport,
    ProcessedContent,
    RawRecord,
    ReasonKind,
)


@pytest.mark.unit
class TestRawRecord:
    """Tests for RawRecord model"""

    def test_numeric_ids_coerced(self):
        record = RawRecord(record_id=1024, task_id=7, content="{}")
        assert record.record_id == "1024"
        assert record.task_id == "7"

    def test_immutable(self):
        record = RawRecord(record_id="1", content="{}")
        with pytest.raises(ValidationError):
            record.content = "changed"


@pytest.mark.unit
class TestCorrection:
    """Tests for the legacy correction item"""

    def test_aliases(self):
        item = Correction.model_validate(
            {"errtype": 3, "errword": "bad", "errdesc": "typo", "pos": 12, "level": 1, "corword": ["good"]}
        )
        assert item.error_type == 3
        assert item.error_word == "bad"
        assert item.description == "typo"
        assert item.position == 12
        assert item.candidates == ["good"]

    def test_field_names_accepted(self):
        item = Correction(error_word="bad", position=0, candidates=["good"])
        assert item.expected == "bad"

    def test_null_fields(self):
        item = Correction.model_validate({"errword": None, "corword": None, "errdesc": None})
        assert item.error_word == ""
        assert item.candidates == []
        assert item.replacement is None

    def test_replacement_skips_empty_candidates(self):
        item = Correction.model_validate({"errword": "a", "corword": ["", "b"]})
        assert item.replacement == "b"

    def test_unknown_fields_ignored(self):
        item = Correction.model_validate({"errword": "a", "extra": 1})
        assert not hasattr(item, "extra")


@pytest.mark.unit
class TestChecklistItem:
    """Tests for the revised checklist item"""

    def test_aliases(self):
        item = ChecklistItem.model_validate({
            "pos": 4,
            "len": 2,
            "word": "ab",
            "html_words": [{"text": "ab"}],
            "suggest": ["cd"],
            "explain": "typo",
            "error_type": {"code": 1, "name": "spelling"},
            "level": "high",
        })
        assert item.position == 4
        assert item.length == 2
        assert item.expected == "ab"
        assert item.replacement == "cd"
        assert item.explanation == "typo"
        assert item.error_type == {"code": 1, "name": "spelling"}

    def test_alternative_spellings(self):
        item = ChecklistItem.model_validate({"start": 1, "length": 1, "origin_word": "x", "suggestions": ["y"]})
        assert (item.position, item.length, item.word, item.suggestions) == (1, 1, "x", ["y"])

    def test_advisory_fields_kept_as_sent(self):
        item = ChecklistItem.model_validate({
            "word": "x",
            "error_type": 3,
            "source": 1,
            "html_words": "x",
            "level": None,
        })
        assert (item.error_type, item.source, item.html_words, item.level) == (3, 1, "x", None)
        assert item.expected == "x"

    def test_first_suggestion_authoritative(self):
        item = ChecklistItem.model_validate({"word": "x", "suggest": ["", "y"]})
        assert item.replacement is None


@pytest.mark.unit
class TestPatchReport:
    """Tests for PatchReport counters"""

    def test_counts(self):
        report = PatchReport(entries=[
            PatchLogEntry(position=3, expected="a", replacement="b", outcome=PatchOutcome.APPLIED),
            PatchLogEntry(position=2, expected="a", replacement="b", outcome=PatchOutcome.FALLBACK_APPLIED),
            PatchLogEntry(position=1, expected="a", outcome=PatchOutcome.SKIPPED_NO_REPLACEMENT),
            PatchLogEntry(position=0, expected="a", replacement="b", outcome=PatchOutcome.APPLIED),
        ])
        assert report.applied == 2
        assert report.fallback_applied == 1
        assert report.skipped == 1
        assert report.summary() == {"applied": 2, "fallback_applied": 1, "skipped_no_replacement": 1}


@pytest.mark.unit
class TestProcessedContent:
    """Tests for ProcessedContent model"""

    def test_defaults(self):
        result = ProcessedContent()
        assert len(result.id) == 36
        assert result.original_text == ""
        assert result.has_reason is False

    def test_set_reason(self):
        result = ProcessedContent(id="1", task_id="t").set_reason(ReasonKind.PAYLOAD_EMPTY, "payload empty")
        assert result.has_reason
        assert result.to_row() == ("1", "", "", "t", "payload empty")

    def test_assignment_validated(self):
        result = ProcessedContent()
        with pytest.raises(ValidationError):
            result.reason_kind = "not-a-kind"
