"""
Unit tests for the positional patch engines.

Includes property-based testing with hypothesis for right-to-left application.
"""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from content_verify.core.models import PatchOutcome, SchemaVariant
from content_verify.core.patches import (
    LegacyPatchEngine,
    RevisedPatchEngine,
    byte_to_codepoint_offset,
    create_engine,
)
from content_verify.core.schema import ItemListDecodeError
from content_verify.core.settings import ProcessorSettings


def checklist_item(pos, word, suggest):
    return {"pos": pos, "len": len(word), "word": word, "suggest": suggest}


@pytest.mark.unit
class TestByteOffsets:
    """Tests for byte_to_codepoint_offset"""

    def test_ascii(self):
        assert byte_to_codepoint_offset("hello", 3) == 3

    def test_multibyte(self):
        # each CJK character is three bytes in UTF-8
        assert byte_to_codepoint_offset("错误bad", 6) == 2

    def test_end_of_text(self):
        assert byte_to_codepoint_offset("错", 3) == 1

    def test_inside_codepoint(self):
        assert byte_to_codepoint_offset("错误", 2) is None

    def test_out_of_range(self):
        assert byte_to_codepoint_offset("abc", 4) is None
        assert byte_to_codepoint_offset("abc", -1) is None


@pytest.mark.unit
class TestRevisedEngine:
    """Tests for RevisedPatchEngine"""

    engine = RevisedPatchEngine()

    def test_single_item(self):
        result = self.engine.run("teh cat", [checklist_item(0, "teh", ["the"])])
        assert result.text == "the cat"
        assert result.report.applied == 1

    def test_items_applied_right_to_left_regardless_of_order(self):
        items = [
            checklist_item(0, "a", ["xxx"]),
            checklist_item(4, "c", ["zz"]),
            checklist_item(2, "b", [""]),
        ]
        result = self.engine.run("a b c", items)
        assert result.text == "xxx b zz"
        assert [entry.position for entry in result.report.entries] == [4, 2, 0]
        assert result.report.entries[1].outcome == PatchOutcome.SKIPPED_NO_REPLACEMENT

    def test_mismatch_skips_only_that_item(self):
        items = [checklist_item(0, "cat", ["dog"]), checklist_item(4, "sat", ["sit"])]
        result = self.engine.run("the sat", items)
        assert result.text == "the sit"
        assert result.report.count(PatchOutcome.SKIPPED_MISMATCH) == 1

    def test_out_of_bounds(self):
        items = [checklist_item(5, "xyz", ["q"]), checklist_item(-1, "a", ["b"])]
        result = self.engine.run("abcdef", items)
        assert result.text == "abcdef"
        assert result.report.count(PatchOutcome.SKIPPED_OUT_OF_BOUNDS) == 2

    def test_empty_word_skipped(self):
        result = self.engine.run("abc", [{"pos": 1, "len": 0, "word": "", "suggest": ["x"]}])
        assert result.text == "abc"
        assert result.report.entries[0].outcome == PatchOutcome.SKIPPED_EMPTY_WORD

    def test_codepoint_positions(self):
        result = self.engine.run("今天天汽很好", [checklist_item(3, "汽", ["气"])])
        assert result.text == "今天天气很好"

    def test_empty_list_returns_text_unchanged(self):
        result = self.engine.run("abc", "[]")
        assert result.text == "abc"
        assert result.report.entries == []

    def test_string_encoded_list(self):
        items = json.dumps([checklist_item(0, "teh", ["the"])])
        assert self.engine.apply("teh", items) == "the"

    def test_non_object_item_raises(self):
        with pytest.raises(ItemListDecodeError) as exc_info:
            self.engine.run("abc", [1])
        assert "item 0" in str(exc_info.value)

    def test_invalid_item_field_raises(self):
        with pytest.raises(ItemListDecodeError) as exc_info:
            self.engine.run("abc", [{"pos": "first", "len": 1, "word": "a", "suggest": ["b"]}])
        assert "item 0 field" in str(exc_info.value)

    @given(st.data())
    def test_property_composite_equals_independent_replacements(self, data):
        """Property test: applying all items equals rebuilding from replaced words"""
        words = data.draw(st.lists(st.text(alphabet="abc错误", min_size=1, max_size=4), min_size=1, max_size=8))
        replacements = data.draw(
            st.lists(st.text(alphabet="xyz好", max_size=5), min_size=len(words), max_size=len(words))
        )

        items = []
        position = 0
        for word, replacement in zip(words, replacements):
            items.append(checklist_item(position, word, [replacement]))
            position += len(word) + 1
        items = data.draw(st.permutations(items))

        expected = " ".join(
            replacement if replacement else word for word, replacement in zip(words, replacements)
        )
        assert self.engine.apply(" ".join(words), items) == expected


@pytest.mark.unit
class TestLegacyEngine:
    """Tests for LegacyPatchEngine"""

    def test_byte_position(self):
        engine = LegacyPatchEngine(fallback_enabled=False)
        items = [{"errword": "bad", "corword": ["good"], "pos": 6}]
        result = engine.run("错误bad", items)
        assert result.text == "错误good"
        assert result.report.applied == 1

    def test_codepoint_position_unit(self):
        engine = LegacyPatchEngine(fallback_enabled=False, position_unit="codepoint")
        items = [{"errword": "bad", "corword": ["good"], "pos": 2}]
        assert engine.apply("错误bad", items) == "错误good"

    def test_byte_offset_inside_codepoint_is_out_of_bounds(self):
        engine = LegacyPatchEngine(fallback_enabled=False)
        result = engine.run("错误bad", [{"errword": "误", "corword": ["x"], "pos": 2}])
        assert result.text == "错误bad"
        assert result.report.entries[0].outcome == PatchOutcome.SKIPPED_OUT_OF_BOUNDS

    def test_first_non_empty_candidate_wins(self):
        engine = LegacyPatchEngine()
        result = engine.run("bad", [{"errword": "bad", "corword": ["", "good", "fine"], "pos": 0}])
        assert result.text == "good"

    def test_fallback_replaces_first_occurrence(self):
        engine = LegacyPatchEngine(fallback_enabled=True)
        text = '<span style="background-color:yellow;">bad</span> bad'
        result = engine.run(text, [{"errword": "bad", "corword": ["good"], "pos": 0}])
        assert result.text == '<span style="background-color:yellow;">good</span> bad'
        assert result.report.fallback_applied == 1
        assert result.report.applied == 0

    def test_fallback_disabled_leaves_text(self):
        engine = LegacyPatchEngine(fallback_enabled=False)
        text = "<b>bad</b>"
        result = engine.run(text, [{"errword": "bad", "corword": ["good"], "pos": 0}])
        assert result.text == text
        assert result.report.entries[0].outcome == PatchOutcome.SKIPPED_MISMATCH

    def test_fallback_word_not_found(self):
        engine = LegacyPatchEngine()
        result = engine.run("nothing here", [{"errword": "bad", "corword": ["good"], "pos": 0}])
        assert result.text == "nothing here"
        assert result.report.entries[0].outcome == PatchOutcome.SKIPPED_NOT_FOUND

    def test_null_candidates_skipped(self):
        engine = LegacyPatchEngine()
        result = engine.run("bad", [{"errword": "bad", "corword": None, "pos": 0}])
        assert result.text == "bad"
        assert result.report.entries[0].outcome == PatchOutcome.SKIPPED_NO_REPLACEMENT

    def test_invalid_position_unit(self):
        with pytest.raises(ValueError):
            LegacyPatchEngine(position_unit="word")


@pytest.mark.unit
class TestEngineRegistry:
    """Tests for create_engine"""

    def test_engines_by_variant(self):
        settings = ProcessorSettings(legacy_fallback=False, legacy_position_unit="codepoint")
        legacy = create_engine(SchemaVariant.LEGACY, settings)
        assert isinstance(legacy, LegacyPatchEngine)
        assert legacy.fallback_enabled is False
        assert legacy.position_unit == "codepoint"
        assert isinstance(create_engine(SchemaVariant.REVISED), RevisedPatchEngine)

    def test_unrecognized_has_no_engine(self):
        with pytest.raises(ValueError):
            create_engine(SchemaVariant.UNRECOGNIZED)
