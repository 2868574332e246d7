"""Unit tests for the segmentation Pydantic models."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from pydantic import TypeAdapter, ValidationError

from chat_render.segmentation.schema import (
    LatexSegment,
    ParsedTable,
    PlainTextSegment,
    Segment,
    TableAlignment,
    TableSegment,
    TextRange,
)

# ===========================================================================
# TextRange tests
# ===========================================================================


class TestTextRange:

    def test_overlapping_ranges_intersect(self):
        assert TextRange(start=0, end=5).intersects(TextRange(start=4, end=8)) is True

    def test_touching_ranges_do_not_intersect(self):
        """Half-open ranges: [0, 5) and [5, 8) share no offset."""
        assert TextRange(start=0, end=5).intersects(TextRange(start=5, end=8)) is False

    def test_nested_ranges_intersect(self):
        assert TextRange(start=0, end=10).intersects(TextRange(start=3, end=4)) is True

    def test_contains(self):
        rng = TextRange(start=2, end=5)
        assert rng.contains(2) is True
        assert rng.contains(4) is True
        assert rng.contains(5) is False
        assert rng.contains(1) is False

    def test_frozen(self):
        rng = TextRange(start=0, end=1)
        with pytest.raises(ValidationError):
            rng.start = 3


# ===========================================================================
# ParsedTable tests
# ===========================================================================


class TestParsedTable:

    def test_valid_table(self):
        table = ParsedTable(
            headers=["a", "b"],
            alignments=[TableAlignment.LEADING, TableAlignment.CENTER],
            rows=[["1", "2"]],
        )
        assert table.rows == [["1", "2"]]

    def test_row_width_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Row 0 has 1 cells"):
            ParsedTable(headers=["a", "b"], alignments=[TableAlignment.LEADING] * 2, rows=[["1"]])

    def test_alignment_width_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="alignments"):
            ParsedTable(headers=["a", "b"], alignments=[TableAlignment.LEADING], rows=[])

    def test_alignment_from_string_value(self):
        table = ParsedTable(headers=["a"], alignments=["trailing"], rows=[])
        assert table.alignments == [TableAlignment.TRAILING]


# ===========================================================================
# Segment union tests
# ===========================================================================


class TestSegmentUnion:

    def test_discriminates_on_kind(self):
        adapter = TypeAdapter(Segment)
        text = adapter.validate_python({"kind": "text", "id": "t", "start": 0, "end": 1, "text": "a"})
        latex = adapter.validate_python({"kind": "latex", "id": "l", "start": 0, "end": 5, "latex": "x", "is_display": False})
        assert isinstance(text, PlainTextSegment)
        assert isinstance(latex, LatexSegment)

    def test_table_segment_round_trips_through_json(self):
        table = ParsedTable(headers=["a"], alignments=[TableAlignment.CENTER], rows=[["1"]])
        seg = TableSegment(id="table_0_x", start=0, end=10, table=table)
        restored = TypeAdapter(Segment).validate_json(seg.model_dump_json())
        assert restored == seg

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(Segment).validate_python({"kind": "image", "id": "i", "start": 0, "end": 1})
