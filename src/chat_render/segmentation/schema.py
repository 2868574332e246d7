"""Pydantic models for segmented message content.

A message is split into an ordered list of segments (plain text, LaTeX, table)
that a renderer dispatches on.  All models are frozen: once a segment list is
produced it is shared between cache readers and must not change.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextRange(BaseModel):
    """Half-open ``[start, end)`` codepoint range into the message content."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    def intersects(self, other: "TextRange") -> bool:
        """Return True if the two ranges share at least one offset."""
        return max(self.start, other.start) < min(self.end, other.end)

    def contains(self, offset: int) -> bool:
        """Return True if *offset* falls inside this range."""
        return self.start <= offset < self.end


class TableAlignment(str, Enum):
    """Horizontal alignment of a table column."""

    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"


class ParsedTable(BaseModel):
    """A GitHub-flavoured markdown table, normalised to a fixed column count.

    The model_validator guarantees that the header, the alignment list and
    every row have the same width, so renderers can index columns blindly.
    """

    model_config = ConfigDict(frozen=True)

    headers: list[str]
    alignments: list[TableAlignment]
    rows: list[list[str]]

    @model_validator(mode="after")
    def validate_widths(self) -> "ParsedTable":
        """Ensure alignments and every row have exactly len(headers) cells."""
        n_cols = len(self.headers)
        if len(self.alignments) != n_cols:
            raise ValueError(f"{len(self.alignments)} alignments, expected {n_cols} (matching headers)")
        for i, row in enumerate(self.rows):
            if len(row) != n_cols:
                raise ValueError(f"Row {i} has {len(row)} cells, expected {n_cols} (matching headers)")
        return self


class TableMatch(BaseModel):
    """A detected table and the source range it occupies."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    table: ParsedTable


class LatexCandidate(BaseModel):
    """A delimited math span (delimiters included) before sanitization."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    is_display: bool


# ─── Segments ─────────────────────────────────────────────────────────────────


class _SegmentBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    start: int
    end: int


class PlainTextSegment(_SegmentBase):
    """Markdown prose, passed through unchanged."""

    kind: Literal["text"] = "text"
    text: str


class LatexSegment(_SegmentBase):
    """Sanitized LaTeX payload with its delimiters removed."""

    kind: Literal["latex"] = "latex"
    latex: str
    is_display: bool


class TableSegment(_SegmentBase):
    kind: Literal["table"] = "table"
    table: ParsedTable


Segment = Annotated[Union[PlainTextSegment, LatexSegment, TableSegment], Field(discriminator="kind")]
