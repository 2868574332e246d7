"""Merge table and math ranges into the final ordered segment list.

Walks the content once with a cursor: the gap before each special range
becomes a plain-text segment, math ranges are stripped of their delimiters
and sanitized, and tables are emitted as parsed.  Concatenating
``content[seg.start:seg.end]`` over the result reproduces the content.
"""

import hashlib
import logging

from chat_render.config import DIGEST_LENGTH
from chat_render.segmentation.patterns import DISPLAY_CLOSE, DISPLAY_OPEN, INLINE_CLOSE, INLINE_OPEN
from chat_render.segmentation.sanitizer import sanitize
from chat_render.segmentation.schema import (
    LatexCandidate,
    LatexSegment,
    PlainTextSegment,
    Segment,
    TableMatch,
    TableSegment,
)

logger = logging.getLogger(__name__)


def content_digest(text: str) -> str:
    """Short, process-independent digest of *text* used in segment ids."""
    return hashlib.sha1(text.encode("utf-8", "surrogatepass")).hexdigest()[:DIGEST_LENGTH]


def _plain_text(content: str, start: int, end: int) -> PlainTextSegment:
    text = content[start:end]
    return PlainTextSegment(id=f"text_{start}_{content_digest(text)}", start=start, end=end, text=text)


def strip_delimiters(match_text: str, is_display: bool) -> str:
    """Remove the surrounding math delimiters, or return *match_text* as-is if they are missing."""
    opener, closer = (DISPLAY_OPEN, DISPLAY_CLOSE) if is_display else (INLINE_OPEN, INLINE_CLOSE)
    if match_text.startswith(opener) and match_text.endswith(closer):
        return match_text[len(opener) : -len(closer)]
    return match_text


def assemble_segments(
    content: str,
    tables: list[TableMatch],
    latex_candidates: list[LatexCandidate],
) -> list[Segment]:
    """Build the ordered segment list for *content* from detected tables and math."""
    specials: list[LatexCandidate | TableMatch] = [*latex_candidates, *tables]
    specials.sort(key=lambda s: s.range.start)

    segments: list[Segment] = []
    cursor = 0
    for special in specials:
        start, end = special.range.start, special.range.end
        if cursor < start:
            segments.append(_plain_text(content, cursor, start))

        if isinstance(special, LatexCandidate):
            payload = sanitize(strip_delimiters(content[start:end], special.is_display))
            segments.append(
                LatexSegment(
                    id=f"latex_{start}_{content_digest(payload)}",
                    start=start,
                    end=end,
                    latex=payload,
                    is_display=special.is_display,
                )
            )
        else:
            segments.append(
                TableSegment(
                    id=f"table_{start}_{content_digest(content[start:end])}",
                    start=start,
                    end=end,
                    table=special.table,
                )
            )
        cursor = end

    if cursor < len(content):
        segments.append(_plain_text(content, cursor, len(content)))

    # Segmentation of non-empty content always yields at least one segment
    if not segments and content:
        segments.append(_plain_text(content, 0, len(content)))

    logger.debug("Assembled %d segments from %d special ranges", len(segments), len(specials))
    return segments
