"""Code regions that must never be scanned for math or tables.

Fenced blocks are collected first; an inline code span is only kept when it
does not intersect a fence (backticks inside a fence are code, not spans).
Unmatched backticks simply produce no range.
"""

import logging

from chat_render.segmentation.patterns import FENCED_CODE_RE, INLINE_CODE_RE
from chat_render.segmentation.schema import TextRange

logger = logging.getLogger(__name__)


def find_excluded_ranges(content: str) -> list[TextRange]:
    """Return the ranges of fenced and inline code spans in *content*."""
    excluded = [TextRange(start=m.start(), end=m.end()) for m in FENCED_CODE_RE.finditer(content)]
    n_fences = len(excluded)

    for match in INLINE_CODE_RE.finditer(content):
        candidate = TextRange(start=match.start(), end=match.end())
        if not any(candidate.intersects(fence) for fence in excluded[:n_fences]):
            excluded.append(candidate)

    logger.debug("Excluded %d fenced and %d inline code ranges", n_fences, len(excluded) - n_fences)
    return excluded


def is_excluded(candidate: TextRange, excluded: list[TextRange]) -> bool:
    """Return True if *candidate* intersects any excluded range."""
    return any(candidate.intersects(rng) for rng in excluded)
