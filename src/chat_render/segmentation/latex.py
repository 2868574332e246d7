"""Find display (``\\[...\\]``) and inline (``\\(...\\)``) math ranges.

The delimiter scanners reproduce the matches of the non-greedy patterns
``\\[(.+?)\\]`` (line breaks allowed) and ``\\((.+?)\\)`` (single line) but run
in linear time: the position of the next closing delimiter and of the next
line break are remembered between candidates instead of being searched again.
"""

import logging

from chat_render.segmentation.exclusions import is_excluded
from chat_render.segmentation.patterns import DISPLAY_CLOSE, DISPLAY_OPEN, INLINE_CLOSE, INLINE_OPEN, LINE_BREAK_RE
from chat_render.segmentation.schema import LatexCandidate, TextRange

logger = logging.getLogger(__name__)


def _next_line_break(content: str, start: int) -> int:
    """Index of the first line terminator at or after *start*, or -1."""
    match = LINE_BREAK_RE.search(content, start)
    return match.start() if match else -1


def scan_delimited(content: str, opener: str, closer: str, multiline: bool) -> list[TextRange]:
    """Return non-overlapping ``opener body closer`` ranges with a non-empty body.

    When *multiline* is False a body containing any line terminator is rejected and the
    scan resumes at the next opener.
    """
    ranges: list[TextRange] = []
    close = -1
    line_break: int | None = None  # None = not searched yet, -1 = no line break left

    pos = content.find(opener)
    while pos != -1:
        body_start = pos + len(opener)

        # The body needs at least one character, so the closer cannot start at body_start
        if close < body_start + 1:
            close = content.find(closer, body_start + 1)
        if close == -1:
            break

        if not multiline:
            if line_break is None or -1 < line_break < body_start:
                line_break = _next_line_break(content, body_start)
            if -1 < line_break < close:
                pos = content.find(opener, pos + 1)
                continue

        end = close + len(closer)
        ranges.append(TextRange(start=pos, end=end))
        pos = content.find(opener, end)

    return ranges


def find_latex_ranges(content: str, excluded: list[TextRange]) -> list[LatexCandidate]:
    """Return math candidates in *content* sorted by start offset.

    Display math is collected first.  An inline match is dropped when it
    intersects an excluded range or overlaps an accepted display range.
    """
    display = [
        LatexCandidate(range=rng, is_display=True)
        for rng in scan_delimited(content, DISPLAY_OPEN, DISPLAY_CLOSE, multiline=True)
        if not is_excluded(rng, excluded)
    ]

    candidates = list(display)
    for rng in scan_delimited(content, INLINE_OPEN, INLINE_CLOSE, multiline=False):
        if is_excluded(rng, excluded):
            continue
        overlaps = any(d.range.contains(rng.start) or rng.contains(d.range.start) for d in display)
        if not overlaps:
            candidates.append(LatexCandidate(range=rng, is_display=False))

    candidates.sort(key=lambda c: c.range.start)
    logger.debug("Found %d display and %d inline math ranges", len(display), len(candidates) - len(display))
    return candidates
