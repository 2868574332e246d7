"""Segmentation entry points: full parse, cache-aware lookup and streaming fast path.

Data flow for one message:

    content -> code exclusions -> tables -> math (code + table ranges excluded)
            -> assembler (sanitizes each math payload) -> segment cache

While a message is still streaming its content changes on every token, so
the fast path skips detection and the cache and returns one plain-text
segment; full segmentation happens once the stream ends.

Usage:
    python -m chat_render.segmentation.pipeline message.md [--dark] [--streaming] [--format text]
"""

import argparse
import logging
from pathlib import Path

from pydantic import TypeAdapter

from chat_render.config import LOG_LEVEL
from chat_render.segmentation.assembler import assemble_segments, content_digest
from chat_render.segmentation.cache import SegmentCache, get_shared_cache
from chat_render.segmentation.exclusions import find_excluded_ranges
from chat_render.segmentation.latex import find_latex_ranges
from chat_render.segmentation.schema import LatexSegment, PlainTextSegment, Segment, TableSegment
from chat_render.segmentation.tables import find_tables, render_markdown

logger = logging.getLogger(__name__)

_SEGMENT_LIST = TypeAdapter(list[Segment])


# ─── Parsing ─────────────────────────────────────────────────────────────────


def parse_content(content: str) -> list[Segment]:
    """Split *content* into ordered plain-text, LaTeX and table segments (uncached)."""
    excluded = find_excluded_ranges(content)
    tables = find_tables(content)
    latex_candidates = find_latex_ranges(content, excluded + [t.range for t in tables])
    return assemble_segments(content, tables, latex_candidates)


def streaming_segments(content: str) -> list[Segment]:
    """Fast path for content that is still streaming: a single plain-text segment."""
    return [
        PlainTextSegment(
            id=f"streaming_{content_digest(content)}",
            start=0,
            end=len(content),
            text=content,
        )
    ]


def segment_message(
    content: str,
    dark_mode: bool = False,
    streaming: bool = False,
    cache: SegmentCache | None = None,
) -> list[Segment]:
    """Return the segments for a chat message, consulting the cache unless streaming.

    *dark_mode* only participates in the cache key; it never changes the result.
    """
    if streaming:
        return streaming_segments(content)

    cache = cache if cache is not None else get_shared_cache()
    cached = cache.get(content, dark_mode)
    if cached is not None:
        logger.debug("Segment cache hit (%d chars, dark_mode=%s)", len(content), dark_mode)
        return cached

    logger.debug("Segment cache miss (%d chars, dark_mode=%s)", len(content), dark_mode)
    segments = parse_content(content)
    cache.set(content, dark_mode, segments)
    return segments


# ─── Output Helpers ──────────────────────────────────────────────────────────


def segments_to_json(segments: list[Segment]) -> str:
    """Serialise a segment list to a JSON array string."""
    return _SEGMENT_LIST.dump_json(segments, indent=2).decode("utf-8")


def describe_segments(segments: list[Segment]) -> str:
    """Render a human-readable dump of *segments* (one block per segment)."""
    blocks: list[str] = []
    for seg in segments:
        header = f"[{seg.id}] {seg.kind} {seg.start}-{seg.end}"
        if isinstance(seg, LatexSegment):
            mode = "display" if seg.is_display else "inline"
            blocks.append(f"{header} ({mode})\n{seg.latex}")
        elif isinstance(seg, TableSegment):
            blocks.append(f"{header}\n{render_markdown(seg.table)}")
        else:
            blocks.append(f"{header}\n{seg.text}")
    return "\n\n".join(blocks)


def main(argv: list[str] | None = None) -> int:
    """Segment a message file and print the result."""
    parser = argparse.ArgumentParser(description="Split a chat message into text, LaTeX and table segments")
    parser.add_argument("path", type=Path, help="UTF-8 message file")
    parser.add_argument("--dark", action="store_true", help="Use the dark-mode cache key")
    parser.add_argument("--streaming", action="store_true", help="Use the streaming fast path")
    parser.add_argument("--format", choices=("json", "text"), default="json", help="Output format (default: json)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")

    with open(args.path, "r", encoding="utf-8") as fopen:
        content = fopen.read()

    segments = segment_message(content, dark_mode=args.dark, streaming=args.streaming)
    logger.info("Segmented %s: %d chars -> %d segments", args.path, len(content), len(segments))

    if args.format == "json":
        print(segments_to_json(segments))
    else:
        print(describe_segments(segments))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
