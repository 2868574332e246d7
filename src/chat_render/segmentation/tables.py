"""GitHub-flavoured markdown table detection, cell parsing and re-rendering.

Scans the message line by line.  A table starts at a line whose trimmed text
begins with ``|`` and is immediately followed by an alignment line such as
``|---|:--:|``; every following non-empty line that begins with ``|`` is a
body row.  Anything else is left to the markdown renderer as plain text.

Code exclusions are not consulted here, so a pipe table written inside a
fenced block is still detected.
"""

import logging

from chat_render.segmentation.patterns import (
    ALIGNMENT_CHARS,
    ESCAPED_PIPE,
    ESCAPED_PIPE_PLACEHOLDER,
    LINE_BREAK_RE,
    PIPE,
)
from chat_render.segmentation.schema import ParsedTable, TableAlignment, TableMatch, TextRange

logger = logging.getLogger(__name__)

# Alignment-row markers used when writing a table back out
_ALIGNMENT_MARKERS = {
    TableAlignment.LEADING: "---",
    TableAlignment.CENTER: ":---:",
    TableAlignment.TRAILING: "---:",
}


# ─── Line & Cell Helpers ─────────────────────────────────────────────────────


def split_lines(content: str) -> list[tuple[str, int, int]]:
    """Split *content* into ``(text, start, end)`` tuples.

    ``text`` excludes the line terminator; ``[start, end)`` is the enclosing
    range and includes it.  No empty line is reported after a final terminator.
    """
    lines: list[tuple[str, int, int]] = []
    pos = 0
    for match in LINE_BREAK_RE.finditer(content):
        lines.append((content[pos : match.start()], pos, match.end()))
        pos = match.end()
    if pos < len(content):
        lines.append((content[pos:], pos, len(content)))
    return lines


def parse_table_cells(line: str) -> list[str]:
    """Split a pipe-delimited row into trimmed cell strings (``\\|`` is a literal pipe)."""
    working = line.strip()
    if working.startswith(PIPE):
        working = working[1:]
    if working.endswith(PIPE):
        working = working[:-1]

    working = working.replace(ESCAPED_PIPE, ESCAPED_PIPE_PLACEHOLDER)
    return [part.replace(ESCAPED_PIPE_PLACEHOLDER, PIPE).strip() for part in working.split(PIPE)]


def _is_row_line(line: str) -> bool:
    """Return True if the trimmed line could be a header or body row."""
    trimmed = line.strip()
    return trimmed.startswith(PIPE) and PIPE in trimmed


def is_alignment_line(line: str) -> bool:
    """Return True for a separator row like ``| --- | :---: |``."""
    if not line.strip().startswith(PIPE):
        return False
    for cell in parse_table_cells(line):
        if "-" not in cell or not set(cell) <= ALIGNMENT_CHARS:
            return False
    return True


def parse_alignment(cell: str) -> TableAlignment:
    """Map an alignment cell to a TableAlignment.

    ``:---:`` is centre and ``---:`` trailing.  A leading colon on its own is
    not distinguished from an unmarked cell: both are leading.
    """
    trimmed = cell.strip()
    leading = trimmed.startswith(":")
    trailing = trimmed.endswith(":")
    if leading and trailing:
        return TableAlignment.CENTER
    if trailing:
        return TableAlignment.TRAILING
    return TableAlignment.LEADING


def _normalize(items: list, target: int, fill) -> list:
    """Pad *items* with *fill* or truncate it to exactly *target* entries."""
    if len(items) >= target:
        return items[:target]
    return items + [fill] * (target - len(items))


def parse_table(lines: list[str]) -> ParsedTable:
    """Build a ParsedTable from a header line, an alignment line and body rows."""
    headers = parse_table_cells(lines[0])
    alignments = [parse_alignment(cell) for cell in parse_table_cells(lines[1])]
    n_cols = max(len(headers), len(alignments))

    rows = [_normalize(parse_table_cells(line), n_cols, "") for line in lines[2:]]
    return ParsedTable(
        headers=_normalize(headers, n_cols, ""),
        alignments=_normalize(alignments, n_cols, TableAlignment.LEADING),
        rows=rows,
    )


# ─── Table Detection ─────────────────────────────────────────────────────────


def find_tables(content: str) -> list[TableMatch]:
    """Return every GFM table in *content*, in source order."""
    if PIPE not in content:
        return []

    lines = split_lines(content)
    matches: list[TableMatch] = []
    i = 0
    while i < len(lines):
        # Header must look like a row and be followed directly by an alignment line
        if not _is_row_line(lines[i][0]):
            i += 1
            continue
        if i + 1 >= len(lines) or not is_alignment_line(lines[i + 1][0]):
            i += 1
            continue

        # Greedily consume body rows
        last = i + 1
        while last + 1 < len(lines):
            candidate = lines[last + 1][0].strip()
            if not candidate or not _is_row_line(candidate):
                break
            last += 1

        table = parse_table([text for text, _, _ in lines[i : last + 1]])
        rng = TextRange(start=lines[i][1], end=lines[last][2])
        matches.append(TableMatch(range=rng, table=table))
        i = last + 1

    logger.debug("Detected %d tables across %d lines", len(matches), len(lines))
    return matches


# ─── Markdown Rendering ──────────────────────────────────────────────────────


def render_markdown(table: ParsedTable) -> str:
    """Convert a ParsedTable back into a GFM pipe table string."""

    def _row(cells: list[str]) -> str:
        return "| " + " | ".join(cell.replace(PIPE, ESCAPED_PIPE) for cell in cells) + " |"

    lines = [_row(table.headers)]
    lines.append("| " + " | ".join(_ALIGNMENT_MARKERS[a] for a in table.alignments) + " |")
    for row in table.rows:
        lines.append(_row(row))
    return "\n".join(lines)
