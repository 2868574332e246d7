"""Compiled regex patterns and delimiter constants for message segmentation.

Used by exclusions.py, tables.py, latex.py and sanitizer.py.
"""

import re

# ─── Code Patterns ────────────────────────────────────────────────────────────

# Fenced code block: ``` ... ``` (non-greedy, spans newlines)
FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")

# Inline code span: `...` (at least one non-backtick character)
INLINE_CODE_RE = re.compile(r"`[^`]+`")


# ─── Line Patterns ────────────────────────────────────────────────────────────

# Line terminators: CRLF first so it is consumed as a single break
LINE_BREAK_RE = re.compile(r"\r\n|[\n\r\x85\u2028\u2029]")


# ─── LaTeX Delimiters ─────────────────────────────────────────────────────────

DISPLAY_OPEN = "\\["
DISPLAY_CLOSE = "\\]"
INLINE_OPEN = "\\("
INLINE_CLOSE = "\\)"

# Opening of a text-mode command whose body may hide inline math
TEXT_COMMAND = "\\text{"


# ─── Table Constants ──────────────────────────────────────────────────────────

PIPE = "|"

# Escaped pipe inside a table cell, and the token it is parked as while splitting
ESCAPED_PIPE = "\\|"
ESCAPED_PIPE_PLACEHOLDER = "__ESCAPED_PIPE__"

# Characters allowed in an alignment-row cell such as ":---:"
ALIGNMENT_CHARS = frozenset("-: ")
