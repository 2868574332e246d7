"""Trim and repair extracted LaTeX payloads before typesetting.

Models frequently write inline math inside a text-mode command, e.g.
``\\text{say \\(x^2\\) now}``.  A math typesetter renders the inner
``\\(x^2\\)`` literally, so the math is hoisted out of the command:
``\\text{say }x^2\\text{ now}``.

Malformed input never raises.  An unbalanced ``\\text{`` keeps the rest of
the payload verbatim and an unclosed ``\\(`` stays inside ``\\text{...}``.
"""

from chat_render.segmentation.patterns import INLINE_CLOSE, INLINE_OPEN, TEXT_COMMAND


def _wrap_text(text: str) -> str:
    return "\\text{" + text + "}"


def rewrite_text_content(inner: str) -> str:
    """Rewrite the body of one ``\\text{...}`` so embedded inline math is hoisted out."""
    if INLINE_OPEN not in inner:
        return _wrap_text(inner)

    parts: list[str] = []
    cursor = 0
    while True:
        open_idx = inner.find(INLINE_OPEN, cursor)
        if open_idx == -1:
            break
        if open_idx > cursor:
            parts.append(_wrap_text(inner[cursor:open_idx]))

        math_start = open_idx + len(INLINE_OPEN)
        close_idx = inner.find(INLINE_CLOSE, math_start)
        if close_idx == -1:
            # Unclosed math: keep everything from the opener as text
            parts.append(_wrap_text(inner[open_idx:]))
            return "".join(parts)

        parts.append(inner[math_start:close_idx])
        cursor = close_idx + len(INLINE_CLOSE)

    if cursor < len(inner):
        parts.append(_wrap_text(inner[cursor:]))
    return "".join(parts)


def normalize_text_commands(latex: str) -> str:
    """Rewrite every balanced ``\\text{...}`` in *latex* with rewrite_text_content.

    Braces are matched with a depth counter, so ``\\text{a{b}c}`` is one
    command.  If the braces never balance, the remainder is copied verbatim.
    """
    parts: list[str] = []
    index = 0
    n = len(latex)

    while index < n:
        if not latex.startswith(TEXT_COMMAND, index):
            parts.append(latex[index])
            index += 1
            continue

        content_start = index + len(TEXT_COMMAND)
        cursor = content_start
        depth = 1
        while cursor < n:
            char = latex[cursor]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            cursor += 1

        if depth != 0:
            parts.append(latex[index:])
            break

        parts.append(rewrite_text_content(latex[content_start:cursor]))
        index = cursor + 1

    return "".join(parts)


def sanitize(raw: str) -> str:
    """Trim a LaTeX payload and repair inline math nested in ``\\text{...}``.

    A payload that trims to nothing is returned untrimmed.
    """
    trimmed = raw.strip()
    base = trimmed if trimmed else raw
    if TEXT_COMMAND not in base:
        return base
    return normalize_text_commands(base)
