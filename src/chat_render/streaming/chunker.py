"""Split streamed markdown into paragraph, code-block and table chunks.

While a reply streams in, re-segmenting the whole message on every token is
wasteful.  The chunker keeps a list of completed chunks that never change
again plus one open chunk, so a renderer only has to redraw the last one.

Tokens can split any delimiter (```` ``` ````, ``\\n\\n``, a table row), so a
partial delimiter stays in the internal buffer until the next token decides
what it is.
"""

import logging
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict

from chat_render.segmentation.patterns import PIPE

logger = logging.getLogger(__name__)

CODE_FENCE = "```"


class ChunkType(str, Enum):
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "code_block"
    TABLE = "table"


class ContentChunk(BaseModel):
    """One block of streamed content; ``language`` is only set for code blocks."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ChunkType
    content: str
    is_complete: bool
    language: str | None = None


def _new_id() -> str:
    return str(uuid.uuid4())


class StreamingMarkdownChunker:
    """Accumulate tokens and cut them into markdown block chunks."""

    def __init__(self) -> None:
        self._buffer = ""
        self._completed: list[ContentChunk] = []
        self._type = ChunkType.PARAGRAPH
        self._language: str | None = None
        self._content = ""
        self._id = _new_id()

    # ─── Public API ──────────────────────────────────────────────────────────

    def get_all_chunks(self) -> list[ContentChunk]:
        """Return completed chunks followed by the open chunk, if it has content."""
        chunks = list(self._completed)
        if self._content:
            chunks.append(self._snapshot(is_complete=False))
        return chunks

    def append_token(self, token: str) -> bool:
        """Feed one token.  Returns True if at least one chunk was completed."""
        self._buffer += token
        return self._process_buffer()

    def finalize(self) -> None:
        """Complete the open chunk, folding in anything still held in the buffer."""
        if self._type is ChunkType.PARAGRAPH and self._at_line_start() and self._buffer.startswith(CODE_FENCE):
            # Stream ended on an unterminated fence line
            self._complete_current()
            self._open_code_block(self._buffer)
        else:
            self._content += self._buffer
        self._buffer = ""
        self._complete_current()
        logger.debug("Finalized stream into %d chunks", len(self._completed))

    def reset(self) -> None:
        """Forget all chunks and buffered input."""
        self.__init__()  # pylint: disable=unnecessary-dunder-call

    # ─── Chunk Bookkeeping ───────────────────────────────────────────────────

    def _snapshot(self, is_complete: bool) -> ContentChunk:
        return ContentChunk(
            id=self._id,
            type=self._type,
            content=self._content,
            is_complete=is_complete,
            language=self._language,
        )

    def _start(self, chunk_type: ChunkType, content: str = "", language: str | None = None) -> None:
        self._type = chunk_type
        self._content = content
        self._language = language
        self._id = _new_id()

    def _complete_current(self) -> bool:
        """Move the open chunk to the completed list and open an empty paragraph.

        Returns False (and records nothing) when the open chunk is empty.
        """
        if self._type is not ChunkType.CODE_BLOCK and self._content.endswith("\n"):
            self._content = self._content[:-1]
        completed = bool(self._content)
        if completed:
            self._completed.append(self._snapshot(is_complete=True))
        self._start(ChunkType.PARAGRAPH)
        return completed

    def _open_code_block(self, fence_line: str, terminator: str = "") -> None:
        language = fence_line[len(CODE_FENCE) :].strip() or None
        self._start(ChunkType.CODE_BLOCK, content=fence_line + terminator, language=language)

    def _at_line_start(self) -> bool:
        return not self._content or self._content.endswith("\n")

    # ─── Buffer Processing ───────────────────────────────────────────────────
    # Each step returns (completed_a_chunk, waiting_for_more_input).

    def _process_buffer(self) -> bool:
        completed = False
        while self._buffer:
            if self._type is ChunkType.CODE_BLOCK:
                step_completed, waiting = self._step_code_block()
            elif self._type is ChunkType.TABLE:
                step_completed, waiting = self._step_table()
            else:
                step_completed, waiting = self._step_paragraph()
            completed = completed or step_completed
            if waiting:
                break
        return completed

    def _step_code_block(self) -> tuple[bool, bool]:
        fence = self._buffer.find(CODE_FENCE)
        if fence != -1:
            self._content += self._buffer[:fence] + CODE_FENCE
            self._buffer = self._buffer[fence + len(CODE_FENCE) :]
            return self._complete_current(), False

        # Hold back trailing backticks that may be the start of the closing fence
        held = min(len(self._buffer) - len(self._buffer.rstrip("`")), len(CODE_FENCE) - 1)
        cut = len(self._buffer) - held
        self._content += self._buffer[:cut]
        self._buffer = self._buffer[cut:]
        return False, True

    def _step_table(self) -> tuple[bool, bool]:
        newline = self._buffer.find("\n")
        if newline == -1:
            return False, True

        line = self._buffer[:newline]
        if line.strip() and PIPE in line:
            self._content += line + "\n"
            self._buffer = self._buffer[newline + 1 :]
            return False, False

        # A blank line is consumed; any other line is re-read as paragraph text
        if not line.strip():
            self._buffer = self._buffer[newline + 1 :]
        return self._complete_current(), False

    def _step_paragraph(self) -> tuple[bool, bool]:
        buf = self._buffer
        if not self._content and buf.startswith("\n"):
            # Blank lines between blocks
            self._buffer = buf.lstrip("\n")
            return False, False
        if self._at_line_start():
            if buf.startswith(CODE_FENCE):
                completed = self._complete_current()
                newline = buf.find("\n")
                if newline == -1:
                    return completed, True
                self._open_code_block(buf[:newline], "\n")
                self._buffer = buf[newline + 1 :]
                return completed, False
            if CODE_FENCE.startswith(buf):
                return False, True
            if buf.startswith(PIPE):
                completed = self._complete_current()
                self._start(ChunkType.TABLE)
                return completed, False

        newline = buf.find("\n")
        if newline == -1:
            self._content += buf
            self._buffer = ""
            return False, False
        if buf.startswith("\n", newline + 1):
            # Blank line ends the paragraph
            self._content += buf[:newline]
            self._buffer = buf[newline + 2 :]
            return self._complete_current(), False
        if newline == len(buf) - 1:
            # Wait to see whether the next token starts a blank line
            self._content += buf[:newline]
            self._buffer = "\n"
            return False, True
        self._content += buf[: newline + 1]
        self._buffer = buf[newline + 1 :]
        return False, False
