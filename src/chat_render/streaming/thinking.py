"""Split streaming reasoning ("thinking") text into paragraph chunks.

Only the last, still-growing paragraph needs re-rendering while tokens arrive.
Completed chunk ids are positional (``thinking_<n>``) so they stay stable
across re-renders.
"""

from pydantic import BaseModel, ConfigDict

PARAGRAPH_BREAK = "\n\n"


class ThinkingChunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    is_complete: bool


class ThinkingTextChunker:
    """Accumulate reasoning tokens and cut completed paragraphs off the front."""

    def __init__(self) -> None:
        self._completed: list[ThinkingChunk] = []
        self._working = ""

    def get_all_chunks(self) -> list[ThinkingChunk]:
        chunks = list(self._completed)
        if self._working:
            chunks.append(
                ThinkingChunk(
                    id=f"thinking_working_{len(self._completed)}",
                    content=self._working,
                    is_complete=False,
                )
            )
        return chunks

    def append_token(self, token: str) -> None:
        self._working += token
        while PARAGRAPH_BREAK in self._working:
            paragraph, self._working = self._working.split(PARAGRAPH_BREAK, 1)
            self._complete(paragraph)

    def finalize(self) -> None:
        self._complete(self._working)
        self._working = ""

    def reset(self) -> None:
        self._completed.clear()
        self._working = ""

    def _complete(self, paragraph: str) -> None:
        # Whitespace-only paragraphs are dropped
        if paragraph.strip():
            self._completed.append(
                ThinkingChunk(id=f"thinking_{len(self._completed)}", content=paragraph, is_complete=True)
            )
