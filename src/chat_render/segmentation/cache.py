"""Thread-safe cache of assembled segment lists keyed by (content, dark mode).

Render passes for different message bubbles may run concurrently on a thread
pool.  Writes go through a single lock; reads never wait for it, so the
least-recently-used order is best-effort under contention.  Parsing is deterministic,
so two writers racing on the same key store equal values and the last one
wins.  Entries are evicted least-recently-used once ``max_entries`` is
reached; ``max_entries=0`` keeps everything for the life of the process.
"""

import logging
import threading
from collections import OrderedDict

from chat_render.config import CACHE_MAX_ENTRIES
from chat_render.segmentation.schema import Segment

logger = logging.getLogger(__name__)


class SegmentCache:
    """Bounded LRU map from ``(content, dark_mode)`` to an immutable segment tuple."""

    def __init__(self, max_entries: int = CACHE_MAX_ENTRIES):
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.max_entries = max_entries
        self._entries: "OrderedDict[tuple[str, bool], tuple[Segment, ...]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, content: str, dark_mode: bool) -> list[Segment] | None:
        """Return a copy of the cached segment list, or None on a miss.

        Never waits for a writer: the lookup itself is lock-free and the
        recency bump is skipped while another thread holds the lock.
        """
        key = (content, dark_mode)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._lock.acquire(blocking=False):
            try:
                if key in self._entries:
                    self._entries.move_to_end(key)
            finally:
                self._lock.release()
        return list(entry)

    def set(self, content: str, dark_mode: bool, segments: list[Segment]) -> None:
        """Store *segments* for the key, evicting the oldest entries if over capacity."""
        key = (content, dark_mode)
        with self._lock:
            self._entries[key] = tuple(segments)
            self._entries.move_to_end(key)
            evicted = 0
            while self.max_entries and len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                evicted += 1
        if evicted:
            logger.debug("Evicted %d segment cache entries (max_entries=%d)", evicted, self.max_entries)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
        logger.debug("Cleared %d segment cache entries", n)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: tuple[str, bool]) -> bool:
        with self._lock:
            return key in self._entries


# Module-level mutable state (lazy-initialised); not a true constant.
_SHARED_CACHE: SegmentCache | None = None
_SHARED_CACHE_LOCK = threading.Lock()


def get_shared_cache() -> SegmentCache:
    """Return the process-wide cache, creating it on first use."""
    global _SHARED_CACHE  # pylint: disable=global-statement
    with _SHARED_CACHE_LOCK:
        if _SHARED_CACHE is None:
            _SHARED_CACHE = SegmentCache()
            logger.info("Created shared segment cache (max_entries=%d)", _SHARED_CACHE.max_entries)
        return _SHARED_CACHE
