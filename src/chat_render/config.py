"""Shared configuration for the chat-render segmentation engine.

Values are read from the environment (and an optional ``.env`` file at the
project root) once, at import time.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")


def _int_from_env(name: str, default: int) -> int:
    """Read a non-negative integer from the environment, falling back to *default*."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%d, using %d", name, value, default)
        return default
    return value


# Maximum number of (content, theme) entries kept by the shared segment cache.
# 0 disables eviction entirely.
CACHE_MAX_ENTRIES = _int_from_env("CHAT_RENDER_CACHE_SIZE", 512)

# Log level used by the command-line entry point
LOG_LEVEL = os.getenv("CHAT_RENDER_LOG_LEVEL", "INFO").upper()

# Number of hex characters of the SHA-1 digest used in segment ids
DIGEST_LENGTH = 12
