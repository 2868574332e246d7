"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from chat_render.segmentation.cache import SegmentCache

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


@pytest.fixture
def cache() -> SegmentCache:
    """A fresh, private segment cache so tests never share state."""
    return SegmentCache(max_entries=16)
