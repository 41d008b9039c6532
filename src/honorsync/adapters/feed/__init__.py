"""Public interface for the honor feed adapter."""

from __future__ import annotations

from .loader import FeedFormatError, FeedLoadResult, load_feed, parse_feed
from .schema import FeedBoardGame, FeedHonor
from .translator import translate_honor

__all__ = [
    "FeedBoardGame",
    "FeedFormatError",
    "FeedHonor",
    "FeedLoadResult",
    "load_feed",
    "parse_feed",
    "translate_honor",
]
