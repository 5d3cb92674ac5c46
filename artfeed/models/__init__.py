"""Data models for artwork records and feed state."""
from artfeed.models.artwork import ArtworkRecord, RawRecord
from artfeed.models.feed import FeedMode, FeedState, FetchIntent

__all__ = [
    "ArtworkRecord",
    "RawRecord",
    "FeedMode",
    "FeedState",
    "FetchIntent",
]
