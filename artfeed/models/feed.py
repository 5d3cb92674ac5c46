"""Feed mode, fetch intent and the mutable feed state."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from artfeed.models.artwork import ArtworkRecord


class FeedMode(str, Enum):
    DISCOVERY = "discovery"
    AUTHOR_SEARCH = "author_search"


@dataclass(frozen=True)
class FetchIntent:
    """What a catalog fetch asks for: random discovery or one author's works."""
    mode: FeedMode
    author: Optional[str] = None

    @classmethod
    def discovery(cls) -> "FetchIntent":
        return cls(FeedMode.DISCOVERY)

    @classmethod
    def author_search(cls, name: str) -> "FetchIntent":
        return cls(FeedMode.AUTHOR_SEARCH, name)


@dataclass
class FeedState:
    """Ordered, deduplicated records of one feed generation.

    records is append-only within a generation; seen_ids always mirrors it.
    materialized_ids holds the ids already handed to the presentation layer.
    """
    mode: FeedMode = FeedMode.DISCOVERY
    author: Optional[str] = None
    records: List[ArtworkRecord] = field(default_factory=list)
    seen_ids: Set[str] = field(default_factory=set)
    materialized_ids: Set[str] = field(default_factory=set)
    current_index: int = 0
    fetch_in_flight: bool = False
    generation: int = 0

    def reset(self, intent: FetchIntent) -> int:
        """Start a new generation for intent. Returns the new generation."""
        self.generation += 1
        self.records = []
        self.seen_ids = set()
        self.materialized_ids = set()
        self.current_index = 0
        self.fetch_in_flight = False
        self.mode = intent.mode
        self.author = intent.author
        return self.generation

    def append(self, records: Iterable[ArtworkRecord]) -> List[ArtworkRecord]:
        """Append records whose id is not yet seen. Returns those actually added."""
        added = []
        for record in records:
            if record.id in self.seen_ids:
                continue
            self.records.append(record)
            self.seen_ids.add(record.id)
            added.append(record)
        return added

    def index_of(self, record_id: str) -> Optional[int]:
        for i, record in enumerate(self.records):
            if record.id == record_id:
                return i
        return None

    def get(self, record_id: str) -> Optional[ArtworkRecord]:
        index = self.index_of(record_id)
        return self.records[index] if index is not None else None

    def remove(self, record_id: str) -> Optional[int]:
        """Drop record_id, keeping the order of the rest. Returns its old index or None."""
        index = self.index_of(record_id)
        if index is None:
            return None
        del self.records[index]
        self.seen_ids.discard(record_id)
        self.materialized_ids.discard(record_id)
        return index

    @property
    def current_record(self) -> Optional[ArtworkRecord]:
        if not self.records:
            return None
        return self.records[self.current_index]

