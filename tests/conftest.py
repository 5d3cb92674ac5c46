"""Shared fakes and a wired-up feed engine for tests."""
import asyncio
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pytest

from artfeed.config import UNKNOWN_AUTHOR
from artfeed.core.dispatch import Dispatcher
from artfeed.core.errors import TranslationError
from artfeed.core.feed_engine import FeedEngine
from artfeed.core.prefetch import PrefetchPolicy
from artfeed.core.presentation import SlideBoard
from artfeed.core.viewport import SlidePosition, ViewportTracker
from artfeed.models.artwork import RawRecord
from artfeed.models.feed import FeedState

Batch = Union[List[RawRecord], Exception]


def raw(i: int, image: bool = True, author: Optional[str] = "Claude Monet", description: Optional[str] = None) -> RawRecord:
    return RawRecord(
        id=str(i),
        image_url=f"https://img.example/{i}.jpg" if image else None,
        author=author,
        title=f"Title {i}",
        description=description,
    )


def batch(start: int, stop: int, **kwargs) -> List[RawRecord]:
    return [raw(i, **kwargs) for i in range(start, stop)]


class FakeCatalog:
    """Serves queued batches; optional gates hold a fetch until the test opens them."""

    def __init__(self) -> None:
        self.random_batches: List[Batch] = []
        self.author_batches: Dict[str, Batch] = {}
        self.calls: list = []
        self.random_gate: Optional[asyncio.Event] = None
        self.author_gate: Optional[asyncio.Event] = None

    @staticmethod
    def _result(result: Batch) -> List[RawRecord]:
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def fetch_random(self, batch_size: int) -> List[RawRecord]:
        self.calls.append(("random", batch_size))
        if self.random_gate is not None:
            await self.random_gate.wait()
        return self._result(self.random_batches.pop(0) if self.random_batches else [])

    async def fetch_by_author(self, name: str, batch_size: int) -> List[RawRecord]:
        self.calls.append(("author", name, batch_size))
        if self.author_gate is not None:
            await self.author_gate.wait()
        return self._result(self.author_batches.get(name, []))

    def count(self, kind: str) -> int:
        return sum(1 for c in self.calls if c[0] == kind)


class FakeTranslator:
    def __init__(self) -> None:
        self.fail: set = set()
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[str] = []

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if text in self.fail:
            raise TranslationError("unavailable")
        return f"T:{text}"


class FakeWarmer:
    def __init__(self) -> None:
        self.urls: List[str] = []

    def warm(self, url: str) -> None:
        self.urls.append(url)


@dataclass
class Harness:
    state: FeedState
    catalog: FakeCatalog
    translator: FakeTranslator
    board: SlideBoard
    warmer: FakeWarmer
    prefetch: PrefetchPolicy
    dispatcher: Dispatcher
    engine: FeedEngine
    tracker: ViewportTracker
    rng: random.Random = field(default_factory=random.Random)

    def ids(self) -> List[str]:
        return [r.id for r in self.state.records]

    def positions(self, height: float = 100.0) -> List[SlidePosition]:
        return [
            SlidePosition(record_id=r.id, offset_top=i * height, height=height)
            for i, r in enumerate(self.state.records)
        ]

    def scroll_to(self, index: int, height: float = 100.0) -> bool:
        return self.tracker.on_viewport_change(index * height, height, self.positions(height))


def make_harness(seed: int = 7) -> Harness:
    rng = random.Random(seed)
    state = FeedState()
    catalog = FakeCatalog()
    translator = FakeTranslator()
    board = SlideBoard()
    warmer = FakeWarmer()
    dispatcher = Dispatcher()
    prefetch = PrefetchPolicy(state, warmer)
    engine = FeedEngine(
        state,
        catalog,
        translator,
        board,
        prefetch,
        dispatcher,
        rng=rng,
        discovery_batch_size=15,
        search_batch_size=30,
        unknown_author=UNKNOWN_AUTHOR,
    )
    tracker = ViewportTracker(state, engine, prefetch)
    return Harness(state, catalog, translator, board, warmer, prefetch, dispatcher, engine, tracker, rng)


@pytest.fixture
def harness() -> Harness:
    return make_harness()
