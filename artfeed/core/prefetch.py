"""Image warming ahead of the viewing position. Advisory only: failures are ignored."""
import logging
from collections import OrderedDict
from typing import Protocol

import httpx

from artfeed.config import PREFETCH_AHEAD, PREFETCH_MEMORY
from artfeed.core.dispatch import Dispatcher
from artfeed.models.feed import FeedState

logger = logging.getLogger(__name__)


class Warmer(Protocol):
    def warm(self, url: str) -> None: ...


class AssetWarmer:
    """Loads image URLs in the background and discards the bytes.

    Remembers the last `memory` URLs it warmed and skips those; older ones
    are forgotten first.
    """

    def __init__(
        self, http: httpx.AsyncClient, dispatcher: Dispatcher, memory: int = PREFETCH_MEMORY
    ) -> None:
        self._http = http
        self._dispatcher = dispatcher
        self._memory = max(1, memory)
        self._warmed: "OrderedDict[str, None]" = OrderedDict()

    def warm(self, url: str) -> None:
        if not url:
            return
        if url in self._warmed:
            self._warmed.move_to_end(url)
            return
        self._warmed[url] = None
        while len(self._warmed) > self._memory:
            self._warmed.popitem(last=False)
        self._dispatcher.spawn(self._load(url), name=f"warm:{url}")

    def __len__(self) -> int:
        return len(self._warmed)

    async def _load(self, url: str) -> None:
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            # Next on-demand load pays full latency; nothing else to do
            logger.debug("Prefetch failed for %s: %s", url, e)
            self._warmed.pop(url, None)


class PrefetchPolicy:
    """Warms the images of the records right after an index."""

    def __init__(self, state: FeedState, warmer: Warmer, ahead: int = PREFETCH_AHEAD) -> None:
        self._state = state
        self._warmer = warmer
        self._ahead = ahead

    def warm(self, index: int) -> None:
        records = self._state.records
        for i in range(index + 1, min(index + 1 + self._ahead, len(records))):
            try:
                self._warmer.warm(records[i].image_url)
            except Exception as e:
                logger.debug("Prefetch dispatch failed for %s: %s", records[i].id, e)
