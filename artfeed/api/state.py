"""Shared application state (injected into routes)."""
import random
from typing import Optional

import httpx

from artfeed.config import HTTP_TIMEOUT_SEC, USER_AGENT
from artfeed.core.catalog_client import CatalogClient
from artfeed.core.dispatch import Dispatcher
from artfeed.core.feed_engine import FeedEngine
from artfeed.core.prefetch import AssetWarmer, PrefetchPolicy
from artfeed.core.presentation import SlideBoard
from artfeed.core.translation_client import TranslationClient
from artfeed.core.viewport import ViewportTracker
from artfeed.models.feed import FeedState


class AppState:
    """One feed session: state, clients and the components wired around them."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.http = http or httpx.AsyncClient(
            timeout=HTTP_TIMEOUT_SEC,
            headers={"User-Agent": USER_AGENT, "AIC-User-Agent": USER_AGENT},
            follow_redirects=True,
        )
        self.feed = FeedState()
        self.dispatcher = Dispatcher()
        self.board = SlideBoard()
        self.catalog = CatalogClient(self.http, rng=rng)
        self.translator = TranslationClient(self.http)
        self.prefetch = PrefetchPolicy(self.feed, AssetWarmer(self.http, self.dispatcher))
        self.engine = FeedEngine(
            self.feed,
            self.catalog,
            self.translator,
            self.board,
            self.prefetch,
            self.dispatcher,
            rng=rng,
        )
        self.viewport = ViewportTracker(self.feed, self.engine, self.prefetch)

    def slides(self) -> list[dict]:
        return self.board.slides([r.id for r in self.feed.records])

    async def aclose(self) -> None:
        self.dispatcher.cancel_all()
        await self.http.aclose()


_state = AppState()


def get_state() -> AppState:
    return _state
