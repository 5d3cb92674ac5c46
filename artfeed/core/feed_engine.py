"""Feed engine: owns feed state, mode switches, fetch triggering, dedup and enrichment dispatch.

All state mutation happens synchronously on the event loop. Catalog and
translation calls are the only suspension points; their continuations carry
the generation they were dispatched under and do nothing if the feed has
been reset since.
"""
import asyncio
import logging
import random
from typing import Any, List, Optional

from artfeed.config import (
    DISCOVERY_BATCH_SIZE,
    INITIAL_MATERIALIZE,
    SEARCH_BATCH_SIZE,
    TAIL_THRESHOLD,
    UNKNOWN_AUTHOR,
)
from artfeed.core.catalog_client import CatalogClient
from artfeed.core.dispatch import Dispatcher
from artfeed.core.errors import CatalogError, TranslationError
from artfeed.core.prefetch import PrefetchPolicy
from artfeed.core.presentation import Presentation
from artfeed.core.translation_client import TranslationClient
from artfeed.models.artwork import ArtworkRecord, RawRecord
from artfeed.models.feed import FeedMode, FeedState, FetchIntent

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Could not load artworks. Please try again."
NO_RESULTS_MESSAGE = "No artworks found. Please try again."


class FeedEngine:
    def __init__(
        self,
        state: FeedState,
        catalog: CatalogClient,
        translator: TranslationClient,
        presentation: Presentation,
        prefetch: PrefetchPolicy,
        dispatcher: Dispatcher,
        rng: Optional[random.Random] = None,
        discovery_batch_size: int = DISCOVERY_BATCH_SIZE,
        search_batch_size: int = SEARCH_BATCH_SIZE,
        tail_threshold: int = TAIL_THRESHOLD,
        initial_materialize: int = INITIAL_MATERIALIZE,
        unknown_author: str = UNKNOWN_AUTHOR,
    ) -> None:
        self._state = state
        self._catalog = catalog
        self._translator = translator
        self._presentation = presentation
        self._prefetch = prefetch
        self._dispatcher = dispatcher
        self._rng = rng or random.Random()
        self._discovery_batch_size = discovery_batch_size
        self._search_batch_size = search_batch_size
        self._tail_threshold = tail_threshold
        self._initial_materialize = initial_materialize
        self._unknown_author = unknown_author

    @property
    def state(self) -> FeedState:
        return self._state

    # --- Fetching ---------------------------------------------------------

    def request_batch(self, intent: FetchIntent, append: bool) -> Optional[asyncio.Task]:
        """Start a catalog fetch for intent and return its task.

        An append request while a fetch is in flight is dropped (returns None).
        A fresh request (append=False) resets the feed to a new generation
        first; a fetch still outstanding from the old generation is then stale.
        """
        state = self._state
        if append:
            if state.fetch_in_flight:
                logger.debug("Fetch already in flight, dropping append request")
                return None
        else:
            state.reset(intent)
            self._presentation.clear()
            logger.info(
                "Feed reset to %s%s (generation %s)",
                intent.mode.value,
                f" {intent.author!r}" if intent.author else "",
                state.generation,
            )
        state.fetch_in_flight = True
        return self._dispatcher.spawn(
            self._run_fetch(intent, append, state.generation),
            name=f"fetch:{intent.mode.value}:{state.generation}",
        )

    async def fetch_batch(self, intent: FetchIntent, append: bool) -> None:
        """Fetch a batch for intent and wait until it has been applied (or dropped)."""
        task = self.request_batch(intent, append)
        if task is not None:
            await task

    async def _run_fetch(self, intent: FetchIntent, append: bool, generation: int) -> None:
        state = self._state
        try:
            if intent.mode is FeedMode.AUTHOR_SEARCH:
                raws = await self._catalog.fetch_by_author(intent.author, self._search_batch_size)
            else:
                raws = await self._catalog.fetch_random(self._discovery_batch_size)
        except CatalogError as e:
            if state.generation != generation:
                logger.debug("Ignoring failure of stale fetch (generation %s): %s", generation, e)
                return
            if append:
                logger.warning("Append fetch failed, will retry on next tail trigger: %s", e)
            else:
                logger.error("Fresh %s fetch failed: %s", intent.mode.value, e)
                self._presentation.show_error(FETCH_FAILED_MESSAGE)
            return
        finally:
            if state.generation == generation:
                state.fetch_in_flight = False

        if state.generation != generation:
            logger.debug(
                "Discarding stale fetch result (generation %s, now %s)",
                generation,
                state.generation,
            )
            return

        batch = self._admit(raws, generation)
        if not batch:
            if append:
                logger.info("Append fetch returned no new records")
            elif intent.mode is FeedMode.AUTHOR_SEARCH:
                logger.info("No results for author %r, falling back to discovery", intent.author)
                await self.fetch_batch(FetchIntent.discovery(), append=False)
            else:
                logger.error("Fresh discovery fetch returned no usable records")
                self._presentation.show_error(NO_RESULTS_MESSAGE)
            return

        # Shuffle only the new batch; records already in the feed keep their order
        self._rng.shuffle(batch)
        added = state.append(batch)
        logger.info(
            "Appended %s records (%s total, generation %s)",
            len(added),
            len(state.records),
            generation,
        )
        if not append:
            for i in range(min(self._initial_materialize, len(state.records))):
                self.materialize_at(i)
            self._prefetch.warm(0)

    def _admit(self, raws: List[RawRecord], generation: int) -> List[ArtworkRecord]:
        """Drop records without an image or already seen; build feed records."""
        seen = set(self._state.seen_ids)
        out = []
        for raw in raws:
            if not raw.image_url:
                continue
            if raw.id in seen:
                continue
            seen.add(raw.id)
            out.append(ArtworkRecord.from_raw(raw, raw.author or self._unknown_author, generation))
        dropped = len(raws) - len(out)
        if dropped:
            logger.debug("Dropped %s records without image or already seen", dropped)
        return out

    # --- Materialization and enrichment ------------------------------------

    def materialize_at(self, index: int) -> bool:
        """Render the record at index and start its translations. Returns False if nothing to do."""
        state = self._state
        if index < 0 or index >= len(state.records):
            return False
        record = state.records[index]
        if record.id in state.materialized_ids:
            return False
        state.materialized_ids.add(record.id)
        self._presentation.render(record)
        self._dispatcher.spawn(
            self._enrich(record, "title", record.raw_title),
            name=f"translate:title:{record.id}",
        )
        if record.raw_description:
            self._dispatcher.spawn(
                self._enrich(record, "description", record.raw_description),
                name=f"translate:description:{record.id}",
            )
        return True

    async def _enrich(self, record: ArtworkRecord, field: str, text: str) -> None:
        try:
            translated = await self._translator.translate(text)
        except TranslationError as e:
            logger.debug("Translation unavailable for %s %s: %s", record.id, field, e)
            return
        if record.generation != self._state.generation:
            logger.debug("Discarding stale %s translation for %s", field, record.id)
            return
        if self._state.get(record.id) is not record:
            logger.debug("Record %s left the feed before its %s translation", record.id, field)
            return
        if not translated or translated == text:
            return
        setattr(record, f"display_{field}", translated)
        self._presentation.update_text(record.id, field, translated)

    # --- User and viewport events ------------------------------------------

    async def initialize(self) -> None:
        """Fresh discovery load."""
        await self.fetch_batch(FetchIntent.discovery(), append=False)

    async def pivot_to_similar(self, record: ArtworkRecord) -> None:
        """Restart the feed around record's author; unknown authors restart discovery."""
        if not record.author or record.author == self._unknown_author:
            logger.info("Pivot from %s with unknown author, restarting discovery", record.id)
            await self.fetch_batch(FetchIntent.discovery(), append=False)
            return
        await self.fetch_batch(FetchIntent.author_search(record.author), append=False)

    def on_tail_approached(self) -> Optional[asyncio.Task]:
        """Schedule a discovery append when the current index is near the end.

        Search feeds are bounded and never auto-extend.
        """
        state = self._state
        if state.mode is not FeedMode.DISCOVERY or not state.records:
            return None
        if state.current_index < len(state.records) - self._tail_threshold:
            return None
        return self.request_batch(FetchIntent.discovery(), append=True)

    def on_asset_failure(self, record_id: str) -> bool:
        """Evict a record whose image failed to load. Returns False if it was already gone."""
        state = self._state
        index = state.remove(record_id)
        if index is None:
            return False
        self._presentation.remove(record_id)
        if index <= state.current_index and state.current_index > 0:
            state.current_index -= 1
        logger.info(
            "Evicted %s after asset failure (was index %s, current %s)",
            record_id,
            index,
            state.current_index,
        )
        return True

    def jump_to_random(self) -> Optional[ArtworkRecord]:
        """Pick a loaded record other than the current one and materialize it."""
        records = self._state.records
        if len(records) < 2:
            return None
        index = self._rng.choice(
            [i for i in range(len(records)) if i != self._state.current_index]
        )
        self.materialize_at(index)
        return records[index]

    def snapshot(self) -> dict[str, Any]:
        state = self._state
        current = state.current_record
        return {
            "mode": state.mode.value,
            "author": state.author,
            "generation": state.generation,
            "current_index": state.current_index,
            "record_count": len(state.records),
            "fetch_in_flight": state.fetch_in_flight,
            "current": current.to_dict() if current else None,
        }
