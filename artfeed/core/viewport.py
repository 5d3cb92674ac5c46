"""Viewport tracking: derive the current record from scroll geometry."""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from artfeed.core.feed_engine import FeedEngine
from artfeed.core.prefetch import PrefetchPolicy
from artfeed.models.feed import FeedState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlidePosition:
    """Vertical span of one rendered slide, as reported by the front-end."""
    record_id: str
    offset_top: float
    height: float


def resolve_slide(top: float, height: float, positions: Iterable[SlidePosition]) -> Optional[str]:
    """Return the id of the slide whose span contains the viewport midpoint, or None."""
    midpoint = top + height / 2
    for slide in positions:
        if slide.offset_top <= midpoint <= slide.offset_top + slide.height:
            return slide.record_id
    return None


class ViewportTracker:
    """Maps viewport changes to current-index transitions and notifies the engine."""

    def __init__(self, state: FeedState, engine: FeedEngine, prefetch: PrefetchPolicy) -> None:
        self._state = state
        self._engine = engine
        self._prefetch = prefetch

    def on_viewport_change(
        self, top: float, height: float, positions: Iterable[SlidePosition]
    ) -> bool:
        """Update the current index from geometry. Returns True if it changed."""
        record_id = resolve_slide(top, height, positions)
        if record_id is None:
            return False
        index = self._state.index_of(record_id)
        if index is None or index == self._state.current_index:
            return False
        self._state.current_index = index
        logger.debug("Current index -> %s (%s)", index, record_id)
        # Records are append-only, so looking one ahead is enough
        self._engine.materialize_at(index + 1)
        self._prefetch.warm(index)
        self._engine.on_tail_approached()
        return True
