"""Viewport tracker: midpoint resolution and current-index transitions."""
import asyncio

from artfeed.core.viewport import SlidePosition, resolve_slide

from conftest import batch, make_harness

SLIDES = [
    SlidePosition("a", 0, 100),
    SlidePosition("b", 100, 100),
    SlidePosition("c", 200, 100),
]


def test_resolve_slide_uses_viewport_midpoint():
    assert resolve_slide(0, 100, SLIDES) == "a"
    assert resolve_slide(60, 100, SLIDES) == "b"
    assert resolve_slide(180, 100, SLIDES) == "c"


def test_resolve_slide_outside_all_slides():
    assert resolve_slide(500, 100, SLIDES) is None
    assert resolve_slide(0, 100, []) is None


def test_resolve_slide_handles_jumps_and_uneven_heights():
    slides = [SlidePosition("a", 0, 50), SlidePosition("b", 50, 900), SlidePosition("c", 950, 80)]
    assert resolve_slide(920, 100, slides) == "c"
    assert resolve_slide(0, 600, slides) == "b"


def _loaded(count=10):
    async def scenario():
        h = make_harness()
        h.catalog.random_batches = [batch(0, count)]
        await h.engine.initialize()
        await h.dispatcher.drain()
        return h

    return asyncio.run(scenario())


def test_viewport_change_updates_current_and_looks_ahead():
    async def scenario():
        h = make_harness()
        h.catalog.random_batches = [batch(0, 10)]
        await h.engine.initialize()
        await h.dispatcher.drain()
        h.warmer.urls.clear()
        changed = h.scroll_to(4)
        await h.dispatcher.drain()
        return h, changed

    h, changed = asyncio.run(scenario())
    assert changed
    assert h.state.current_index == 4
    assert h.state.records[5].id in h.board
    # look-ahead is one record, no look-behind
    assert h.state.records[3].id not in h.board
    assert h.warmer.urls == [r.image_url for r in h.state.records[5:7]]
    assert h.catalog.count("random") == 1


def test_same_index_is_not_a_transition():
    h = _loaded()
    h.warmer.urls.clear()
    assert not h.tracker.on_viewport_change(0, 100, h.positions())
    assert h.warmer.urls == []


def test_unknown_slide_id_changes_nothing():
    h = _loaded()
    assert not h.tracker.on_viewport_change(0, 100, [SlidePosition("gone", 0, 100)])
    assert h.state.current_index == 0


def test_viewport_near_tail_requests_append():
    async def scenario():
        h = make_harness()
        h.catalog.random_batches = [batch(0, 10), batch(10, 20)]
        await h.engine.initialize()
        h.scroll_to(7)
        await h.dispatcher.drain()
        return h

    h = asyncio.run(scenario())
    assert h.catalog.count("random") == 2
    assert len(h.state.records) == 20
