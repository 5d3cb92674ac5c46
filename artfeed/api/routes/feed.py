"""Feed endpoints: initial load, viewport reports, pivots, random jumps and asset failures."""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from artfeed.api.state import AppState, get_state
from artfeed.core.viewport import SlidePosition

router = APIRouter()


class SlideBody(BaseModel):
    record_id: str
    offset_top: float
    height: float


class ViewportBody(BaseModel):
    top: float
    height: float
    slides: List[SlideBody] = []


class PivotBody(BaseModel):
    record_id: Optional[str] = None


@router.get("/")
async def get_feed(state: AppState = Depends(get_state)):
    """Return mode, generation, current index and the current record."""
    return state.engine.snapshot()


@router.get("/slides")
async def get_slides(state: AppState = Depends(get_state)):
    """Return rendered slides in feed order and the last error, if any."""
    return {"slides": state.slides(), "error": state.board.error}


@router.post("/init")
async def init_feed(state: AppState = Depends(get_state)):
    """Start a fresh discovery feed."""
    await state.engine.initialize()
    if state.board.error:
        raise HTTPException(status_code=502, detail=state.board.error)
    return {**state.engine.snapshot(), "slides": state.slides()}


@router.post("/viewport")
async def report_viewport(body: ViewportBody, state: AppState = Depends(get_state)):
    """Report scroll geometry; updates the current record and triggers look-ahead."""
    positions = [
        SlidePosition(record_id=s.record_id, offset_top=s.offset_top, height=s.height)
        for s in body.slides
    ]
    changed = state.viewport.on_viewport_change(body.top, body.height, positions)
    return {"changed": changed, "current_index": state.feed.current_index}


@router.post("/pivot")
async def pivot(
    body: PivotBody | None = Body(None),
    state: AppState = Depends(get_state),
):
    """Find similar: restart the feed around a record's author (default: current record)."""
    record_id = body.record_id if body else None
    if record_id:
        record = state.feed.get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Record not found")
    else:
        record = state.feed.current_record
        if record is None:
            raise HTTPException(status_code=409, detail="Feed is empty")
    await state.engine.pivot_to_similar(record)
    if state.board.error:
        raise HTTPException(status_code=502, detail=state.board.error)
    return {**state.engine.snapshot(), "slides": state.slides()}


@router.post("/random")
async def random_jump(state: AppState = Depends(get_state)):
    """Pick another loaded record for the front-end to scroll to."""
    record = state.engine.jump_to_random()
    if record is None:
        raise HTTPException(status_code=409, detail="Not enough records loaded")
    return {"record": record.to_dict()}


@router.post("/assets/{record_id}/failed")
async def asset_failed(record_id: str, state: AppState = Depends(get_state)):
    """Report that a record's image failed to load; the record is evicted."""
    removed = state.engine.on_asset_failure(record_id)
    return {"removed": removed, "current_index": state.feed.current_index}
