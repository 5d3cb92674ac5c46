"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from artfeed.api.state import AppState, get_state
from artfeed.config import ARTFEED_WEB_ORIGIN

# Import routes after state to avoid circular imports
from artfeed.api.routes import feed

__all__ = ["app", "AppState", "get_state"]

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger(__name__).info("ArtFeed API ready")
    yield
    await _state.aclose()


app = FastAPI(
    title="ArtFeed API",
    description="Local REST API for the scrolling artwork feed",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[ARTFEED_WEB_ORIGIN] if ARTFEED_WEB_ORIGIN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(feed.router, prefix="/api/feed", tags=["feed"])


@app.get("/health")
def health():
    return {"ok": True}
