"""Core services: catalog and translation clients, feed engine, viewport tracking, prefetch."""
from artfeed.core.feed_engine import FeedEngine
from artfeed.core.viewport import SlidePosition, ViewportTracker

__all__ = ["FeedEngine", "SlidePosition", "ViewportTracker"]
