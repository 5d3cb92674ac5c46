"""Errors raised by the catalog and translation clients."""


class ArtFeedError(Exception):
    """Base class for artfeed failures."""


class CatalogError(ArtFeedError):
    """Catalog fetch failed: network, non-success status, or malformed payload."""


class TranslationError(ArtFeedError):
    """Translation unavailable; callers keep the source text."""
