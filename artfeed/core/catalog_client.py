"""Art Institute of Chicago catalog client over a shared httpx.AsyncClient."""
import html
import logging
import random
import re
from typing import Any, List, Optional

import httpx

from artfeed.config import (
    CATALOG_FIELDS,
    CATALOG_URL,
    IIIF_IMAGE_SIZE,
    PAGE_UNIVERSE,
    UNKNOWN_AUTHOR,
)
from artfeed.core.errors import CatalogError
from artfeed.models.artwork import RawRecord

logger = logging.getLogger(__name__)

_DEFAULT_IIIF_URL = "https://www.artic.edu/iiif/2"
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def _clean_text(value: Any) -> Optional[str]:
    """Strip HTML tags and collapse whitespace; None for empty values."""
    if not value or not isinstance(value, str):
        return None
    text = html.unescape(_TAG_RE.sub(" ", value))
    text = _SPACE_RE.sub(" ", text).strip()
    return text or None


def image_url_for(iiif_url: str, image_id: Optional[str]) -> Optional[str]:
    """Return the IIIF image URL for image_id, or None when the artwork has no image."""
    if not image_id or not isinstance(image_id, str):
        return None
    return f"{iiif_url.rstrip('/')}/{image_id}/full/{IIIF_IMAGE_SIZE}/0/default.jpg"


def map_artworks(payload: Any) -> List[RawRecord]:
    """Map an /artworks response body to RawRecords. Raises CatalogError if malformed."""
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise CatalogError("Catalog response has no data list")
    config = payload.get("config") or {}
    if not isinstance(config, dict):
        raise CatalogError("Catalog response config is not an object")
    iiif_url = config.get("iiif_url")
    if not isinstance(iiif_url, str) or not iiif_url:
        iiif_url = _DEFAULT_IIIF_URL
    out = []
    for item in payload["data"]:
        if not isinstance(item, dict) or item.get("id") is None:
            continue
        out.append(
            RawRecord(
                id=str(item["id"]),
                image_url=image_url_for(iiif_url, item.get("image_id")),
                author=_clean_text(item.get("artist_title")) or UNKNOWN_AUTHOR,
                title=_clean_text(item.get("title")) or "",
                description=_clean_text(item.get("description")),
            )
        )
    return out


class CatalogClient:
    """Fetches batches of artworks, either from a random page or filtered by author."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = CATALOG_URL,
        page_universe: int = PAGE_UNIVERSE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._page_universe = max(1, page_universe)
        self._rng = rng or random.Random()

    async def _get(self, path: str, params: dict) -> List[RawRecord]:
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(f"Catalog returned {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            raise CatalogError(f"Catalog request failed: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Catalog response is not JSON: {e}") from e
        return map_artworks(payload)

    async def fetch_random(self, batch_size: int) -> List[RawRecord]:
        """Return one batch from a page drawn uniformly out of the page universe."""
        page = self._rng.randint(1, self._page_universe)
        logger.debug("Catalog: random page %s (limit %s)", page, batch_size)
        return await self._get(
            "/artworks",
            {"page": page, "limit": batch_size, "fields": CATALOG_FIELDS},
        )

    async def fetch_by_author(self, name: str, batch_size: int) -> List[RawRecord]:
        """Return one batch of artworks whose artist matches name."""
        logger.debug("Catalog: search author %r (limit %s)", name, batch_size)
        return await self._get(
            "/artworks/search",
            {
                "q": name,
                "query[match][artist_title]": name,
                "limit": batch_size,
                "fields": CATALOG_FIELDS,
            },
        )
