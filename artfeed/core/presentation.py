"""Presentation layer contract and the server-side slide board the front-end polls."""
import logging
from typing import Dict, List, Optional, Protocol

from artfeed.models.artwork import ArtworkRecord

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "description")


class Presentation(Protocol):
    """What the feed engine needs from whatever renders the feed."""

    def render(self, record: ArtworkRecord) -> None: ...

    def remove(self, record_id: str) -> None: ...

    def update_text(self, record_id: str, field: str, value: str) -> None: ...

    def clear(self) -> None: ...

    def show_error(self, message: str) -> None: ...


class SlideBoard:
    """In-memory rendered view: one slide per materialized record, in feed order.

    Slides are keyed by record id. update_text for a slide that is no longer
    on the board is ignored.
    """

    def __init__(self) -> None:
        self._slides: Dict[str, dict] = {}
        self.error: Optional[str] = None

    def render(self, record: ArtworkRecord) -> None:
        self._slides[record.id] = {
            "id": record.id,
            "image_url": record.image_url,
            "author": record.author,
            "title": record.display_title,
            "description": record.display_description,
        }
        self.error = None

    def remove(self, record_id: str) -> None:
        self._slides.pop(record_id, None)

    def update_text(self, record_id: str, field: str, value: str) -> None:
        if field not in TEXT_FIELDS:
            raise ValueError(f"Unknown text field: {field}")
        slide = self._slides.get(record_id)
        if slide is None:
            return
        slide[field] = value

    def clear(self) -> None:
        self._slides.clear()
        self.error = None

    def show_error(self, message: str) -> None:
        logger.warning("Feed error shown: %s", message)
        self.error = message

    def slides(self, order: List[str]) -> List[dict]:
        """Return rendered slides following the given id order."""
        return [self._slides[i] for i in order if i in self._slides]

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._slides

    def __len__(self) -> int:
        return len(self._slides)
