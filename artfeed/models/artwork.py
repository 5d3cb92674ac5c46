"""Artwork records as returned by the catalog and as shown in the feed."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RawRecord:
    """Catalog response item, before it is admitted to the feed."""
    id: str
    image_url: Optional[str]
    author: Optional[str]
    title: str
    description: Optional[str] = None


@dataclass
class ArtworkRecord:
    """Feed element. display_* start equal to raw_* and are replaced by translations."""
    id: str
    image_url: str
    author: str
    raw_title: str
    raw_description: Optional[str]
    display_title: str
    display_description: Optional[str]
    generation: int = 0

    @classmethod
    def from_raw(cls, raw: RawRecord, author: str, generation: int) -> "ArtworkRecord":
        return cls(
            id=raw.id,
            image_url=raw.image_url or "",
            author=author,
            raw_title=raw.title,
            raw_description=raw.description,
            display_title=raw.title,
            display_description=raw.description,
            generation=generation,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "author": self.author,
            "title": self.display_title,
            "description": self.display_description,
            "raw_title": self.raw_title,
            "raw_description": self.raw_description,
        }
