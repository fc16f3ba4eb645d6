"""Domain models for calendar entries."""

from dataclasses import dataclass, field
from enum import Enum


class MemoryKind(str, Enum):
    """Card layouts an entry can be rendered with."""

    TEXT = "text"
    PHOTO = "photo"
    GALLERY = "gallery"

    @classmethod
    def for_media(cls, media: list[str]) -> "MemoryKind":
        """Return the layout implied by the number of media URLs."""
        if not media:
            return cls.TEXT
        if len(media) == 1:
            return cls.PHOTO
        return cls.GALLERY


@dataclass(frozen=True)
class MemoryEntry:
    """A single calendar day's entry."""

    date: str
    kind: str
    caption: str
    media: list[str] = field(default_factory=list)
