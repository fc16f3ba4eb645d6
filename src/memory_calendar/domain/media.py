"""Domain models for bucket media."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MediaType(str, Enum):
    """Broad media family of an object."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaClassification:
    """Media family and browser support for a key."""

    media_type: MediaType
    web_displayable: bool


@dataclass(frozen=True)
class StoredObject:
    """Listing metadata for an object in the bucket."""

    key: str
    last_modified: datetime | None = None
    etag: str | None = None
    size: int = 0


@dataclass(frozen=True)
class MediaItem:
    """A media object as shown in the admin photo browser."""

    key: str
    url: str
    date: str | None
    media_type: MediaType
    web_displayable: bool


@dataclass(frozen=True)
class DeleteFailure:
    """A key the bucket refused to delete."""

    key: str
    code: str | None
    message: str | None


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a bulk object deletion."""

    deleted: list[str]
    errors: list[DeleteFailure]
