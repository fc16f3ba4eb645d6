"""Admin photo browser and bulk object deletion."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from memory_calendar.adapters.s3_storage import MAX_DELETE_BATCH, ObjectStorage
from memory_calendar.domain.media import DeleteResult, MediaItem
from memory_calendar.services.capture_dates import (
    CaptureDateExtractor,
    extract_in_batches,
)
from memory_calendar.services.date_index import (
    DateIndex,
    DateIndexService,
    IndexUnavailableError,
)
from memory_calendar.services.media import classify_media, is_media, key_from_url

logger = logging.getLogger(__name__)


class PhotoSource(str, Enum):
    """Which part of the bucket the browser lists."""

    PROCESSED = "processed"
    ORIGINALS = "originals"
    ALL = "all"


@dataclass
class PhotoBrowserService:
    """Lists bucket media with capture dates for curation."""

    storage: ObjectStorage
    extractor: CaptureDateExtractor
    date_index: DateIndexService

    async def list_photos(
        self, source: PhotoSource = PhotoSource.PROCESSED
    ) -> list[MediaItem]:
        """Return media items, dated first by date, then undated by key."""
        if source is PhotoSource.PROCESSED:
            try:
                index = await self.date_index.load_index()
            except IndexUnavailableError as exc:
                logger.warning(
                    "Failed to load processed index; falling back to S3 scan: %s", exc
                )
            else:
                return sort_media(_items_from_index(index))
        return sort_media(await self._scan(source))

    async def delete_objects(self, keys: list[str]) -> DeleteResult:
        """Delete the first 1000 keys and report per-key outcomes."""
        batch = keys[:MAX_DELETE_BATCH]
        result = await asyncio.to_thread(self.storage.delete_objects, batch)
        logger.info(
            "Deleted %d object(s), %d error(s)", len(result.deleted), len(result.errors)
        )
        return result

    async def _scan(self, source: PhotoSource) -> list[MediaItem]:
        processed_prefix = self.date_index.processed_prefix
        prefix = processed_prefix if source is PhotoSource.PROCESSED else None
        objects = await asyncio.to_thread(self.storage.list_objects, prefix)
        media = [
            stored
            for stored in objects
            if is_media(stored.key)
            and not (
                source is PhotoSource.ORIGINALS
                and stored.key.startswith(processed_prefix)
            )
        ]
        resolved = await extract_in_batches(
            self.extractor, media, self.date_index.batch_size, include_video=False
        )
        items = []
        for stored, day in resolved:
            classification = classify_media(stored.key)
            items.append(
                MediaItem(
                    key=stored.key,
                    url=self.date_index.url_for(stored.key),
                    date=day,
                    media_type=classification.media_type,
                    web_displayable=classification.web_displayable,
                )
            )
        return items


def sort_media(items: list[MediaItem]) -> list[MediaItem]:
    """Order dated items by date ahead of undated items by key."""
    dated = sorted((item for item in items if item.date), key=lambda item: item.date)
    undated = sorted((item for item in items if not item.date), key=lambda i: i.key)
    return dated + undated


def _items_from_index(index: DateIndex) -> list[MediaItem]:
    items = []
    for day, urls in index.items():
        for url in urls:
            key = key_from_url(url)
            if not key:
                continue
            classification = classify_media(key)
            items.append(
                MediaItem(
                    key=key,
                    url=url,
                    date=day,
                    media_type=classification.media_type,
                    web_displayable=classification.web_displayable,
                )
            )
    return items
