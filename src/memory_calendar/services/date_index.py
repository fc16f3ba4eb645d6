"""Date to media index: build, prune and lookup."""

import asyncio
import json
import logging
from dataclasses import dataclass

from memory_calendar.adapters.s3_storage import ObjectNotFoundError, ObjectStorage
from memory_calendar.config import index_key
from memory_calendar.domain.media import StoredObject
from memory_calendar.services.capture_dates import (
    CaptureDateExtractor,
    extract_in_batches,
)
from memory_calendar.services.media import is_web_media, key_from_url, object_url

logger = logging.getLogger(__name__)

DateIndex = dict[str, list[str]]

EXTRACTION_BATCH_SIZE = 10


class IndexUnavailableError(RuntimeError):
    """Raised when the persisted index is missing or unreadable."""


@dataclass(frozen=True)
class IndexBuildReport:
    """Result of a full index rebuild."""

    objects_found: int
    index: DateIndex
    size_bytes: int
    uploaded: bool

    @property
    def dates(self) -> list[str]:
        """Distinct indexed days in ascending order."""
        return sorted(self.index)


@dataclass(frozen=True)
class IndexPruneReport:
    """Result of pruning missing objects from the index."""

    checked: int
    removed: int
    dates_removed: int
    index: DateIndex
    uploaded: bool


@dataclass
class DateIndexService:
    """Maintains and serves the persisted date-media index."""

    storage: ObjectStorage
    extractor: CaptureDateExtractor
    bucket: str
    region: str
    processed_prefix: str = "processed/"
    batch_size: int = EXTRACTION_BATCH_SIZE

    @property
    def index_key(self) -> str:
        """Storage key of the persisted index."""
        return index_key(self.processed_prefix)

    def url_for(self, key: str) -> str:
        """Return the public URL of an object key."""
        return object_url(self.bucket, self.region, key)

    async def load_index(self) -> DateIndex:
        """Fetch and parse the persisted index, skipping malformed dates."""
        index, _ = await self._read_index()
        return index

    async def _read_index(self) -> tuple[DateIndex, list[str]]:
        try:
            body = await asyncio.to_thread(
                self.storage.get_object_bytes, self.index_key
            )
        except ObjectNotFoundError as exc:
            raise IndexUnavailableError("Index file not found") from exc
        if not body:
            raise IndexUnavailableError("Empty index body")
        try:
            parsed = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise IndexUnavailableError("Invalid index JSON") from exc
        if not isinstance(parsed, dict):
            raise IndexUnavailableError("Invalid index JSON")
        index: DateIndex = {}
        malformed: list[str] = []
        for day, urls in parsed.items():
            if isinstance(urls, list):
                index[str(day)] = [str(url) for url in urls]
            else:
                malformed.append(str(day))
        if malformed:
            logger.warning(
                "Ignoring %d malformed index date(s): %s",
                len(malformed),
                ", ".join(malformed),
            )
        return index, malformed

    async def lookup(self, date: str, live_fallback: bool = False) -> list[str]:
        """Return the media URLs captured on a day."""
        try:
            index = await self.load_index()
        except IndexUnavailableError:
            if not live_fallback:
                raise
            logger.warning("Date-media index unavailable; scanning %s", date)
            return (await self._scan()).get(date, [])
        return list(index.get(date, []))

    async def build_index(self, dry_run: bool = False) -> IndexBuildReport:
        """Rebuild the whole index from the processed prefix."""
        logger.info(
            "Building date-media index for s3://%s/%s (dry run: %s)",
            self.bucket,
            self.processed_prefix,
            dry_run,
        )
        objects = await asyncio.to_thread(
            self.storage.list_objects, self.processed_prefix
        )
        media = [stored for stored in objects if is_web_media(stored.key)]
        logger.info("Found %d web media object(s) to index", len(media))
        index = await self._index(media)
        payload = json.dumps(index, indent=2).encode("utf-8")
        logger.info(
            "Indexed %d distinct date(s); index size %.1f KB",
            len(index),
            len(payload) / 1024,
        )
        if not media or dry_run:
            return IndexBuildReport(
                objects_found=len(media),
                index=index,
                size_bytes=len(payload),
                uploaded=False,
            )
        await asyncio.to_thread(
            self.storage.put_object, self.index_key, payload, "application/json"
        )
        logger.info("Uploaded date-media index to %s", self.index_key)
        return IndexBuildReport(
            objects_found=len(media),
            index=index,
            size_bytes=len(payload),
            uploaded=True,
        )

    async def prune_index(self, dry_run: bool = False) -> IndexPruneReport:
        """Drop index URLs whose objects no longer exist."""
        index, malformed = await self._read_index()
        total = sum(len(urls) for urls in index.values())
        logger.info("Loaded index: %d dates, %d URLs total", len(index), total)
        cleaned: DateIndex = {}
        checked = 0
        removed = 0
        for day, urls in index.items():
            kept: list[str] = []
            for url in urls:
                checked += 1
                if await self._still_exists(url):
                    kept.append(url)
                else:
                    removed += 1
                if checked % 100 == 0:
                    logger.info("Checked %d/%d", checked, total)
            if kept:
                cleaned[day] = kept
        dates_removed = len(index) + len(malformed) - len(cleaned)
        logger.info(
            "Checked %d URLs; removed %d missing file(s) and %d date(s)",
            checked,
            removed,
            dates_removed,
        )
        uploaded = False
        if (removed or dates_removed) and not dry_run:
            payload = json.dumps(cleaned, indent=2).encode("utf-8")
            await asyncio.to_thread(
                self.storage.put_object, self.index_key, payload, "application/json"
            )
            logger.info("Uploaded pruned index to %s", self.index_key)
            uploaded = True
        return IndexPruneReport(
            checked=checked,
            removed=removed,
            dates_removed=dates_removed,
            index=cleaned,
            uploaded=uploaded,
        )

    async def _still_exists(self, url: str) -> bool:
        key = key_from_url(url)
        if not key:
            logger.warning("Skipping malformed URL: %s", url)
            return False
        try:
            exists = await asyncio.to_thread(self.storage.object_exists, key)
        except Exception as exc:  # noqa: BLE001
            # Permission and transport errors keep the entry.
            logger.warning("Could not check %s: %s", key, exc)
            return True
        if not exists:
            logger.info("Removed: %s", key)
        return exists

    async def _scan(self) -> DateIndex:
        objects = await asyncio.to_thread(
            self.storage.list_objects, self.processed_prefix
        )
        return await self._index(
            [stored for stored in objects if is_web_media(stored.key)]
        )

    async def _index(self, media: list[StoredObject]) -> DateIndex:
        index: DateIndex = {}
        resolved = await extract_in_batches(self.extractor, media, self.batch_size)
        for stored, day in resolved:
            if not day:
                continue
            index.setdefault(day, []).append(self.url_for(stored.key))
        return index
