"""Capture-date extraction from embedded media metadata."""

import asyncio
import logging
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path

from PIL import Image
from PIL.ExifTags import IFD, Base
from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

from memory_calendar.adapters.ffprobe_client import VideoProbe
from memory_calendar.adapters.s3_storage import ObjectStorage
from memory_calendar.domain.media import MediaType, StoredObject
from memory_calendar.services.cache import Cache
from memory_calendar.services.media import classify_media, extension, format_day

register_heif_opener()

logger = logging.getLogger(__name__)

# EXIF headers sit at the start of the file; 64 KiB always covers them.
EXIF_HEADER_RANGE = "bytes=0-65535"

_EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
_UNDATED = ""


def read_exif_date(data: bytes) -> str | None:
    """Return the capture day stored in an image's EXIF header.

    Tags are tried in order: DateTimeOriginal, DateTimeDigitized (the
    "create" date) and DateTime (the "modify" date). The first one holding a
    parseable timestamp wins. EXIF stamps are local wall-clock times, so the
    day is taken as written.
    """
    with Image.open(BytesIO(data)) as image:
        exif = image.getexif()
    exif_ifd = exif.get_ifd(IFD.Exif)
    candidates = (
        exif_ifd.get(Base.DateTimeOriginal),
        exif_ifd.get(Base.DateTimeDigitized),
        exif.get(Base.DateTime),
    )
    for value in candidates:
        moment = _parse_exif_timestamp(value)
        if moment is not None:
            return format_day(moment)
    return None


def parse_creation_time(value: str | None) -> str | None:
    """Parse an ISO-8601 container timestamp into a local calendar day."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    return format_day(moment)


@dataclass
class CaptureDateExtractor:
    """Resolves the day a photo or video was captured."""

    storage: ObjectStorage
    probe: VideoProbe
    cache: Cache
    cache_ttl_seconds: int = 24 * 60 * 60

    async def extract(
        self, stored: StoredObject, include_video: bool = True
    ) -> str | None:
        """Return the capture day of an object, or None when undated."""
        if classify_media(stored.key).media_type is MediaType.VIDEO:
            if not include_video:
                return None
            return await self._memoised(stored, self._video_date)
        return await self._memoised(stored, self._image_date)

    async def _memoised(
        self,
        stored: StoredObject,
        resolve: Callable[[StoredObject], Awaitable[str | None]],
    ) -> str | None:
        cache_key = f"capture-date:{stored.key}:{stored.etag or ''}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached or None
        day = await resolve(stored)
        logger.debug("Capture date of %s: %s", stored.key, day or "unknown")
        self.cache.set(cache_key, day or _UNDATED, self.cache_ttl_seconds)
        return day

    async def _image_date(self, stored: StoredObject) -> str | None:
        try:
            header = await asyncio.to_thread(
                self.storage.get_object_bytes, stored.key, EXIF_HEADER_RANGE
            )
            return read_exif_date(header)
        except Exception as exc:  # noqa: BLE001
            logger.warning("EXIF parse failed for %s: %s", stored.key, exc)
            return None

    async def _video_date(self, stored: StoredObject) -> str | None:
        day = await self._probe_video(stored)
        if day is None and stored.last_modified is not None:
            day = format_day(stored.last_modified)
        return day

    async def _probe_video(self, stored: StoredObject) -> str | None:
        suffix = extension(stored.key) or ".mp4"
        try:
            with tempfile.TemporaryDirectory(prefix="video-meta-") as tmp_dir:
                path = Path(tmp_dir) / f"video{suffix}"
                await asyncio.to_thread(self.storage.download_file, stored.key, path)
                raw = await self.probe.creation_time(path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("ffprobe error for %s: %s", stored.key, exc)
            return None
        return parse_creation_time(raw)


def _parse_exif_timestamp(value: object) -> datetime | None:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    text = value.strip().rstrip("\x00")[:19]
    try:
        return datetime.strptime(text, _EXIF_DATE_FORMAT)
    except ValueError:
        return None


async def extract_in_batches(
    extractor: CaptureDateExtractor,
    objects: list[StoredObject],
    batch_size: int = 10,
    include_video: bool = True,
) -> list[tuple[StoredObject, str | None]]:
    """Resolve capture days batch by batch, concurrently within each batch."""
    results: list[tuple[StoredObject, str | None]] = []
    for start in range(0, len(objects), batch_size):
        batch = objects[start : start + batch_size]
        logger.info(
            "Processing batch %d-%d of %d",
            start + 1,
            start + len(batch),
            len(objects),
        )
        days = await asyncio.gather(
            *(
                extractor.extract(stored, include_video=include_video)
                for stored in batch
            )
        )
        results.extend(zip(batch, days, strict=True))
    return results
