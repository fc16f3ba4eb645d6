"""Cleanup of live-photo video companions."""

import asyncio
import logging
from dataclasses import dataclass

from memory_calendar.adapters.s3_storage import MAX_DELETE_BATCH, ObjectStorage
from memory_calendar.domain.media import DeleteFailure

logger = logging.getLogger(__name__)

_STILL_EXTENSIONS = (".jpg", ".jpeg")
_MOTION_EXTENSIONS = (".mp4", ".mov")


def find_live_photo_companions(keys: list[str]) -> list[str]:
    """Return .mp4/.mov keys that share a base name with a .jpg/.jpeg key."""
    stills = {
        _base_name(key) for key in keys if key.lower().endswith(_STILL_EXTENSIONS)
    }
    return [
        key
        for key in keys
        if key.lower().endswith(_MOTION_EXTENSIONS) and _base_name(key) in stills
    ]


@dataclass(frozen=True)
class LivePhotoCleanupReport:
    """Outcome of a live-photo cleanup run."""

    candidates: list[str]
    deleted: int
    errors: list[DeleteFailure]


@dataclass
class LivePhotoCleaner:
    """Deletes the motion half of live photos from the bucket."""

    storage: ObjectStorage

    async def clean(
        self, prefix: str = "", dry_run: bool = False
    ) -> LivePhotoCleanupReport:
        """Find and, unless dry_run, delete live-photo companions under a prefix."""
        objects = await asyncio.to_thread(self.storage.list_objects, prefix or None)
        candidates = find_live_photo_companions([stored.key for stored in objects])
        logger.info(
            "Found %d .mp4/.mov file(s) with a matching .jpg/.jpeg", len(candidates)
        )
        if dry_run or not candidates:
            return LivePhotoCleanupReport(candidates=candidates, deleted=0, errors=[])
        deleted = 0
        errors: list[DeleteFailure] = []
        for start in range(0, len(candidates), MAX_DELETE_BATCH):
            batch = candidates[start : start + MAX_DELETE_BATCH]
            result = await asyncio.to_thread(self.storage.delete_objects, batch)
            deleted += len(result.deleted)
            for failure in result.errors:
                logger.error(
                    "Error deleting %s: %s %s",
                    failure.key,
                    failure.code,
                    failure.message,
                )
            errors.extend(result.errors)
            logger.info(
                "Deleted batch: %d (total %d/%d)",
                len(result.deleted),
                deleted,
                len(candidates),
            )
        return LivePhotoCleanupReport(
            candidates=candidates, deleted=deleted, errors=errors
        )


def _base_name(key: str) -> str:
    index = key.rfind(".")
    return key[:index] if index >= 0 else key
