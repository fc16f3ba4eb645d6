"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from memory_calendar.adapters.ffprobe_client import FfprobeClient
from memory_calendar.adapters.s3_storage import Boto3ObjectStorage, ObjectStorage
from memory_calendar.adapters.supabase_memory_repository import (
    SupabaseMemoryRepository,
    UnconfiguredMemoryRepository,
)
from memory_calendar.config import Settings
from memory_calendar.services.cache import InMemoryCache
from memory_calendar.services.capture_dates import CaptureDateExtractor
from memory_calendar.services.date_index import DateIndexService
from memory_calendar.services.live_photos import LivePhotoCleaner
from memory_calendar.services.memories import MemoryRepository, MemoryService
from memory_calendar.services.photos import PhotoBrowserService
from memory_calendar.services.tokens import TokenCodec

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_codec: TokenCodec
    storage: ObjectStorage
    memory_service: MemoryService
    date_index_service: DateIndexService
    photo_browser_service: PhotoBrowserService
    live_photo_cleaner: LivePhotoCleaner
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    memory_repository = _memory_repository(resolved_settings)
    storage = Boto3ObjectStorage.create(
        bucket=resolved_settings.s3_bucket_name,
        region=resolved_settings.aws_region,
        access_key_id=resolved_settings.aws_access_key_id,
        secret_access_key=resolved_settings.aws_secret_access_key,
    )
    extractor = CaptureDateExtractor(
        storage=storage,
        probe=FfprobeClient(),
        cache=InMemoryCache(),
        cache_ttl_seconds=resolved_settings.capture_date_cache_ttl_seconds,
    )
    date_index_service = DateIndexService(
        storage=storage,
        extractor=extractor,
        bucket=resolved_settings.s3_bucket_name,
        region=resolved_settings.aws_region,
        processed_prefix=resolved_settings.s3_processed_prefix,
    )

    async def close_resources() -> None:
        storage.client.close()

    return AppContainer(
        settings=resolved_settings,
        token_codec=TokenCodec(resolved_settings.auth_secret),
        storage=storage,
        memory_service=MemoryService(memory_repository),
        date_index_service=date_index_service,
        photo_browser_service=PhotoBrowserService(
            storage=storage, extractor=extractor, date_index=date_index_service
        ),
        live_photo_cleaner=LivePhotoCleaner(storage),
        close_resources=close_resources,
    )


def _memory_repository(settings: Settings) -> MemoryRepository:
    if not settings.supabase_url or not settings.supabase_service_key:
        logger.warning("Supabase is not configured; calendar entries are unavailable")
        return UnconfiguredMemoryRepository()
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseMemoryRepository(client, table=settings.memories_table)
