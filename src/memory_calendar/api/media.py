"""Media lookup, photo browser and bulk delete endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from memory_calendar.api.auth import require_admin, require_viewer
from memory_calendar.api.models import DeleteObjectsRequest
from memory_calendar.domain.media import MediaItem
from memory_calendar.services.photos import PhotoSource

if TYPE_CHECKING:
    from memory_calendar.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["media"])

_EDGE_CACHE = "s-maxage=120, stale-while-revalidate=60"


def _require_bucket(container: AppContainer) -> None:
    if not container.settings.s3_bucket_name:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="S3_BUCKET_NAME not configured",
        )


@router.get("/date-media", dependencies=[Depends(require_viewer)])
async def date_media(
    request: Request, response: Response, date: str | None = None
) -> dict[str, object]:
    """Return the media URLs captured on a day."""
    container: AppContainer = request.app.state.container
    _require_bucket(container)
    if not date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required query param: date",
        )
    try:
        urls = await container.date_index_service.lookup(
            date, live_fallback=container.settings.date_media_live_fallback
        )
    except Exception as exc:
        logger.exception("date-media error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load media for date",
        ) from exc
    response.headers["Cache-Control"] = _EDGE_CACHE
    return {"date": date, "urls": urls}


@router.get("/admin/photos", dependencies=[Depends(require_admin)])
async def list_photos(
    request: Request, response: Response, source: str = "processed"
) -> list[dict[str, object]]:
    """List bucket media with capture dates for curation."""
    container: AppContainer = request.app.state.container
    _require_bucket(container)
    try:
        photo_source = PhotoSource(source)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid source"
        ) from exc
    try:
        items = await container.photo_browser_service.list_photos(photo_source)
    except Exception as exc:
        logger.exception("S3 list/EXIF error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list photos",
        ) from exc
    response.headers["Cache-Control"] = _EDGE_CACHE
    return [_serialize_item(item) for item in items]


@router.api_route(
    "/admin/photos/delete",
    methods=["POST", "DELETE"],
    dependencies=[Depends(require_admin)],
)
async def delete_photos(
    request: Request, payload: DeleteObjectsRequest | None = None
) -> dict[str, object]:
    """Delete up to 1000 bucket objects and report per-key outcomes."""
    container: AppContainer = request.app.state.container
    _require_bucket(container)
    keys = payload.keys if payload else []
    if not keys:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must include keys: string[]",
        )
    try:
        result = await container.photo_browser_service.delete_objects(keys)
    except Exception as exc:
        logger.exception("S3 delete error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete objects from S3",
        ) from exc
    body: dict[str, object] = {"deleted": result.deleted}
    if result.errors:
        body["errors"] = [
            {"key": error.key, "code": error.code, "message": error.message}
            for error in result.errors
        ]
        body["message"] = (
            f"Deleted {len(result.deleted)}, {len(result.errors)} error(s)."
        )
    else:
        body["message"] = f"Deleted {len(result.deleted)} file(s)."
    return body


def _serialize_item(item: MediaItem) -> dict[str, object]:
    return {
        "key": item.key,
        "url": item.url,
        "date": item.date,
        "webDisplayable": item.web_displayable,
        "mediaType": item.media_type.value,
    }
