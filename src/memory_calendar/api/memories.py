"""Calendar entry endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from memory_calendar.api.auth import require_admin, require_viewer
from memory_calendar.api.models import MemoryDeleteRequest, MemoryUpsertRequest
from memory_calendar.domain.memories import MemoryEntry
from memory_calendar.services.memories import MemoryValidationError

if TYPE_CHECKING:
    from memory_calendar.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/memories", tags=["memories"])


@router.get("", dependencies=[Depends(require_viewer)])
async def list_memories(
    request: Request, response: Response
) -> list[dict[str, object]]:
    """Return every entry sorted by date."""
    container: AppContainer = request.app.state.container
    try:
        entries = container.memory_service.list_entries()
    except Exception as exc:
        logger.exception("Memory scan error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch memories",
        ) from exc
    response.headers["Cache-Control"] = "s-maxage=60, stale-while-revalidate=30"
    return [_serialize_entry(entry) for entry in entries]


@router.put("", dependencies=[Depends(require_admin)])
async def upsert_memory(
    request: Request, payload: MemoryUpsertRequest | None = None
) -> dict[str, bool]:
    """Create or replace the entry for a date."""
    container: AppContainer = request.app.state.container
    body = payload or MemoryUpsertRequest()
    try:
        container.memory_service.save_entry(
            date=body.date, kind=body.type, caption=body.text, media=body.media
        )
    except MemoryValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except Exception as exc:
        logger.exception("Memory put error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save memory",
        ) from exc
    return {"ok": True}


@router.delete("", dependencies=[Depends(require_admin)])
async def delete_memory(
    request: Request, payload: MemoryDeleteRequest | None = None
) -> dict[str, bool]:
    """Remove the entry for a date."""
    container: AppContainer = request.app.state.container
    body = payload or MemoryDeleteRequest()
    try:
        container.memory_service.delete_entry(body.date)
    except MemoryValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except Exception as exc:
        logger.exception("Memory delete error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete memory",
        ) from exc
    return {"ok": True}


def _serialize_entry(entry: MemoryEntry) -> dict[str, object]:
    data: dict[str, object] = {
        "date": entry.date,
        "type": entry.kind,
        "text": entry.caption,
    }
    if entry.media:
        data["media"] = entry.media
    return data
