"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field


class ViewerLoginRequest(BaseModel):
    """Viewer password login payload."""

    password: str | None = None


class AdminLoginRequest(BaseModel):
    """Admin PIN login payload."""

    pin: str | None = None


class MemoryUpsertRequest(BaseModel):
    """Calendar entry write payload."""

    date: str | None = None
    type: str | None = None
    text: str | None = None
    media: list[str] | None = None


class MemoryDeleteRequest(BaseModel):
    """Calendar entry delete payload."""

    date: str | None = None


class DeleteObjectsRequest(BaseModel):
    """Bulk object delete payload."""

    keys: list[str] = Field(default_factory=list)
