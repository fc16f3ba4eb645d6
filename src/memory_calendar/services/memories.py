"""Calendar entry business logic."""

from dataclasses import dataclass
from typing import Protocol

from memory_calendar.domain.memories import MemoryEntry, MemoryKind


class MemoryValidationError(ValueError):
    """Raised when an entry write is missing or has invalid fields."""


class MemoryRepository(Protocol):
    """Persistence interface for calendar entries."""

    def list_entries(self) -> list[MemoryEntry]:
        """Return every stored entry, in any order."""

    def put_entry(self, entry: MemoryEntry) -> None:
        """Insert or replace the entry stored for its date."""

    def delete_entry(self, date: str) -> None:
        """Delete the entry stored for a date, if any."""


@dataclass
class MemoryService:
    """Application service for reading and curating entries."""

    repository: MemoryRepository

    def list_entries(self) -> list[MemoryEntry]:
        """Return all entries sorted by date."""
        return sorted(self.repository.list_entries(), key=lambda entry: entry.date)

    def save_entry(
        self,
        date: str | None,
        kind: str | None,
        caption: str | None = None,
        media: list[str] | None = None,
    ) -> MemoryEntry:
        """Validate and upsert the entry for a date."""
        if not date or not kind:
            raise MemoryValidationError("Missing required fields: date, type")
        try:
            MemoryKind(kind)
        except ValueError as exc:
            raise MemoryValidationError("Invalid type") from exc
        entry = MemoryEntry(
            date=date,
            kind=kind,
            caption=caption or "",
            media=[url for url in media or [] if url],
        )
        self.repository.put_entry(entry)
        return entry

    def delete_entry(self, date: str | None) -> None:
        """Remove the entry for a date."""
        if not date:
            raise MemoryValidationError("Missing required field: date")
        self.repository.delete_entry(date)
