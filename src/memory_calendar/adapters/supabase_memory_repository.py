"""Supabase-backed calendar entry repository."""

from dataclasses import dataclass

from supabase import Client

from memory_calendar.domain.memories import MemoryEntry
from memory_calendar.services.memories import MemoryRepository


@dataclass
class SupabaseMemoryRepository(MemoryRepository):
    """Supabase implementation keyed by the entry date."""

    client: Client
    table: str = "valentine_memories"

    def list_entries(self) -> list[MemoryEntry]:
        """Return every stored entry."""
        response = (
            self.client.table(self.table).select("date_id, type, text, media").execute()
        )
        entries = []
        for row in response.data or []:
            media = row.get("media")
            entries.append(
                MemoryEntry(
                    date=str(row["date_id"]),
                    kind=str(row.get("type") or ""),
                    caption=str(row.get("text") or ""),
                    media=list(media) if isinstance(media, list) else [],
                )
            )
        return entries

    def put_entry(self, entry: MemoryEntry) -> None:
        """Insert or replace the entry stored for its date."""
        # Every column is written so a replaced row never keeps stale media.
        self.client.table(self.table).upsert(
            {
                "date_id": entry.date,
                "type": entry.kind,
                "text": entry.caption,
                "media": entry.media or None,
            },
            on_conflict="date_id",
        ).execute()

    def delete_entry(self, date: str) -> None:
        """Delete the entry stored for a date."""
        self.client.table(self.table).delete().eq("date_id", date).execute()


class MemoryStoreNotConfiguredError(RuntimeError):
    """Raised when entries are accessed without Supabase credentials."""


class UnconfiguredMemoryRepository(MemoryRepository):
    """Stand-in used when SUPABASE_URL or SUPABASE_SERVICE_KEY is unset."""

    def list_entries(self) -> list[MemoryEntry]:
        raise MemoryStoreNotConfiguredError(_NOT_CONFIGURED)

    def put_entry(self, entry: MemoryEntry) -> None:
        raise MemoryStoreNotConfiguredError(_NOT_CONFIGURED)

    def delete_entry(self, date: str) -> None:
        raise MemoryStoreNotConfiguredError(_NOT_CONFIGURED)


_NOT_CONFIGURED = "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set"
