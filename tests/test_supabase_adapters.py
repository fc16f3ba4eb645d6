"""Tests for the Supabase entry repository."""

from dataclasses import dataclass, field

from memory_calendar.adapters.supabase_memory_repository import (
    SupabaseMemoryRepository,
)
from memory_calendar.domain.memories import MemoryEntry


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: list[dict[str, object]] = field(default_factory=list)
    last_columns: str | None = None
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)

    def select(self, columns: str) -> "FakeTable":
        self.actions.append("select")
        self.last_columns = columns
        return self

    def upsert(self, payload: object, on_conflict: str = "") -> "FakeTable":
        self.actions.append("upsert")
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self.actions.append("delete")
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def execute(self) -> FakeResponse:
        if self.actions and self.actions[-1] == "select":
            return FakeResponse(data=self.rows)
        return FakeResponse(data=[])


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_list_entries_maps_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("valentine_memories")
    table.rows = [
        {
            "date_id": "2026-02-14",
            "type": "gallery",
            "text": "Happy Valentine's",
            "media": ["https://x/1.jpg", "https://x/2.jpg"],
        },
        {"date_id": "2026-02-13", "type": "text", "text": None, "media": None},
    ]

    entries = SupabaseMemoryRepository(client).list_entries()

    assert table.last_columns == "date_id, type, text, media"
    assert entries == [
        MemoryEntry(
            date="2026-02-14",
            kind="gallery",
            caption="Happy Valentine's",
            media=["https://x/1.jpg", "https://x/2.jpg"],
        ),
        MemoryEntry(date="2026-02-13", kind="text", caption="", media=[]),
    ]


def test_put_entry_upserts_by_date() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseMemoryRepository(client, table="memories")

    repository.put_entry(MemoryEntry(date="2026-02-14", kind="text", caption="hi"))

    table = client.tables["memories"]
    assert table.last_on_conflict == "date_id"
    assert table.last_payload == {
        "date_id": "2026-02-14",
        "type": "text",
        "text": "hi",
        "media": None,
    }


def test_delete_entry_filters_by_date() -> None:
    client = FakeSupabaseClient()

    SupabaseMemoryRepository(client).delete_entry("2026-02-14")

    table = client.tables["valentine_memories"]
    assert table.actions == ["delete"]
    assert table.last_filters == [("date_id", "2026-02-14")]
