"""Process-local memo cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """String cache with per-entry expiry."""

    def get(self, key: str) -> str | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value for ttl_seconds."""


@dataclass
class InMemoryCache(Cache):
    """Size-bounded cache; the least recently used entry is evicted first."""

    max_entries: int = 10_000
    clock: Callable[[], float] = time.monotonic
    _entries: OrderedDict[str, tuple[str, float]] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self.clock() + ttl_seconds)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)
