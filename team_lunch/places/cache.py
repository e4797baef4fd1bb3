from __future__ import annotations

import time
from typing import Any


class LookupCache:
    """TTL cache for one-shot Places lookups (text search, place details).

    Entries are keyed by ``(operation, argument)``; nearby searches are not
    cached because their continuation tokens expire upstream.
    """

    def __init__(self, ttl_seconds: int = 300) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: dict[tuple[str, str], tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, operation: str, argument: str) -> Any | None:
        key = (operation, argument)
        entry = self._entries.get(key)
        if entry is not None:
            stored_at, value = entry
            if time.monotonic() - stored_at < self.ttl_seconds:
                self.hits += 1
                return value
            del self._entries[key]
        self.misses += 1
        return None

    def set(self, operation: str, argument: str, value: Any) -> None:
        self._entries[(operation, argument)] = (time.monotonic(), value)

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "size": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0


lookup_cache = LookupCache()
