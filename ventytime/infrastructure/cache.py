"""Event Cache — bounded in-process TTL cache for read-mostly event queries.

Invariants:
    - An entry is served only while its age < ttl
    - At most max_entries entries are held; the least recently used one is evicted first
    - Keys are namespaced by prefix so invalidate_prefix() drops one family at once
    - Values are stored as-is: callers cache immutable DTOs, never ORM instances

Design Decisions:
    - cachetools.TTLCache does expiry and size bounding; this wrapper adds prefix
      invalidation and hit/miss counters for the health endpoint
    - Single-process deployment: no lock (asyncio is single-threaded)
    - Timer injectable for tests
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from cachetools import TTLCache

from ventytime.config import get_settings

logger = logging.getLogger(__name__)

_MISSING = object()


class EventCache:
    """Key/value cache with a fixed time-to-live and a maximum entry count."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: TTLCache = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=clock,
        )
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        value = self._entries.get(key, _MISSING)
        if value is _MISSING:
            self.misses += 1
            return default
        self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, _MISSING) is not _MISSING

    def invalidate_prefix(self, prefix: str) -> int:
        keys = [k for k in list(self._entries.keys()) if k.startswith(prefix)]
        for key in keys:
            self._entries.pop(key, None)
        if keys:
            logger.debug(f"Cache invalidated {len(keys)} entries for '{prefix}'")
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "entries": len(self),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate_percent": round(self.hits / total * 100, 2) if total else 0,
        }


event_cache: EventCache | None = None


def get_event_cache() -> EventCache:
    """Process-wide event cache, created lazily from settings."""
    global event_cache
    if event_cache is None:
        settings = get_settings()
        event_cache = EventCache(settings.cache_ttl_seconds, settings.cache_max_entries)
    return event_cache
