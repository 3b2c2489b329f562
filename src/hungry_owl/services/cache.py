"""Cache abstractions for scored recipes and USDA lookups."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """Cache interface for JSON-compatible values with a TTL.

    A miss or a backend failure must only cost latency, never change results.
    """

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete_prefix(self, prefix: str) -> None:
        """Drop every entry whose key starts with ``prefix``."""


@dataclass(frozen=True)
class _CacheEntry:
    value: object
    expires_at: float


@dataclass
class InMemoryCache(Cache):
    """Process-local cache used when no Redis URL is configured.

    Route handlers run in a threadpool, so every access goes through one lock.
    """

    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: str) -> object | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = _CacheEntry(value, self.clock() + ttl_seconds)

    def delete_prefix(self, prefix: str) -> None:
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
