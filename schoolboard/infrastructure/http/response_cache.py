"""Short-lived cache of successful GET responses, invalidated per collection."""

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, tuple[tuple[str, str], ...]]


class ResponseCache:
    """In-process cache keyed by method, path and query parameters.

    Entries older than ``ttl_seconds`` are treated as missing; a TTL of 0
    disables caching altogether.
    """

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    @staticmethod
    def key(method: str, path: str, params: Mapping[str, Any] | None = None) -> CacheKey:
        items = tuple(sorted((str(k), str(v)) for k, v in (params or {}).items()))
        return method.upper(), path, items

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            return None
        logger.debug("Cache hit %s %s", key[0], key[1])
        return value

    def set(self, key: CacheKey, value: Any) -> None:
        if not self.enabled:
            return
        now = self._clock()
        self._prune(now)
        self._entries[key] = (now, value)

    def invalidate_collection(self, collection: str) -> int:
        """Drop every entry whose path belongs to ``collection``."""
        stale = [k for k in self._entries if _collection_of(k[1]) == collection]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self._ttl]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Pruned %d expired cache entries", len(expired))


def _collection_of(path: str) -> str:
    return path.strip("/").split("/", 1)[0]
