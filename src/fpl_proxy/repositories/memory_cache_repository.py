"""In-memory implementation of CacheStore.

Used as a test double and for running the proxy without touching disk.
"""

import hashlib
import time
from collections.abc import Callable

from fpl_proxy.entities import CacheEntryEntity


class InMemoryCacheRepository:
    """Dict-backed cache store with an injectable clock."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.time
        self._entries: dict[str, CacheEntryEntity] = {}

    def key_for(self, target: str) -> str:
        return hashlib.sha256(target.encode("utf-8")).hexdigest()

    def lookup(self, key: str) -> CacheEntryEntity | None:
        return self._entries.get(key)

    def store(self, key: str, payload: bytes, content_type: str) -> CacheEntryEntity:
        entry = CacheEntryEntity(
            key=key,
            payload=bytes(payload),
            content_type=content_type,
            stored_at=self._clock(),
        )
        self._entries[key] = entry
        return entry

    def count_all(self) -> int:
        return len(self._entries)

    def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        return {
            "backend": "memory",
            "total_entries": len(self._entries),
            "total_size_bytes": sum(len(e.payload) for e in self._entries.values()),
        }
