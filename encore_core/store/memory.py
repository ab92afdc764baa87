"""Encore Memory Store - In-Process Fallback Storage.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from encore_core.cache.entry import CacheEntry
from encore_core.store.backend import StorageBackend, StorageConfig

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, tuple)) and len(value) == 0)


class MemoryStore(StorageBackend):
    """In-memory storage used when Redis is unreachable.

    A plain dictionary of key -> CacheEntry living for the whole process.
    Expired entries are dropped when they are read; there is no
    background sweep and no size bound.

    Example:
        store = MemoryStore()
        await store.set("events:all", [{"slug": "spring-concert"}], ttl=60)
        events = await store.get("events:all")
    """

    def __init__(
        self,
        config: Optional[StorageConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize memory store.

        Args:
            config: Storage configuration
            clock: Time source in seconds (injectable for tests)
        """
        super().__init__(config)
        self._data: Dict[str, CacheEntry] = {}
        self._clock = clock

    async def get(self, key: str) -> Any:
        """Get a live value, evicting it if expired.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        self._stats.reads += 1
        entry = self._data.get(key)
        if entry is None:
            return None

        if entry.is_expired_at(self._clock()):
            del self._data[key]
            return None

        return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Store value.

        None and empty sequences are not worth caching and are refused.

        Args:
            key: Cache key
            value: Value to store
            ttl: TTL in seconds

        Returns:
            True if stored
        """
        if _is_empty(value):
            logger.debug(f"Skipping memory cache for empty value: {key}")
            return False

        if ttl is None:
            ttl = self.config.default_ttl

        self._data[key] = CacheEntry.create(value, ttl, now=self._clock())
        self._stats.writes += 1
        return True

    async def delete(self, key: str) -> bool:
        """Delete entry.

        Args:
            key: Cache key

        Returns:
            True if the key was present
        """
        if key in self._data:
            del self._data[key]
            self._stats.deletes += 1
            return True
        return False

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number cleared
        """
        count = len(self._data)
        self._data.clear()
        return count

    def keys(self) -> List[str]:
        """Get all stored keys, expired or not."""
        return list(self._data.keys())

    def size(self) -> int:
        """Get entry count."""
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"MemoryStore(entries={len(self._data)})"


__all__ = ["MemoryStore"]
