"""Encore Storage Backend - Abstract Storage Interface.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class StorageConfig:
    """Storage backend configuration.

    Attributes:
        name: Backend name
        default_ttl: TTL in seconds used when a caller passes none
    """

    name: str = "storage"
    default_ttl: float = 3600


@dataclass
class StorageStats:
    """Storage backend statistics.

    Attributes:
        reads: Number of read operations
        writes: Number of write operations
        deletes: Number of delete operations
        errors: Number of errors
    """

    reads: int = 0
    writes: int = 0
    deletes: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


class StorageBackend(ABC):
    """Abstract storage backend for cached values.

    Implementations:
    - MemoryStore: In-process dictionary (fallback)
    - RedisStore: Remote Redis server

    Backends store plain values; expiry is handled by each backend.
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize backend.

        Args:
            config: Storage configuration
        """
        self.config = config or StorageConfig()
        self._stats = StorageStats()

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Get value by key.

        Args:
            key: Cache key

        Returns:
            Stored value or None
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Store value.

        Args:
            key: Cache key
            value: Value to store
            ttl: TTL in seconds

        Returns:
            True if stored
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete entry.

        Args:
            key: Cache key

        Returns:
            True if deleted
        """
        pass

    async def delete_many(self, keys: List[str]) -> int:
        """Delete multiple entries.

        Args:
            keys: Keys to delete

        Returns:
            Number deleted
        """
        count = 0
        for key in keys:
            if await self.delete(key):
                count += 1
        return count

    def get_stats(self) -> StorageStats:
        """Get storage statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = StorageStats()


__all__ = ["StorageBackend", "StorageConfig", "StorageStats"]
