"""Encore Redis Store - Redis Storage Backend.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

from encore_core.protocol.serializer import JSONSerializer, Serializer
from encore_core.store.backend import StorageBackend, StorageConfig

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


@dataclass
class RedisConfig(StorageConfig):
    """Redis-specific configuration.

    Attributes:
        url: Connection string, e.g. ``redis://localhost:6379/0``
        socket_timeout: Socket timeout
        socket_connect_timeout: Connection timeout
        scan_count: Batch size hint for SCAN
    """

    name: str = "redis"
    url: Optional[str] = None
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    scan_count: int = 100


def create_redis_client(config: RedisConfig) -> "Redis":
    """Build an asyncio Redis client from the configured URL.

    The client connects lazily; callers ``ping()`` it to find out
    whether the server is reachable.
    """
    import redis.asyncio as redis

    return redis.from_url(
        config.url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_connect_timeout,
    )


def _decode(key: Any) -> str:
    return key.decode() if isinstance(key, bytes) else key


class RedisStore(StorageBackend):
    """Redis storage backend.

    Values are stored as JSON text with a native Redis TTL. Unlike the
    memory store, errors from the server are recorded and then raised to
    the caller.

    Example:
        store = RedisStore(client, RedisConfig(url="redis://cache:6379"))
        await store.set("events:all", events, ttl=3600)
        events = await store.get("events:all")
    """

    def __init__(
        self,
        client: "Redis",
        config: Optional[RedisConfig] = None,
        serializer: Optional[Serializer] = None,
    ):
        """Initialize Redis store.

        Args:
            client: Connected ``redis.asyncio.Redis`` client
            config: Redis configuration
            serializer: Value serializer (JSON by default)
        """
        super().__init__(config or RedisConfig())
        self.config: RedisConfig
        self._client = client
        self._serializer = serializer or JSONSerializer()

    @property
    def client(self) -> "Redis":
        return self._client

    async def ping(self) -> bool:
        """Check the server answers."""
        return bool(await self._client.ping())

    async def get(self, key: str) -> Any:
        """Get value by key.

        Args:
            key: Cache key

        Returns:
            Deserialized value or None
        """
        try:
            self._stats.reads += 1
            data = await self._client.get(key)
        except Exception as e:
            self._stats.record_error(str(e))
            raise

        if data is None:
            return None
        return self._serializer.deserialize(data)

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Store value with expiry.

        Args:
            key: Cache key
            value: Value to store
            ttl: TTL in seconds

        Returns:
            True if the server acknowledged the write
        """
        if ttl is None:
            ttl = self.config.default_ttl

        try:
            data = self._serializer.serialize(value)
            result = await self._client.set(key, data, ex=max(1, math.ceil(ttl)))
        except Exception as e:
            self._stats.record_error(str(e))
            raise

        self._stats.writes += 1
        return bool(result)

    async def delete(self, key: str) -> bool:
        """Delete entry.

        Args:
            key: Cache key

        Returns:
            True if the key existed
        """
        return await self.delete_many([key]) > 0

    async def delete_many(self, keys: List[str]) -> int:
        """Delete several keys with a single DEL.

        Args:
            keys: Keys to delete

        Returns:
            Number of keys the server removed
        """
        if not keys:
            return 0
        try:
            removed = await self._client.delete(*keys)
        except Exception as e:
            self._stats.record_error(str(e))
            raise

        self._stats.deletes += len(keys)
        return int(removed)

    async def scan_keys(self, pattern: str, count: Optional[int] = None) -> List[str]:
        """Collect every key matching a glob pattern.

        Walks SCAN in batches until the cursor comes back to zero.

        Args:
            pattern: Glob pattern, e.g. ``events:*:photos``
            count: Batch size hint

        Returns:
            Matching keys
        """
        batch_size = count or self.config.scan_count
        keys: List[str] = []
        cursor = 0
        try:
            while True:
                cursor, batch = await self._client.scan(
                    cursor, match=pattern, count=batch_size
                )
                keys.extend(_decode(k) for k in batch)
                if cursor == 0:
                    break
        except Exception as e:
            self._stats.record_error(str(e))
            raise

        # SCAN may return a key more than once
        return list(dict.fromkeys(keys))

    async def close(self) -> None:
        """Close Redis connection."""
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"RedisStore(url={self.config.url!r})"


__all__ = ["RedisStore", "RedisConfig", "create_redis_client"]
