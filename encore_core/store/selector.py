"""Encore Store Selector - One-Time Redis Availability Decision.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from encore_core.metrics.collector import CacheStatistics
from encore_core.store.redis import RedisConfig, RedisStore, create_redis_client

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class BackingStoreSelector:
    """Decides once whether Redis can be used.

    The first call to ``get_store`` settles the question:

    - build-only phase or no connection string: unavailable, no attempt
    - connection attempt succeeds: the store is kept for reuse
    - connection attempt fails: unavailable, logged and counted as an error

    Every later call returns the settled answer without reconnecting.
    Callers arriving while the first attempt is in flight wait for it.
    ``reset`` forgets the answer so the next call probes again.
    """

    def __init__(
        self,
        config: RedisConfig,
        stats: CacheStatistics,
        build_phase: bool = False,
        client_factory: Callable[[RedisConfig], "Redis"] = create_redis_client,
    ):
        """Initialize selector.

        Args:
            config: Redis configuration (``url`` may be None)
            stats: Counters that receive connection errors
            build_phase: Skip Redis entirely (static build, tooling)
            client_factory: Builds a client from the config
        """
        self.config = config
        self._stats = stats
        self._build_phase = build_phase
        self._client_factory = client_factory

        self._store: Optional[RedisStore] = None
        self._available: Optional[bool] = None
        self._lock = asyncio.Lock()

    @property
    def is_available(self) -> Optional[bool]:
        """None until decided, then True or False."""
        return self._available

    @property
    def is_decided(self) -> bool:
        return self._available is not None

    async def get_store(self) -> Optional[RedisStore]:
        """Get the Redis store, or None when running on the fallback.

        Returns:
            Connected RedisStore or None
        """
        if self._available is not None:
            return self._store

        async with self._lock:
            if self._available is not None:
                return self._store
            return await self._decide()

    async def _decide(self) -> Optional[RedisStore]:
        if self._build_phase:
            logger.info("Skipping Redis connection during build phase")
            return self._mark_unavailable()

        if not self.config.url:
            logger.warning("REDIS_URL is not set, using in-memory cache")
            return self._mark_unavailable()

        client = None
        try:
            client = self._client_factory(self.config)
            await client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._stats.record_error()
            if client is not None:
                await self._discard(client)
            return self._mark_unavailable()

        logger.info("Redis client connected successfully")
        self._store = RedisStore(client, self.config)
        self._available = True
        return self._store

    def _mark_unavailable(self) -> None:
        self._store = None
        self._available = False
        return None

    async def _discard(self, client: "Redis") -> None:
        try:
            await client.aclose()
        except Exception as e:
            logger.debug(f"Ignoring error while closing failed client: {e}")

    async def reset(self) -> None:
        """Forget the decision; the next ``get_store`` probes again."""
        await self.close()
        self._available = None

    async def close(self) -> None:
        """Close the Redis client if one was opened."""
        store = self._store
        self._store = None
        if store is not None:
            await store.close()
            if self._available:
                self._available = None

    def __repr__(self) -> str:
        return f"BackingStoreSelector(available={self._available})"


__all__ = ["BackingStoreSelector"]
