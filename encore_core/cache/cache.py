"""Encore Cache - Read-Through Cache Service.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Mapping, Optional

from encore_core.metrics.collector import CacheStatistics, CacheStatsSnapshot
from encore_core.store.backend import StorageConfig
from encore_core.store.memory import MemoryStore
from encore_core.store.redis import RedisConfig, RedisStore, create_redis_client
from encore_core.store.selector import BackingStoreSelector

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from encore_core.cache.namespace import Namespace

logger = logging.getLogger(__name__)

# 24 hours
DEFAULT_CACHE_TTL = 60 * 60 * 24

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class CacheConfig:
    """Cache configuration.

    Attributes:
        redis_url: Redis connection string; None means memory only
        build_phase: Never contact Redis (static builds, tooling)
        default_ttl: TTL in seconds when a caller passes none
        fallback_ttl: Default TTL of the in-memory fallback store
        scan_count: Batch size hint for pattern deletes
        socket_timeout: Redis socket timeout
        socket_connect_timeout: Redis connection timeout
    """

    redis_url: Optional[str] = None
    build_phase: bool = False
    default_ttl: float = DEFAULT_CACHE_TTL
    fallback_ttl: float = 60 * 60
    scan_count: int = 100
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CacheConfig":
        """Build configuration from environment variables.

        Reads ``REDIS_URL``, ``ENCORE_PHASE`` (``build`` skips Redis),
        ``ENCORE_SKIP_REDIS`` (1/true/yes/on also skips Redis),
        ``ENCORE_CACHE_DEFAULT_TTL`` and ``ENCORE_CACHE_SCAN_COUNT``.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            CacheConfig instance
        """
        env = os.environ if environ is None else environ

        phase = env.get("ENCORE_PHASE", "").strip().lower()
        skip = env.get("ENCORE_SKIP_REDIS", "").strip().lower() in _TRUTHY

        return cls(
            redis_url=env.get("REDIS_URL") or None,
            build_phase=phase == "build" or skip,
            default_ttl=float(env.get("ENCORE_CACHE_DEFAULT_TTL", DEFAULT_CACHE_TTL)),
            scan_count=int(env.get("ENCORE_CACHE_SCAN_COUNT", 100)),
        )

    def redis_config(self) -> RedisConfig:
        """Derive the Redis store configuration."""
        return RedisConfig(
            url=self.redis_url,
            default_ttl=self.default_ttl,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_connect_timeout,
            scan_count=self.scan_count,
        )


class CacheService:
    """Cache with a Redis primary and an in-memory fallback.

    Whether Redis is used is decided once, on the first operation. If it
    is unreachable then, every operation goes to the in-process fallback
    store for the rest of the process lifetime (see ``reprobe``). Errors
    Redis raises during an operation are counted and re-raised; only the
    ``cached`` decorator turns them into plain cache misses.

    Create one instance at startup and hand it to the data-fetch layer.

    Example:
        cache = CacheService(CacheConfig.from_env())

        await cache.set("events:all", events, ttl=CacheTTL.EVENTS)
        events = await cache.get("events:all")

        @cache.cached("photos", ttl=CacheTTL.PHOTOS, key_builder=lambda slug: slug)
        async def get_event_photos(slug: str) -> list:
            return await image_host.list_photos(slug)

        await cache.delete_by_pattern("events:*:photos")
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        fallback: Optional[MemoryStore] = None,
        stats: Optional[CacheStatistics] = None,
        client_factory: Callable[[RedisConfig], "Redis"] = create_redis_client,
    ):
        """Initialize cache service.

        Args:
            config: Cache configuration
            fallback: Local fallback store
            stats: Statistics counters
            client_factory: Builds the Redis client from its config
        """
        self.config = config if config is not None else CacheConfig()
        self._stats = stats if stats is not None else CacheStatistics()
        if fallback is None:
            fallback = MemoryStore(
                StorageConfig(name="memory", default_ttl=self.config.fallback_ttl)
            )
        self._fallback = fallback
        self._selector = BackingStoreSelector(
            self.config.redis_config(),
            self._stats,
            build_phase=self.config.build_phase,
            client_factory=client_factory,
        )

    @property
    def fallback(self) -> MemoryStore:
        return self._fallback

    @property
    def is_remote_available(self) -> Optional[bool]:
        """None until the first operation, then whether Redis is in use."""
        return self._selector.is_available

    async def _remote(self) -> Optional[RedisStore]:
        return await self._selector.get_store()

    def _record_failure(self, op: str, key: str, error: Exception) -> None:
        logger.error(f"Redis cache error ({op} {key}): {error}")
        self._stats.record_error()

    async def get(self, key: str) -> Any:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if not found

        Raises:
            Exception: Whatever Redis raised, after it is counted
        """
        remote = await self._remote()
        if remote is None:
            value = await self._fallback.get(key)
        else:
            try:
                value = await remote.get(key)
            except Exception as e:
                self._record_failure("get", key, e)
                raise

        if value is None:
            logger.debug(f"Cache MISS for key: {key}")
            self._stats.record_miss()
        else:
            logger.debug(f"Cache HIT for key: {key}")
            self._stats.record_hit()
        return value

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Set value in cache.

        None values are skipped without counting as a write.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: TTL in seconds (defaults to ``config.default_ttl``)

        Returns:
            True if the value was stored

        Raises:
            Exception: Whatever Redis raised, after it is counted
        """
        if value is None:
            logger.debug(f"Skipping cache for None value: {key}")
            return False

        if ttl is None:
            ttl = self.config.default_ttl

        remote = await self._remote()
        if remote is None:
            stored = await self._fallback.set(key, value, ttl)
        else:
            try:
                stored = await remote.set(key, value, ttl)
            except Exception as e:
                self._record_failure("set", key, e)
                raise

        if stored:
            logger.debug(f"Cached key: {key} with TTL: {ttl}s")
            self._stats.record_set()
        return stored

    async def delete(self, key: str) -> bool:
        """Delete key from cache.

        With Redis in use the key is removed from the fallback store too.

        Args:
            key: Cache key

        Returns:
            True once Redis acknowledged, or whether the fallback held the key

        Raises:
            Exception: Whatever Redis raised, after it is counted
        """
        remote = await self._remote()
        if remote is None:
            return await self._fallback.delete(key)

        try:
            await remote.delete(key)
        except Exception as e:
            self._record_failure("delete", key, e)
            raise

        await self._fallback.delete(key)
        return True

    async def delete_by_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Only Redis can match patterns; on the fallback store this is a
        no-op returning 0. Not atomic.

        Args:
            pattern: Glob pattern, e.g. ``events:*``

        Returns:
            Number of keys deleted

        Raises:
            Exception: Whatever Redis raised, after it is counted
        """
        remote = await self._remote()
        if remote is None:
            return 0

        try:
            keys = await remote.scan_keys(pattern, count=self.config.scan_count)
            if not keys:
                return 0
            await remote.delete_many(keys)
        except Exception as e:
            self._record_failure("delete_by_pattern", pattern, e)
            raise

        await self._fallback.delete_many(keys)
        logger.info(f"Deleted {len(keys)} keys matching {pattern}")
        return len(keys)

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """Get value or compute, cache and return it.

        Cache errors are not absorbed here; use ``cached`` for that.

        Args:
            key: Cache key
            factory: Coroutine function producing the value
            ttl: TTL for a new value

        Returns:
            Cached or computed value
        """
        value = await self.get(key)
        if value is not None:
            return value

        value = await factory()
        if value is not None:
            await self.set(key, value, ttl=ttl)
        return value

    def namespace(self, prefix: str, default_ttl: Optional[float] = None) -> "Namespace":
        """Get a key-prefixed view of this cache.

        Args:
            prefix: Key prefix
            default_ttl: TTL used by the namespace when none is given

        Returns:
            Namespace instance
        """
        from encore_core.cache.namespace import Namespace

        return Namespace(self, prefix, default_ttl=default_ttl)

    def cached(
        self,
        prefix: str,
        ttl: float = 3600,
        key_builder: Optional[Callable[..., str]] = None,
    ):
        """Decorator to cache coroutine results in this cache.

        See ``encore_core.cache.decorator.cached``.
        """
        from encore_core.cache.decorator import cached

        return cached(self, prefix, ttl=ttl, key_builder=key_builder)

    def get_stats(self) -> CacheStatsSnapshot:
        """Get cache statistics."""
        return self._stats.snapshot()

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats.reset()

    @property
    def statistics(self) -> CacheStatistics:
        return self._stats

    async def reprobe(self) -> None:
        """Forget the Redis availability decision.

        The next operation tries to connect again. Nothing calls this
        automatically.
        """
        logger.info("Re-probing Redis availability on next cache access")
        await self._selector.reset()

    async def self_test(self) -> Dict[str, Any]:
        """Write a test key, read it back and compare.

        Returns:
            ``{"success": True, "original", "from_cache", "match"}`` or
            ``{"success": False, "error"}``
        """
        test_key = f"test-redis-{int(time.time() * 1000)}"
        test_value = {"message": "Redis is working!", "timestamp": time.time()}

        try:
            if not await self.set(test_key, test_value, ttl=60):
                raise RuntimeError("Failed to set value in cache")

            from_cache = await self.get(test_key)
            if from_cache is None:
                raise RuntimeError("Failed to get value from cache")
        except Exception as e:
            logger.error(f"Cache self test failed: {e}")
            return {"success": False, "error": str(e)}

        return {
            "success": True,
            "original": test_value,
            "from_cache": from_cache,
            "match": from_cache == test_value,
        }

    async def close(self) -> None:
        """Close the Redis connection, if any."""
        await self._selector.close()

    async def __aenter__(self) -> "CacheService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"CacheService(remote={self._selector.is_available}, "
            f"fallback_entries={self._fallback.size()})"
        )


__all__ = ["CacheService", "CacheConfig", "DEFAULT_CACHE_TTL"]
