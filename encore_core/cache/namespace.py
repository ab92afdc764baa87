"""Encore Namespace - Key-Prefixed Cache Views.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

if TYPE_CHECKING:
    from encore_core.cache.cache import CacheService

# 24 hours
DEFAULT_NAMESPACE_TTL = 60 * 60 * 24


class Namespace:
    """Cache view that prefixes every key and applies its own default TTL.

    Example:
        venues = cache.namespace("venues", default_ttl=CacheTTL.VENUES)
        await venues.set("st-marys", venue)   # stored as "venues:st-marys"
        venue = await venues.with_cache("st-marys", load_venue)
    """

    def __init__(
        self,
        cache: "CacheService",
        prefix: str,
        default_ttl: Optional[float] = None,
    ):
        """Initialize namespace.

        Args:
            cache: Parent cache
            prefix: Key prefix
            default_ttl: TTL in seconds when a caller passes none
        """
        self._cache = cache
        self.prefix = prefix
        self.default_ttl = default_ttl or DEFAULT_NAMESPACE_TTL

    def make_key(self, key: str) -> str:
        """Make namespaced key."""
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Any:
        return await self._cache.get(self.make_key(key))

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        return await self._cache.set(self.make_key(key), value, ttl=ttl or self.default_ttl)

    async def delete(self, key: str) -> bool:
        return await self._cache.delete(self.make_key(key))

    async def clear(self) -> int:
        """Delete every key in this namespace (Redis only)."""
        return await self._cache.delete_by_pattern(f"{self.prefix}:*")

    async def with_cache(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """Return the cached value or compute and cache it.

        Args:
            key: Key within the namespace
            factory: Coroutine function producing the value
            ttl: TTL for a new value

        Returns:
            Cached or computed value
        """
        return await self._cache.get_or_set(
            self.make_key(key),
            factory,
            ttl=ttl or self.default_ttl,
        )

    def __repr__(self) -> str:
        return f"Namespace(prefix={self.prefix!r})"


__all__ = ["Namespace", "DEFAULT_NAMESPACE_TTL"]
