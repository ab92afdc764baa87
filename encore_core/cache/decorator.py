"""Encore Decorators - Read-Through Caching Decorators.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, TypeVar

from encore_core.cache.keys import CacheKeys, generate_cache_key

if TYPE_CHECKING:
    from encore_core.cache.cache import CacheService

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _make_key(
    prefix: str,
    args: tuple,
    kwargs: dict,
    key_builder: Optional[Callable[..., str]] = None,
) -> str:
    """Build cache key from a call.

    Args:
        prefix: Key prefix
        args: Positional arguments
        kwargs: Keyword arguments
        key_builder: Custom builder for the part after the prefix

    Returns:
        Cache key string
    """
    if key_builder:
        return f"{prefix}:{key_builder(*args, **kwargs)}"
    return generate_cache_key(prefix, args, kwargs)


def cached(
    cache: "CacheService",
    prefix: str,
    ttl: float = 3600,
    key_builder: Optional[Callable[..., str]] = None,
) -> Callable[[F], F]:
    """Decorator adding read-through caching to a coroutine function.

    Caching is best effort: if building the key, reading or writing the
    cache fails, the error is logged and the call goes ahead uncached.
    Errors raised by the wrapped function itself are not caught.

    Args:
        cache: Cache service to read and write
        prefix: Key prefix
        ttl: Cache TTL in seconds
        key_builder: Builds the key suffix from the call arguments

    Returns:
        Decorated function

    Example:
        @cached(cache, "event", ttl=CacheTTL.EVENTS, key_builder=lambda id: id)
        async def get_event_by_id(id: str) -> dict:
            return await db.fetch_event(id)
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            cache_key = None
            cached_value = None
            try:
                cache_key = _make_key(prefix, args, kwargs, key_builder)
                cached_value = await cache.get(cache_key)
            except Exception as e:
                logger.error(f"Error reading cache for {func.__qualname__}: {e}")

            if cached_value is not None:
                return cached_value

            result = await func(*args, **kwargs)

            if cache_key is not None and result is not None:
                try:
                    await cache.set(cache_key, result, ttl=ttl)
                except Exception as e:
                    logger.error(f"Error writing cache for {cache_key}: {e}")

            return result

        async def cache_clear() -> int:
            """Drop every cached result under this prefix."""
            return await cache.delete_by_pattern(f"{prefix}:*")

        def cache_key(*args, **kwargs) -> str:
            """Get cache key for arguments."""
            return _make_key(prefix, args, kwargs, key_builder)

        wrapper.cache_clear = cache_clear
        wrapper.cache_key = cache_key
        wrapper.cache = cache

        return wrapper  # type: ignore

    return decorator


async def invalidate_cache(cache: "CacheService", key: str) -> bool:
    """Delete one key, logging instead of raising on failure.

    Args:
        cache: Cache service
        key: Cache key

    Returns:
        True if the delete went through
    """
    try:
        return await cache.delete(key)
    except Exception as e:
        logger.error(f"Error invalidating cache key {key}: {e}")
        return False


async def invalidate_event_caches(
    cache: "CacheService",
    event_id: str,
    slug: str,
) -> int:
    """Drop an event's own keys and every event listing.

    Called after an event is created or updated.

    Args:
        cache: Cache service
        event_id: Event identifier
        slug: Event slug

    Returns:
        Number of keys successfully invalidated
    """
    logger.info(f"Invalidating caches for event {event_id} ({slug})")
    count = 0
    for key in CacheKeys.event_invalidation_keys(event_id, slug):
        if await invalidate_cache(cache, key):
            count += 1
    return count


__all__ = [
    "cached",
    "invalidate_cache",
    "invalidate_event_caches",
]
