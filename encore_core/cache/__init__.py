"""Cache module - Core caching functionality.

This module provides the cache service, key generation and the
read-through decorator.
"""

from encore_core.cache.entry import CacheEntry
from encore_core.cache.keys import (
    UNDEFINED,
    CacheKeys,
    CacheTTL,
    generate_cache_key,
    rolling_hash,
    stringify_arg,
)
from encore_core.cache.cache import (
    CacheService,
    CacheConfig,
    DEFAULT_CACHE_TTL,
)
from encore_core.cache.namespace import Namespace
from encore_core.cache.decorator import (
    cached,
    invalidate_cache,
    invalidate_event_caches,
)

__all__ = [
    "CacheEntry",
    "CacheKeys",
    "CacheTTL",
    "UNDEFINED",
    "generate_cache_key",
    "rolling_hash",
    "stringify_arg",
    "CacheService",
    "CacheConfig",
    "DEFAULT_CACHE_TTL",
    "Namespace",
    "cached",
    "invalidate_cache",
    "invalidate_event_caches",
]
