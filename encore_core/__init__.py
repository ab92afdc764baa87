"""Encore Cache - Read-Through Cache for the Encore Choir Website.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.

Caches event, photo and venue lookups for the choir website with:
- Redis as the primary store, selected once per process
- In-memory fallback when Redis is not configured or unreachable
- Hit / miss / set / error statistics with hit rate
- Deterministic argument-hash cache keys
- Best-effort read-through decorator for async data fetchers

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        Encore Cache                             │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐             │
    │  │  @cached    │  │  Namespace  │  │    Keys     │   CACHE     │
    │  │ read-through│  │  prefixing  │  │ hash/catalog│   LAYER     │
    │  └──────┬──────┘  └──────┬──────┘  └──────┬──────┘             │
    │         │                │                │                     │
    │  ┌──────┴────────────────┴────────────────┴──────┐             │
    │  │                 CacheService                   │  SERVICE    │
    │  │   get / set / delete / delete_by_pattern       │             │
    │  └──────────────┬─────────────────────┬──────────┘             │
    │                 │                     │                         │
    │  ┌──────────────┴──────┐  ┌───────────┴───────────┐             │
    │  │ BackingStoreSelector│  │   CacheStatistics     │   STATE     │
    │  │  decides once       │  │  hits/misses/sets/err │             │
    │  └──────┬──────────────┘  └───────────────────────┘             │
    │         │                                                       │
    │  ┌──────┴────────────────────────────────────────┐             │
    │  │              Storage Backends                  │   STORAGE   │
    │  │      ┌────────────┐        ┌────────────┐      │   LAYER     │
    │  │      │ RedisStore │  -->   │ MemoryStore│      │             │
    │  │      │  primary   │fallback│  in-process│      │             │
    │  │      └────────────┘        └────────────┘      │             │
    │  └──────────────────────────────────────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from encore_core import CacheConfig, CacheKeys, CacheService, CacheTTL

    cache = CacheService(CacheConfig.from_env())

    @cache.cached("events", ttl=CacheTTL.EVENTS, key_builder=lambda: "upcoming")
    async def get_upcoming_events():
        return await db.fetch_upcoming_events()

    events = await get_upcoming_events()

    # After an admin edits the photo gallery
    await cache.delete_by_pattern(CacheKeys.all_photos_pattern())

    print(cache.get_stats().to_dict())
"""

__version__ = "1.0.0"
__author__ = "Encore Choir Web Team"

from encore_core.cache.entry import CacheEntry
from encore_core.cache.keys import (
    UNDEFINED,
    CacheKeys,
    CacheTTL,
    generate_cache_key,
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
from encore_core.store.backend import (
    StorageBackend,
    StorageConfig,
    StorageStats,
)
from encore_core.store.memory import MemoryStore
from encore_core.store.redis import RedisStore, RedisConfig
from encore_core.store.selector import BackingStoreSelector
from encore_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
)
from encore_core.metrics.collector import (
    CacheStatistics,
    CacheStatsSnapshot,
)

__all__ = [
    # Cache
    "CacheService",
    "CacheConfig",
    "CacheEntry",
    "CacheKeys",
    "CacheTTL",
    "DEFAULT_CACHE_TTL",
    "Namespace",
    "UNDEFINED",
    "generate_cache_key",
    "cached",
    "invalidate_cache",
    "invalidate_event_caches",
    # Storage
    "StorageBackend",
    "StorageConfig",
    "StorageStats",
    "MemoryStore",
    "RedisStore",
    "RedisConfig",
    "BackingStoreSelector",
    # Protocol
    "Serializer",
    "JSONSerializer",
    # Metrics
    "CacheStatistics",
    "CacheStatsSnapshot",
]
