"""Store module - Storage backends for caching."""

from encore_core.store.backend import (
    StorageBackend,
    StorageStats,
    StorageConfig,
)
from encore_core.store.memory import MemoryStore
from encore_core.store.redis import RedisStore, RedisConfig, create_redis_client
from encore_core.store.selector import BackingStoreSelector

__all__ = [
    "StorageBackend",
    "StorageStats",
    "StorageConfig",
    "MemoryStore",
    "RedisStore",
    "RedisConfig",
    "create_redis_client",
    "BackingStoreSelector",
]
