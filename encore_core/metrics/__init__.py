"""Metrics module - Cache statistics and monitoring."""

from encore_core.metrics.collector import (
    CacheStatistics,
    CacheStatsSnapshot,
)

__all__ = [
    "CacheStatistics",
    "CacheStatsSnapshot",
]
