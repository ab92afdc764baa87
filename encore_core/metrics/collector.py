"""Encore Metrics Collector - Cache Hit/Miss/Set/Error Counters.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CacheStatsSnapshot:
    """Point-in-time copy of the cache counters.

    Attributes:
        hits: Cache hits
        misses: Cache misses
        sets: Successful writes
        errors: Backing store errors
        last_reset: When the counters were last reset
    """

    hits: int = 0
    misses: int = 0
    sets: int = 0
    errors: int = 0
    last_reset: Optional[datetime] = None

    @property
    def total(self) -> int:
        """Get total lookups."""
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage (0-100)."""
        total = self.total
        return self.hits / total * 100 if total > 0 else 0.0

    @property
    def hit_rate_display(self) -> str:
        """Hit rate formatted to two decimals, e.g. ``"66.67%"``."""
        return f"{self.hit_rate:.2f}%"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Stats dictionary suitable for a JSON response
        """
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "errors": self.errors,
            "last_reset": self.last_reset.isoformat() if self.last_reset else None,
            "total": self.total,
            "hit_rate": self.hit_rate_display,
        }


class CacheStatistics:
    """Process-wide cache counters.

    One instance is owned by each ``CacheService`` and shared with its
    backing store selector. Counters are never persisted.

    Example:
        stats = CacheStatistics()
        stats.record_hit()
        stats.record_miss()

        print(stats.snapshot().hit_rate_display)  # "50.00%"
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        """Initialize counters.

        Args:
            clock: Source of the ``last_reset`` timestamp
        """
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._errors = 0
        self._last_reset = clock()

        # Callbacks for metric export
        self._exporters: List[Callable[[CacheStatsSnapshot], None]] = []

    def record_hit(self) -> None:
        """Record a cache hit."""
        self._hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        self._misses += 1

    def record_set(self) -> None:
        """Record a successful write."""
        self._sets += 1

    def record_error(self) -> None:
        """Record a backing store error."""
        self._errors += 1

    def snapshot(self) -> CacheStatsSnapshot:
        """Get current counters.

        Returns:
            CacheStatsSnapshot instance
        """
        return CacheStatsSnapshot(
            hits=self._hits,
            misses=self._misses,
            sets=self._sets,
            errors=self._errors,
            last_reset=self._last_reset,
        )

    def reset(self) -> None:
        """Reset all counters."""
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._errors = 0
        self._last_reset = self._clock()

    def add_exporter(self, exporter: Callable[[CacheStatsSnapshot], None]) -> None:
        """Add metrics exporter.

        Args:
            exporter: Callback to receive snapshots
        """
        self._exporters.append(exporter)

    def export(self) -> None:
        """Push the current snapshot to all exporters."""
        snapshot = self.snapshot()
        for exporter in self._exporters:
            try:
                exporter(snapshot)
            except Exception as e:
                logger.error(f"Exporter error: {e}")

    def to_prometheus(self) -> str:
        """Export counters in Prometheus text format.

        Returns:
            Prometheus-formatted metrics
        """
        snapshot = self.snapshot()
        lines = [
            "# HELP cache_hits_total Total cache hits",
            "# TYPE cache_hits_total counter",
            f"cache_hits_total {snapshot.hits}",
            "",
            "# HELP cache_misses_total Total cache misses",
            "# TYPE cache_misses_total counter",
            f"cache_misses_total {snapshot.misses}",
            "",
            "# HELP cache_sets_total Total cache writes",
            "# TYPE cache_sets_total counter",
            f"cache_sets_total {snapshot.sets}",
            "",
            "# HELP cache_errors_total Total backing store errors",
            "# TYPE cache_errors_total counter",
            f"cache_errors_total {snapshot.errors}",
            "",
            "# HELP cache_hit_rate Cache hit rate (percent)",
            "# TYPE cache_hit_rate gauge",
            f"cache_hit_rate {snapshot.hit_rate:.2f}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        snapshot = self.snapshot()
        return (
            f"CacheStatistics(hits={snapshot.hits}, "
            f"hit_rate={snapshot.hit_rate_display})"
        )


__all__ = [
    "CacheStatistics",
    "CacheStatsSnapshot",
]
