"""Encore Cache Entry - Cached Value with Absolute Expiry.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CacheEntry:
    """A cached value and the moment it stops being valid.

    Attributes:
        value: Cached payload (JSON-serializable)
        expires_at: Absolute UNIX timestamp in seconds
    """

    value: Any
    expires_at: float

    @classmethod
    def create(
        cls,
        value: Any,
        ttl_seconds: float,
        now: Optional[float] = None,
    ) -> "CacheEntry":
        """Build an entry that expires ``ttl_seconds`` from ``now``.

        Args:
            value: Value to cache
            ttl_seconds: Time to live in seconds
            now: Current timestamp (defaults to wall clock)

        Returns:
            CacheEntry instance
        """
        if now is None:
            now = time.time()
        return cls(value=value, expires_at=now + ttl_seconds)

    def is_expired_at(self, now: float) -> bool:
        """Check expiry against a given timestamp."""
        return self.expires_at < now

    def __repr__(self) -> str:
        return f"CacheEntry(expires_at={self.expires_at:.3f})"


__all__ = ["CacheEntry"]
