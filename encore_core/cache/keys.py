"""Encore Cache Keys - Key Generation and Key Catalogue.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.

Generated keys have the form ``{prefix}:{hash}`` where ``hash`` is a
31-multiplier rolling hash of the stringified call arguments, folded to a
signed 32-bit integer and written in base36.
"""

from __future__ import annotations

import logging
import struct
import time
from typing import Any, Dict, List, Optional, Sequence

from encore_core.protocol.serializer import canonical_json

logger = logging.getLogger(__name__)

ARG_SEPARATOR = "|"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class _Undefined:
    """Placeholder for an argument the caller left out."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def stringify_arg(arg: Any) -> str:
    """Render one call argument as key material.

    Args:
        arg: Positional or keyword argument value

    Returns:
        Stable string form of the argument
    """
    if arg is None:
        return "null"
    if arg is UNDEFINED:
        return "undefined"
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, (dict, list, tuple)):
        return canonical_json(arg)
    if isinstance(arg, (set, frozenset)):
        return canonical_json(sorted(arg, key=canonical_json))
    if callable(arg):
        return "function"
    return str(arg)


def _to_signed_32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return sign + "".join(reversed(digits))


def rolling_hash(text: str) -> str:
    """Hash text with ``h = h * 31 + c`` over its UTF-16 code units.

    Not cryptographic; only used to keep keys short and stable.

    Args:
        text: Input text

    Returns:
        Base36 rendering of the signed 32-bit hash
    """
    data = text.encode("utf-16-le")
    units = struct.unpack(f"<{len(data) // 2}H", data)

    h = 0
    for unit in units:
        h = _to_signed_32(h * 31 + unit)
    return _to_base36(h)


def generate_cache_key(
    prefix: str,
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> str:
    """Build a deterministic cache key for a function call.

    Args:
        prefix: Logical key prefix, e.g. ``events``
        args: Positional arguments
        kwargs: Keyword arguments (appended sorted by name)

    Returns:
        ``{prefix}:{hash}``, or ``{prefix}:{milliseconds}`` if hashing failed
    """
    try:
        parts = [stringify_arg(arg) for arg in args]
        for name in sorted(kwargs or {}):
            parts.append(f"{name}={stringify_arg(kwargs[name])}")

        return f"{prefix}:{rolling_hash(ARG_SEPARATOR.join(parts))}"
    except Exception as e:
        logger.error(f"Error generating cache key for {prefix}: {e}")
        return f"{prefix}:{int(time.time() * 1000)}"


class CacheTTL:
    """TTLs in seconds for the site's cached data."""

    EVENTS = 60 * 60 * 24 * 7
    PHOTOS = 60 * 60 * 24 * 14
    VENUES = 60 * 60 * 24 * 30


class CacheKeys:
    """Key catalogue for the event and venue data cached by the site."""

    ALL_EVENTS = "events:all"
    UPCOMING_EVENTS = "events:upcoming"
    PAST_EVENTS = "events:past"
    ALL_VENUES = "venues:all"

    @classmethod
    def event(cls, event_id: str) -> str:
        return f"events:{event_id}"

    @classmethod
    def event_by_slug(cls, slug: str) -> str:
        return f"events:slug:{slug}"

    @classmethod
    def event_photos(cls, slug: str) -> str:
        return f"events:{slug}:photos"

    @classmethod
    def venue(cls, venue_id: str) -> str:
        return f"venues:{venue_id}"

    @classmethod
    def event_invalidation_keys(cls, event_id: str, slug: str) -> List[str]:
        """Keys to drop after an event is created or updated.

        The single-event keys plus every event listing.
        """
        return [
            cls.event(event_id),
            cls.event_by_slug(slug),
            cls.ALL_EVENTS,
            cls.UPCOMING_EVENTS,
            cls.PAST_EVENTS,
        ]

    @classmethod
    def all_photos_pattern(cls) -> str:
        """Glob matching every event's photo listing."""
        return "events:*:photos"


__all__ = [
    "ARG_SEPARATOR",
    "UNDEFINED",
    "CacheKeys",
    "CacheTTL",
    "generate_cache_key",
    "rolling_hash",
    "stringify_arg",
]
