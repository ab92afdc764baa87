"""Tests for cache key generation.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

import pytest

from encore_core.cache.keys import (
    UNDEFINED,
    CacheKeys,
    CacheTTL,
    generate_cache_key,
    rolling_hash,
    stringify_arg,
)


class Unprintable:
    def __str__(self):
        raise ValueError("cannot render")


class TestStringifyArg:
    """Tests for argument stringification."""

    def test_sentinels(self):
        """Test null, undefined and callables."""
        assert stringify_arg(None) == "null"
        assert stringify_arg(UNDEFINED) == "undefined"
        assert stringify_arg(len) == "function"
        assert stringify_arg(lambda: 1) == "function"

    def test_primitives(self):
        """Test plain values use their string form."""
        assert stringify_arg("spring-concert") == "spring-concert"
        assert stringify_arg(42) == "42"
        assert stringify_arg(True) == "true"
        assert stringify_arg(False) == "false"

    def test_composites_are_canonical(self):
        """Test key order does not change the rendering."""
        assert stringify_arg({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'
        assert stringify_arg({"a": [1, 2], "b": 1}) == '{"a":[1,2],"b":1}'
        assert stringify_arg((1, "x")) == '[1,"x"]'
        assert stringify_arg({3, 1, 2}) == "[1,2,3]"


class TestRollingHash:
    """Tests for the rolling hash."""

    def test_known_values(self):
        """Test against hand-computed values."""
        assert rolling_hash("") == "0"
        assert rolling_hash("a") == "2p"
        assert rolling_hash("ab") == "2e9"

    def test_wraps_to_signed_32_bit(self):
        """Test overflow folds into a negative 32-bit value."""
        assert rolling_hash("polygenelubricants") == "-zik0zk"

    def test_utf16_code_units(self):
        """Test characters outside the BMP hash as surrogate pairs."""
        # U+1F3B5 is the pair D83C DFB5: 0xD83C * 31 + 0xDFB5 == 1773305
        assert rolling_hash("\U0001F3B5") == "120ah"


class TestGenerateCacheKey:
    """Tests for generate_cache_key."""

    def test_deterministic(self):
        """Test equal arguments give equal keys."""
        first = generate_cache_key("events", ["upcoming", {"limit": 10, "venue": "v1"}])
        second = generate_cache_key("events", ["upcoming", {"venue": "v1", "limit": 10}])

        assert first == second
        assert first.startswith("events:")

    def test_different_arguments(self):
        """Test different arguments give different keys."""
        keys = {
            generate_cache_key("events", []),
            generate_cache_key("events", ["past"]),
            generate_cache_key("events", ["upcoming"]),
            generate_cache_key("events", ["upcoming", 2024]),
            generate_cache_key("events", [None]),
            generate_cache_key("events", [UNDEFINED]),
        }
        assert len(keys) == 6

    def test_prefix_separates_keys(self):
        """Test the prefix is part of the key."""
        assert generate_cache_key("events", ["a"]) == "events:2p"
        assert generate_cache_key("photos", ["a"]) == "photos:2p"

    def test_kwargs_sorted(self):
        """Test keyword argument order does not matter."""
        assert generate_cache_key("p", [], {"b": 1, "a": 2}) == \
            generate_cache_key("p", [], {"a": 2, "b": 1})
        assert generate_cache_key("p", [], {"a": 2, "b": 1}) == \
            f"p:{rolling_hash('a=2|b=1')}"

    def test_timestamp_fallback(self):
        """Test an argument that cannot be rendered falls back to a timestamp key."""
        key = generate_cache_key("events", [Unprintable()])

        prefix, _, suffix = key.partition(":")
        assert prefix == "events"
        assert suffix.isdigit()


class TestCacheKeys:
    """Tests for the key catalogue."""

    def test_event_keys(self):
        """Test key formats."""
        assert CacheKeys.event("42") == "events:42"
        assert CacheKeys.event_by_slug("carols") == "events:slug:carols"
        assert CacheKeys.event_photos("carols") == "events:carols:photos"
        assert CacheKeys.venue("v1") == "venues:v1"

    def test_invalidation_keys(self):
        """Test event invalidation covers the event and all listings."""
        keys = CacheKeys.event_invalidation_keys("42", "carols")

        assert keys == [
            "events:42",
            "events:slug:carols",
            "events:all",
            "events:upcoming",
            "events:past",
        ]

    def test_ttls(self):
        """Test TTL constants."""
        assert CacheTTL.EVENTS == 7 * 24 * 3600
        assert CacheTTL.PHOTOS == 14 * 24 * 3600
        assert CacheTTL.VENUES == 30 * 24 * 3600


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
