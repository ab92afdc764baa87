"""Tests for cache statistics.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from datetime import datetime, timezone

import pytest

from encore_core.metrics.collector import CacheStatistics, CacheStatsSnapshot


class TestCacheStatistics:
    """Tests for the counters."""

    def test_hit_rate(self):
        """Test hit rate is hits / (hits + misses) as a percentage."""
        stats = CacheStatistics()
        stats.record_hit()
        stats.record_hit()
        stats.record_miss()

        snapshot = stats.snapshot()
        assert snapshot.total == 3
        assert snapshot.hit_rate == pytest.approx(200 / 3)
        assert snapshot.hit_rate_display == "66.67%"

    def test_empty_hit_rate(self):
        """Test no lookups gives 0.00%."""
        assert CacheStatistics().snapshot().hit_rate_display == "0.00%"

    def test_sets_and_errors_not_in_total(self):
        """Test total only counts lookups."""
        stats = CacheStatistics()
        stats.record_set()
        stats.record_error()

        snapshot = stats.snapshot()
        assert snapshot.total == 0
        assert (snapshot.sets, snapshot.errors) == (1, 1)

    def test_reset(self):
        """Test reset zeroes counters and stamps the time."""
        times = iter([
            datetime(2026, 1, 1, tzinfo=timezone.utc),
            datetime(2026, 2, 1, tzinfo=timezone.utc),
        ])
        stats = CacheStatistics(clock=lambda: next(times))
        stats.record_hit()
        stats.record_miss()
        stats.record_set()
        stats.record_error()

        stats.reset()

        assert stats.snapshot().to_dict() == {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "errors": 0,
            "last_reset": "2026-02-01T00:00:00+00:00",
            "total": 0,
            "hit_rate": "0.00%",
        }

    def test_snapshot_is_a_copy(self):
        """Test later records do not change an earlier snapshot."""
        stats = CacheStatistics()
        snapshot = stats.snapshot()
        stats.record_hit()

        assert snapshot.hits == 0

    def test_exporters(self):
        """Test export feeds every exporter, surviving a failing one."""
        stats = CacheStatistics()
        received = []

        def broken(snapshot):
            raise RuntimeError("exporter down")

        stats.add_exporter(broken)
        stats.add_exporter(received.append)
        stats.record_hit()
        stats.export()

        assert len(received) == 1
        assert isinstance(received[0], CacheStatsSnapshot)
        assert received[0].hits == 1

    def test_prometheus(self):
        """Test Prometheus text export."""
        stats = CacheStatistics()
        stats.record_hit()
        stats.record_miss()

        text = stats.to_prometheus()

        assert "cache_hits_total 1" in text
        assert "cache_misses_total 1" in text
        assert "cache_hit_rate 50.00" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
