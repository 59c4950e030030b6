"""Tests for cache entry and stats models."""

from platecache.cache.stats import (
    CacheCounters,
    CacheEntry,
    CacheStats,
    hit_rate_percent,
)
from platecache.types import FoodAnalysisResult


def _entry(created_at: float = 1000.0, **kwargs) -> CacheEntry:
    return CacheEntry(
        digest="abc",
        value=FoodAnalysisResult(total_calories=100),
        created_at=created_at,
        last_accessed_at=created_at,
        **kwargs,
    )


class TestCacheEntry:
    def test_defaults(self):
        entry = _entry()
        assert entry.access_count == 1
        assert entry.last_accessed_at == entry.created_at

    def test_not_expired_at_ttl_boundary(self):
        entry = _entry(created_at=1000.0)
        assert not entry.is_expired(now=1000.0 + 3600, ttl_seconds=3600)

    def test_expired_past_ttl(self):
        entry = _entry(created_at=1000.0)
        assert entry.is_expired(now=1000.0 + 3601, ttl_seconds=3600)

    def test_touch_updates_recency_not_age(self):
        entry = _entry(created_at=1000.0)
        entry.touch(now=1500.0)
        assert entry.access_count == 2
        assert entry.last_accessed_at == 1500.0
        assert entry.created_at == 1000.0
        assert entry.age(2000.0) == 1000.0

    def test_camel_case_round_trip(self):
        entry = _entry()
        dumped = entry.model_dump(by_alias=True)
        assert "createdAt" in dumped
        assert "lastAccessedAt" in dumped
        assert "accessCount" in dumped
        assert CacheEntry.model_validate(dumped) == entry


class TestHitRate:
    def test_zero_when_no_requests(self):
        assert hit_rate_percent(0, 0) == 0

    def test_percentage(self):
        assert hit_rate_percent(3, 4) == 75
        assert hit_rate_percent(1, 3) == 33
        assert hit_rate_percent(2, 3) == 67

    def test_half_rounds_up(self):
        assert hit_rate_percent(1, 8) == 13

    def test_all_hits(self):
        assert hit_rate_percent(10, 10) == 100

    def test_counters_property(self):
        counters = CacheCounters(total_requests=4, cache_hits=1, cache_misses=3)
        assert counters.hit_rate == 25


class TestCacheStats:
    def test_defaults(self):
        stats = CacheStats()
        assert stats.cache_hits == 0
        assert stats.current_size == 0
        assert stats.oldest_entry is None
        assert stats.newest_entry is None

    def test_camel_case_names(self):
        dumped = CacheStats(total_requests=2, hit_rate=50).model_dump(by_alias=True)
        assert set(dumped) == {
            "totalRequests",
            "cacheHits",
            "cacheMisses",
            "hitRate",
            "currentSize",
            "maxSize",
            "oldestEntry",
            "newestEntry",
            "totalEvictions",
        }
