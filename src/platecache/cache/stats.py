"""Cache entry and statistics models."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from platecache.types import FoodAnalysisResult


class CacheEntry(BaseModel):
    """A cached analysis result, keyed by the digest of the image bytes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    digest: str
    value: FoodAnalysisResult
    created_at: float
    access_count: int = 1
    last_accessed_at: float

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) > ttl_seconds

    def touch(self, now: float) -> None:
        """Record a hit."""
        self.access_count += 1
        self.last_accessed_at = now


class CacheCounters(BaseModel):
    """Lifetime counters. Survive clear() and are persisted with the snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    total_evictions: int = 0

    @property
    def hit_rate(self) -> int:
        return hit_rate_percent(self.cache_hits, self.total_requests)


class CacheStats(BaseModel):
    """Point-in-time statistics snapshot returned by get_stats()."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    hit_rate: int = Field(default=0, ge=0, le=100)
    current_size: int = 0
    max_size: int = 0
    oldest_entry: float | None = None
    newest_entry: float | None = None
    total_evictions: int = 0


def hit_rate_percent(hits: int, requests: int) -> int:
    """Hits as an integer percentage of requests, rounding halves up."""
    return math.floor(100 * hits / max(requests, 1) + 0.5)
