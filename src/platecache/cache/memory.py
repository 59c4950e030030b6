"""In-memory entry store with TTL expiry and least-recently-accessed eviction."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from platecache.cache.keys import short_digest
from platecache.cache.stats import CacheCounters, CacheEntry, CacheStats

logger = logging.getLogger(__name__)


class EntryStore:
    """Bounded digest -> CacheEntry map plus lifetime counters.

    Not safe for concurrent use on its own; ImageAnalysisCache serializes
    every call. All time-dependent methods take ``now`` explicitly.
    """

    def __init__(self, max_size: int, ttl_seconds: float) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._max_size = max_size
        self._ttl_seconds = ttl_seconds
        self.counters = CacheCounters()

    @property
    def max_size(self) -> int:
        return self._max_size

    def record_request(self) -> None:
        self.counters.total_requests += 1

    def get(self, digest: str, now: float) -> CacheEntry | None:
        """Look up a fresh entry, counting a hit or a miss.

        Expired entries are deleted and counted as misses. On a hit the
        entry's recency and access count are refreshed.
        """
        entry = self._fresh(digest, now)
        if entry is None:
            self.counters.cache_misses += 1
            return None
        entry.touch(now)
        self.counters.cache_hits += 1
        return entry

    def contains_fresh(self, digest: str, now: float) -> bool:
        """Freshness probe that leaves counters and recency untouched."""
        return self._fresh(digest, now) is not None

    def put(self, entry: CacheEntry) -> list[str]:
        """Insert or replace an entry. Returns the digests evicted to make room."""
        evicted: list[str] = []
        if entry.digest not in self._entries:
            while len(self._entries) >= self._max_size and self._entries:
                evicted.append(self._evict_least_recently_accessed())
        self._entries[entry.digest] = entry
        return evicted

    def remove_expired(self, now: float) -> int:
        expired = [
            digest
            for digest, entry in self._entries.items()
            if entry.is_expired(now, self._ttl_seconds)
        ]
        for digest in expired:
            del self._entries[digest]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> list[tuple[str, CacheEntry]]:
        return list(self._entries.items())

    def hydrate(
        self,
        entries: Iterable[tuple[str, CacheEntry]],
        counters: CacheCounters,
        now: float,
    ) -> int:
        """Replace state with persisted entries, skipping those past TTL.

        Returns the number of entries restored. Restores at most max_size
        entries, preferring the most recently accessed.
        """
        fresh = [
            entry
            for _, entry in entries
            if not entry.is_expired(now, self._ttl_seconds)
        ]
        fresh.sort(key=lambda e: (e.last_accessed_at, e.digest), reverse=True)
        self._entries = {entry.digest: entry for entry in fresh[: self._max_size]}
        self.counters = counters.model_copy()
        return len(self._entries)

    def stats(self) -> CacheStats:
        created = [entry.created_at for entry in self._entries.values()]
        return CacheStats(
            total_requests=self.counters.total_requests,
            cache_hits=self.counters.cache_hits,
            cache_misses=self.counters.cache_misses,
            hit_rate=self.counters.hit_rate,
            current_size=len(self._entries),
            max_size=self._max_size,
            oldest_entry=min(created) if created else None,
            newest_entry=max(created) if created else None,
            total_evictions=self.counters.total_evictions,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, digest: object) -> bool:
        return digest in self._entries

    def _fresh(self, digest: str, now: float) -> CacheEntry | None:
        entry = self._entries.get(digest)
        if entry is None:
            return None
        if entry.is_expired(now, self._ttl_seconds):
            logger.debug(
                "Entry %s expired (age %.1fh)",
                short_digest(digest),
                entry.age(now) / 3600,
            )
            del self._entries[digest]
            return None
        return entry

    def _evict_least_recently_accessed(self) -> str:
        # Ties on last_accessed_at fall back to digest order
        victim = min(
            self._entries.values(), key=lambda e: (e.last_accessed_at, e.digest)
        )
        del self._entries[victim.digest]
        self.counters.total_evictions += 1
        logger.debug(
            "Evicted %s (last accessed %.0f)",
            short_digest(victim.digest),
            victim.last_accessed_at,
        )
        return victim.digest
