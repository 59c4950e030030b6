"""Cache subsystem: content-addressed entries, TTL + LRA eviction, snapshot persistence."""

from platecache.cache.disk import (
    CacheSnapshot,
    JsonFileSnapshotStore,
    MemorySnapshotStore,
    SnapshotStore,
)
from platecache.cache.keys import hash_image, hash_image_file
from platecache.cache.manager import ImageAnalysisCache
from platecache.cache.stats import CacheCounters, CacheEntry, CacheStats

__all__ = [
    "ImageAnalysisCache",
    "CacheEntry",
    "CacheCounters",
    "CacheStats",
    "CacheSnapshot",
    "SnapshotStore",
    "JsonFileSnapshotStore",
    "MemorySnapshotStore",
    "hash_image",
    "hash_image_file",
]
