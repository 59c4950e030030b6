"""Cache manager: serialized async operations over the entry store,
write-through snapshot persistence and the periodic expiry sweep."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path
from types import TracebackType

from platecache.cache.disk import CacheSnapshot, JsonFileSnapshotStore, SnapshotStore
from platecache.cache.keys import hash_image_file, short_digest
from platecache.cache.memory import EntryStore
from platecache.cache.stats import CacheEntry, CacheStats
from platecache.config.schema import CacheConfig
from platecache.errors.exceptions import PersistenceError
from platecache.types import FoodAnalysisResult

logger = logging.getLogger(__name__)


class ImageAnalysisCache:
    """Content-addressed cache of food-image analyses.

    Entries are keyed by the SHA256 of the image bytes, expire ``ttl_hours``
    after insertion and are evicted least-recently-accessed first once
    ``max_size`` is reached. Every async operation runs alone under one FIFO
    lock, so operations take effect in the order they were issued even
    though they suspend on file I/O.

    With persistence enabled the snapshot is loaded in the constructor and
    rewritten after every mutation. Persistence failures are logged, never
    raised. Unreadable images raise ImageHashError.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        store: SnapshotStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries = EntryStore(
            max_size=self._config.max_size,
            ttl_seconds=self._config.ttl_seconds,
        )
        self._snapshots: SnapshotStore | None = None
        if self._config.enable_persistence:
            self._snapshots = (
                store if store is not None
                else JsonFileSnapshotStore(self._config.persistence_file)
            )
        self._lock = asyncio.Lock()
        self._sweep_task: asyncio.Task[None] | None = None
        self._destroyed = False

        if self._snapshots is not None:
            self._load_snapshot(self._snapshots)

        logger.info(
            "ImageAnalysisCache initialized: max_size=%d, ttl=%gh, persistence=%s",
            self._config.max_size,
            self._config.ttl_hours,
            self._config.enable_persistence,
        )

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def sweep_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def __len__(self) -> int:
        return len(self._entries)

    async def __aenter__(self) -> ImageAnalysisCache:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.destroy()

    async def get(self, image_path: str | Path) -> FoodAnalysisResult | None:
        """Return a copy of the cached analysis for this image, or None on a miss.

        The copy's ``image_url`` is set to ``image_path``.
        """
        async with self._lock:
            self._entries.record_request()
            digest = await hash_image_file(image_path)
            entry = self._entries.get(digest, self._clock())
            if entry is None:
                logger.debug("Cache MISS for %s", short_digest(digest))
                return None

            logger.debug(
                "Cache HIT for %s (accessed %d times)",
                short_digest(digest),
                entry.access_count,
            )
            return entry.value.model_copy(deep=True, update={"image_url": str(image_path)})

    async def set(self, image_path: str | Path, value: FoodAnalysisResult) -> bool:
        """Store an analysis for this image.

        Returns False if the snapshot could not be written; the entry is
        cached in memory either way.
        """
        async with self._lock:
            digest = await hash_image_file(image_path)
            now = self._clock()
            entry = CacheEntry(
                digest=digest,
                value=value.model_copy(deep=True),
                created_at=now,
                last_accessed_at=now,
            )
            evicted = self._entries.put(entry)
            if evicted:
                logger.info("Cache evicted %d least recently accessed entries", len(evicted))
            logger.debug(
                "Cache SET for %s (size %d/%d)",
                short_digest(digest),
                len(self._entries),
                self._entries.max_size,
            )
            return await self._persist()

    async def has(self, image_path: str | Path) -> bool:
        """Check for a fresh entry without touching hit/miss statistics."""
        async with self._lock:
            digest = await hash_image_file(image_path)
            return self._entries.contains_fresh(digest, self._clock())

    async def cleanup(self) -> int:
        """Delete every expired entry. Returns the number removed."""
        async with self._lock:
            removed = self._entries.remove_expired(self._clock())
            if removed:
                logger.info("Cache cleanup: removed %d expired entries", removed)
                await self._persist()
            return removed

    async def clear(self) -> None:
        """Drop all entries. Lifetime counters are kept."""
        async with self._lock:
            self._entries.clear()
            logger.info("Cache cleared")
            await self._persist()

    def get_stats(self) -> CacheStats:
        return self._entries.stats()

    def start(self) -> None:
        """Schedule the periodic expiry sweep on the running event loop."""
        if self.sweep_running:
            return
        self._destroyed = False
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="platecache-sweep")

    def destroy(self) -> None:
        """Cancel the sweep and drop in-memory entries. The snapshot file is left as is."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            self._sweep_task = None
        self._destroyed = True
        self._entries.clear()
        logger.info("Cache destroyed")

    async def _sweep_loop(self) -> None:
        interval = self._config.cleanup_interval_seconds
        while True:
            await asyncio.sleep(interval)
            # A pass that has started finishes even if the sweep is cancelled
            sweep_pass = asyncio.ensure_future(self.cleanup())
            sweep_pass.add_done_callback(_report_sweep_pass)
            await asyncio.wait({sweep_pass})

    async def _persist(self) -> bool:
        if self._snapshots is None or self._destroyed:
            return True
        snapshot = CacheSnapshot(
            entries=self._entries.items(),
            stats=self._entries.counters.model_copy(),
            timestamp=self._clock(),
        )
        save = asyncio.ensure_future(asyncio.to_thread(self._snapshots.save, snapshot))
        try:
            await asyncio.shield(save)
        except asyncio.CancelledError:
            # Hold the lock until the write lands so no later write can overtake it
            await _drain(save)
            raise
        except PersistenceError as e:
            logger.warning("Failed to save cache snapshot: %s", e)
            return False
        return True

    def _load_snapshot(self, snapshots: SnapshotStore) -> None:
        try:
            snapshot = snapshots.load()
        except PersistenceError as e:
            logger.warning("Failed to load cache snapshot, starting empty: %s", e)
            return
        if snapshot is None:
            return

        restored = self._entries.hydrate(snapshot.entries, snapshot.stats, self._clock())
        logger.info(
            "Cache loaded from snapshot: %d of %d entries restored",
            restored,
            len(snapshot.entries),
        )


async def _drain(save: asyncio.Future[None]) -> None:
    """Wait out an in-flight snapshot write whose caller was cancelled."""
    while not save.done():
        try:
            await asyncio.shield(save)
        except asyncio.CancelledError:
            continue
        except PersistenceError:
            break
    if not save.cancelled() and save.exception() is not None:
        logger.warning("Failed to save cache snapshot: %s", save.exception())


def _report_sweep_pass(sweep_pass: asyncio.Future[int]) -> None:
    if sweep_pass.cancelled():
        return
    exc = sweep_pass.exception()
    if exc is not None:
        logger.warning("Periodic cache cleanup failed: %s", exc)
