"""Snapshot persistence: whole-store JSON documents behind a store interface."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from platecache.cache.stats import CacheCounters, CacheEntry
from platecache.errors.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class CacheSnapshot(BaseModel):
    """Full serialized cache state: entries, lifetime counters, write time."""

    entries: list[tuple[str, CacheEntry]] = Field(default_factory=list)
    stats: CacheCounters = Field(default_factory=CacheCounters)
    timestamp: float = Field(default_factory=time.time)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, data: str | bytes) -> CacheSnapshot:
        return cls.model_validate_json(data)


class SnapshotStore(ABC):
    """Where the cache writes its snapshot after each mutation."""

    @abstractmethod
    def load(self) -> CacheSnapshot | None:
        """Return the persisted snapshot, or None if nothing was persisted yet.

        Raises PersistenceError if a snapshot exists but cannot be read.
        """

    @abstractmethod
    def save(self, snapshot: CacheSnapshot) -> None:
        """Persist the snapshot, replacing any previous one.

        Raises PersistenceError on failure.
        """


class JsonFileSnapshotStore(SnapshotStore):
    """Snapshot as a single JSON file, replaced atomically on every save."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CacheSnapshot | None:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(
                f"Cannot read cache snapshot {self._path}: {e}",
                path=self._path,
                operation="load",
                original=e,
            ) from e

        try:
            return CacheSnapshot.from_json(data)
        except ValidationError as e:
            raise PersistenceError(
                f"Corrupt cache snapshot {self._path}: {e.error_count()} validation error(s)",
                path=self._path,
                operation="load",
                original=e,
            ) from e

    def save(self, snapshot: CacheSnapshot) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(snapshot.to_json())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(
                f"Cannot write cache snapshot {self._path}: {e}",
                path=self._path,
                operation="save",
                original=e,
            ) from e
        logger.debug("Snapshot written to %s (%d entries)", self._path, len(snapshot.entries))


class MemorySnapshotStore(SnapshotStore):
    """Keeps the last saved snapshot in memory, serialized like the file store.

    ``fail_on_save`` / ``fail_on_load`` simulate a broken disk.
    """

    def __init__(self, fail_on_save: bool = False, fail_on_load: bool = False) -> None:
        self._data: str | None = None
        self.fail_on_save = fail_on_save
        self.fail_on_load = fail_on_load
        self.save_count = 0

    def load(self) -> CacheSnapshot | None:
        if self.fail_on_load:
            raise PersistenceError("Simulated snapshot read failure", operation="load")
        if self._data is None:
            return None
        try:
            return CacheSnapshot.from_json(self._data)
        except ValidationError as e:
            raise PersistenceError(
                "Corrupt in-memory snapshot", operation="load", original=e
            ) from e

    def save(self, snapshot: CacheSnapshot) -> None:
        if self.fail_on_save:
            raise PersistenceError("Simulated snapshot write failure", operation="save")
        self._data = snapshot.to_json()
        self.save_count += 1

    @property
    def raw(self) -> str | None:
        """The serialized snapshot, if any."""
        return self._data

    @raw.setter
    def raw(self, data: str | None) -> None:
        self._data = data
