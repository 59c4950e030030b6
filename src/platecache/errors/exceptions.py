"""Custom exception hierarchy for platecache."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class PlateCacheError(Exception):
    """Base exception for all platecache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ImageHashError(PlateCacheError):
    """Image bytes could not be read for hashing.

    Surfaces to the caller of get/set/has. Never treated as a cache miss,
    so an unreadable upload is distinguishable from an uncached one.
    """

    def __init__(
        self,
        message: str = "",
        path: str | Path | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.original = original


class PersistenceError(PlateCacheError):
    """Snapshot could not be read, parsed or written.

    Raised by snapshot stores only. The cache recovers from it locally.
    """

    def __init__(
        self,
        message: str = "",
        path: str | Path | None = None,
        operation: str = "save",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.operation = operation
        self.original = original


class ConfigError(PlateCacheError):
    """A configuration source holds a value that cannot be used.

    Carries the offending ``source`` (e.g. an environment variable name)
    and the raw ``value``.
    """

    def __init__(self, message: str = "", source: str = "", value: Any = None) -> None:
        super().__init__(message)
        self.source = source
        self.value = value
