"""Error handling: exception hierarchy."""

from platecache.errors.exceptions import (
    ConfigError,
    ImageHashError,
    PersistenceError,
    PlateCacheError,
)

__all__ = [
    "PlateCacheError",
    "ConfigError",
    "ImageHashError",
    "PersistenceError",
]
