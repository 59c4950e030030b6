"""Cache key generation: content-addressed over raw image bytes."""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

from platecache.errors.exceptions import ImageHashError

_SHORT_DIGEST_LEN = 12


def hash_image(image_bytes: bytes) -> str:
    """Hash image bytes for cache key use."""
    return hashlib.sha256(image_bytes).hexdigest()


async def hash_image_file(path: str | Path) -> str:
    """Read an image file off the event loop and return its SHA256 digest.

    Raises ImageHashError if the bytes cannot be read (missing file,
    permission denied, a directory, ...).
    """
    path = Path(path)
    try:
        image_bytes = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise ImageHashError(
            f"Failed to generate image hash for {path}: {e}",
            path=path,
            original=e,
        ) from e
    return hash_image(image_bytes)


def short_digest(digest: str) -> str:
    """Digest prefix for log lines."""
    return digest[:_SHORT_DIGEST_LEN]
