"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default cache settings
DEFAULT_MAX_SIZE = 1000
DEFAULT_TTL_HOURS = 36.0
DEFAULT_PERSISTENCE_DISABLED = False
DEFAULT_PERSISTENCE_FILE = Path("cache") / "image-analysis-cache.json"
DEFAULT_CLEANUP_INTERVAL_MINUTES = 60.0

# Default analyzer settings
DEFAULT_MAX_CONCURRENT_ANALYSES = 5

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "max_size": DEFAULT_MAX_SIZE,
        "ttl_hours": DEFAULT_TTL_HOURS,
        "persistence_disabled": DEFAULT_PERSISTENCE_DISABLED,
        "persistence_file": str(DEFAULT_PERSISTENCE_FILE),
        "cleanup_interval_minutes": DEFAULT_CLEANUP_INTERVAL_MINUTES,
        "max_concurrent_analyses": DEFAULT_MAX_CONCURRENT_ANALYSES,
        "log_level": DEFAULT_LOG_LEVEL,
    }
