"""Pydantic models for cache configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from platecache.config.defaults import (
    DEFAULT_CLEANUP_INTERVAL_MINUTES,
    DEFAULT_MAX_CONCURRENT_ANALYSES,
    DEFAULT_MAX_SIZE,
    DEFAULT_PERSISTENCE_FILE,
    DEFAULT_TTL_HOURS,
)
from platecache.config.hierarchy import load_config_hierarchy


class CacheConfig(BaseModel):
    """Immutable cache settings."""

    model_config = ConfigDict(frozen=True)

    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0)
    ttl_hours: float = Field(default=DEFAULT_TTL_HOURS, gt=0)
    enable_persistence: bool = True
    persistence_file: Path = DEFAULT_PERSISTENCE_FILE
    cleanup_interval_minutes: float = Field(default=DEFAULT_CLEANUP_INTERVAL_MINUTES, gt=0)
    max_concurrent_analyses: int = Field(default=DEFAULT_MAX_CONCURRENT_ANALYSES, gt=0)

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_hours * 3600

    @property
    def cleanup_interval_seconds(self) -> float:
        return self.cleanup_interval_minutes * 60


def build_cache_config(**runtime_overrides: Any) -> CacheConfig:
    """Resolve the config hierarchy into a validated CacheConfig."""
    merged = load_config_hierarchy(**runtime_overrides)
    return CacheConfig(
        max_size=merged["max_size"],
        ttl_hours=merged["ttl_hours"],
        enable_persistence=not merged["persistence_disabled"],
        persistence_file=merged["persistence_file"],
        cleanup_interval_minutes=merged["cleanup_interval_minutes"],
        max_concurrent_analyses=merged["max_concurrent_analyses"],
    )
