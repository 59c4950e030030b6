"""Configuration: defaults, YAML/env hierarchy, validated cache settings."""

from platecache.config.hierarchy import load_config_hierarchy
from platecache.config.schema import CacheConfig, build_cache_config

__all__ = ["CacheConfig", "build_cache_config", "load_config_hierarchy"]
