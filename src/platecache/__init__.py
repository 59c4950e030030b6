"""platecache: content-addressed cache for food-image analysis results."""

from platecache.analyzer import CachedFoodAnalyzer, FoodAnalyzer
from platecache.cache.manager import ImageAnalysisCache
from platecache.cache.stats import CacheStats
from platecache.config.schema import CacheConfig, build_cache_config
from platecache.errors.exceptions import (
    ConfigError,
    ImageHashError,
    PersistenceError,
    PlateCacheError,
)
from platecache.types import AnalysisOutcome, DetectedFood, FoodAnalysisResult

__version__ = "0.1.0"

__all__ = [
    "ImageAnalysisCache",
    "CacheConfig",
    "CacheStats",
    "build_cache_config",
    "CachedFoodAnalyzer",
    "FoodAnalyzer",
    "AnalysisOutcome",
    "DetectedFood",
    "FoodAnalysisResult",
    "PlateCacheError",
    "ConfigError",
    "ImageHashError",
    "PersistenceError",
]
