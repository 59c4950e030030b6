"""Cached food analysis: consult the cache before running the vision analysis."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from platecache.cache.manager import ImageAnalysisCache
from platecache.types import AnalysisOutcome, FoodAnalysisResult

logger = logging.getLogger(__name__)


class FoodAnalyzer(Protocol):
    async def analyze_food_image(self, image_path: str | Path) -> FoodAnalysisResult: ...


class CachedFoodAnalyzer:
    """Answers repeated photos from the cache; runs the analyzer on misses only.

    At most ``max_concurrent`` analyses run at once, defaulting to the
    cache config's ``max_concurrent_analyses``. Fallback results
    (``is_ai_temporarily_unavailable``) are returned but never cached.
    """

    def __init__(
        self,
        cache: ImageAnalysisCache,
        analyzer: FoodAnalyzer,
        max_concurrent: int | None = None,
    ) -> None:
        self._cache = cache
        self._analyzer = analyzer
        self._semaphore = asyncio.Semaphore(
            max_concurrent or cache.config.max_concurrent_analyses
        )
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def analyze(self, image_path: str | Path) -> AnalysisOutcome:
        cached = await self._cache.get(image_path)
        if cached is not None:
            logger.info("Cache hit for %s, skipping analysis", image_path)
            return AnalysisOutcome(result=cached, cached=True)

        async with self._semaphore:
            self._in_flight += 1
            try:
                result = await self._analyzer.analyze_food_image(image_path)
            finally:
                self._in_flight -= 1

        result = result.model_copy(update={"image_url": str(image_path)})
        if result.is_ai_temporarily_unavailable:
            logger.warning("Analysis for %s is fallback data, not caching", image_path)
        else:
            await self._cache.set(image_path, result)
        return AnalysisOutcome(result=result, cached=False)
