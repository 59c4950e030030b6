"""Shared Pydantic models for platecache."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ── Analysis results ──


class DetectedFood(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    portion: str = ""
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    icon: str = ""


class FoodAnalysisResult(BaseModel):
    """Nutrition breakdown produced by the vision analysis for one photo.

    ``image_url`` is the reference of the image the result was produced for.
    The cache overlays it with the caller's current path on every hit.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str = ""
    confidence: float = 0.0
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    detected_foods: list[DetectedFood] = Field(default_factory=list)
    is_ai_temporarily_unavailable: bool = Field(
        default=False, alias="isAITemporarilyUnavailable"
    )


class AnalysisOutcome(BaseModel):
    result: FoodAnalysisResult
    cached: bool = False
