import base64

import pytest

from platecache.types import DetectedFood, FoodAnalysisResult


class ManualClock:
    """Deterministic clock for TTL and recency tests (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 0.0, *, minutes: float = 0.0, hours: float = 0.0) -> None:
        self.now += seconds + minutes * 60 + hours * 3600


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sample_image_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def make_image(tmp_path):
    """Write an image file with the given bytes and return its path."""
    counter = {"n": 0}

    def _make(content: bytes | str, name: str | None = None):
        counter["n"] += 1
        data = content.encode() if isinstance(content, str) else content
        path = tmp_path / (name or f"image_{counter['n']}.jpg")
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def sample_analysis():
    return FoodAnalysisResult(
        image_url="uploads/original.jpg",
        confidence=92,
        total_calories=650,
        total_protein=32,
        total_carbs=70,
        total_fat=24,
        detected_foods=[
            DetectedFood(
                name="Grilled chicken",
                portion="150g",
                calories=250,
                protein=30,
                carbs=0,
                fat=12,
                icon="🍗",
            ),
            DetectedFood(
                name="Rice",
                portion="1 cup",
                calories=400,
                protein=2,
                carbs=70,
                fat=12,
                icon="🍚",
            ),
        ],
    )
