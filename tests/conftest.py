from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from farm_ai.client import GeminiClient
from farm_engine.fallbacks import CANNED_SOIL_RESULT
from farm_engine.models import AnalysisRecord, CropType, Task, TaskType
from farm_engine.store import FarmStore

FIELD_INPUT = {
    "name": "Aşağı Köy Tarlası",
    "location": "Konya, Meram",
    "size_decares": 12,
    "crop_type": CropType.WHEAT.value,
    "has_irrigation": True,
}


@pytest.fixture
def store() -> FarmStore:
    return FarmStore()


@pytest.fixture
def field_input() -> dict:
    return dict(FIELD_INPUT)


@pytest.fixture
def make_task() -> Callable[..., Task]:
    counter = iter(range(1, 10_000))

    def _make(field_id: str = "f1", start: date = date(2024, 10, 15), **kwargs) -> Task:
        kwargs.setdefault("type", TaskType.FERTILIZER)
        kwargs.setdefault("title", "Gübreleme")
        return Task(id=kwargs.pop("id", f"t{next(counter)}"), field_id=field_id, date=start, **kwargs)

    return _make


@pytest.fixture
def make_record() -> Callable[..., AnalysisRecord]:
    def _make(record_id: str, field_id: str = "f1", minute: int = 0) -> AnalysisRecord:
        return AnalysisRecord(
            id=record_id,
            created_at=datetime(2024, 10, 1, 9, minute, tzinfo=UTC),
            field_id=field_id,
            field_name="Tarla",
            crop_type=CropType.WHEAT,
            result=CANNED_SOIL_RESULT,
        )

    return _make


@pytest.fixture
def gemini() -> MagicMock:
    """Gemini client double whose JSON answer is set per test."""

    client = MagicMock(spec=GeminiClient)
    client.async_generate_json = AsyncMock()
    client.async_close = AsyncMock()
    return client
