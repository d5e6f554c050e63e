"""Public API for the farm state store and its derived views."""

from __future__ import annotations

import importlib

__all__ = [
    "AnalysisRecord",
    "CropType",
    "FarmStore",
    "Field",
    "NutrientLevel",
    "ScheduleProposal",
    "SoilAnalysisResult",
    "Task",
    "TaskType",
    "WeatherData",
    "analysis_display_label",
    "format_task_date_range",
    "nutrient_level_to_score",
    "synthetic_weather",
    "urgent_tasks_view",
]


_MODULE_MAP = {
    "AnalysisRecord": "models",
    "CropType": "models",
    "Field": "models",
    "NutrientLevel": "models",
    "ScheduleProposal": "models",
    "SoilAnalysisResult": "models",
    "Task": "models",
    "TaskType": "models",
    "WeatherData": "models",
    "FarmStore": "store",
    "analysis_display_label": "views",
    "format_task_date_range": "views",
    "nutrient_level_to_score": "views",
    "urgent_tasks_view": "views",
    "synthetic_weather": "fallbacks",
}


def __getattr__(name: str):
    if name not in __all__:
        raise AttributeError(f"module 'farm_engine' has no attribute {name!r}")
    module = importlib.import_module(f".{_MODULE_MAP[name]}", __name__)
    value = getattr(module, name)
    globals()[name] = value
    return value
