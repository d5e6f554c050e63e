"""Pure projections over the store's collections.

Nothing here mutates its input and nothing is cached; every helper is meant
to be recomputed whenever the underlying collections change.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from .const import (
    ANALYSIS_LABEL_PREFIX,
    NUTRIENT_CHART_SERIES,
    NUTRIENT_SCORES,
    TURKISH_MONTHS,
    URGENT_TASK_LIMIT,
)
from .models import AnalysisRecord, NutrientLevel, SoilAnalysisResult, Task

__all__ = [
    "ALL_FIELDS",
    "analysis_display_label",
    "analysis_history_view",
    "calendar_view",
    "format_task_date_range",
    "is_past",
    "nutrient_chart",
    "nutrient_level_to_score",
    "pending_task_count",
    "urgent_tasks_view",
]

ALL_FIELDS = "all"


def _month_name(value: date) -> str:
    return TURKISH_MONTHS[value.month - 1]


def _day_month(value: date) -> str:
    return f"{value.day} {_month_name(value)}"


def format_task_date_range(task: Task) -> str:
    """Return a Turkish date label such as ``15 Ekim`` or ``15 - 20 Ekim``."""

    start, end = task.date, task.end_date
    if end is None or end == start:
        return _day_month(start)
    if (start.year, start.month) == (end.year, end.month):
        return f"{start.day} - {end.day} {_month_name(start)}"
    return f"{_day_month(start)} - {_day_month(end)}"


def analysis_display_label(record: AnalysisRecord, records: Iterable[AnalysisRecord]) -> str:
    """Return ``Analiz N`` where N is the record's 1-based age rank in its field."""

    siblings = sorted(
        (item for item in records if item.field_id == record.field_id),
        key=lambda item: (item.created_at, item.id),
    )
    for index, item in enumerate(siblings, start=1):
        if item.id == record.id:
            return f"{ANALYSIS_LABEL_PREFIX} {index}"
    raise ValueError(f"analysis {record.id} is not part of the given records")


def nutrient_level_to_score(level: NutrientLevel | str) -> int:
    """Map a nutrient level to its plotting value.

    Raises ``ValueError`` for anything outside the closed level set.
    """
    return NUTRIENT_SCORES[NutrientLevel(level)]


def nutrient_chart(result: SoilAnalysisResult) -> list[dict[str, Any]]:
    chart: list[dict[str, Any]] = []
    for attr, (label, colour) in NUTRIENT_CHART_SERIES.items():
        chart.append(
            {
                "name": label,
                "value": nutrient_level_to_score(getattr(result, attr)),
                "color": colour,
            }
        )
    return chart


def _by_start_date(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda task: task.date)


def urgent_tasks_view(tasks: Iterable[Task]) -> list[Task]:
    """Return the first incomplete tasks ordered by start date."""
    return _by_start_date(task for task in tasks if not task.completed)[:URGENT_TASK_LIMIT]


def calendar_view(tasks: Iterable[Task], field_id: str = ALL_FIELDS) -> list[Task]:
    """Return tasks of one field (or every field) ordered by start date."""

    if field_id == ALL_FIELDS:
        return _by_start_date(tasks)
    return _by_start_date(task for task in tasks if task.field_id == field_id)


def analysis_history_view(
    records: Iterable[AnalysisRecord], field_id: str | None = None
) -> list[AnalysisRecord]:
    """Return analysis records newest first, optionally limited to one field."""

    selected = [rec for rec in records if field_id is None or rec.field_id == field_id]
    return sorted(selected, key=lambda rec: rec.created_at, reverse=True)


def pending_task_count(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if not task.completed)


def is_past(task: Task, today: date | None = None) -> bool:
    return task.date < (today or date.today())
