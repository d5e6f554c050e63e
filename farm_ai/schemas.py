"""Validation of the JSON documents returned by the AI provider.

Soil and weather answers are validated strictly: a document that does not
match is a provider failure and the caller falls back. Task drafts are
coerced one by one so a single bad draft never discards the others.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from datetime import date, timedelta
from typing import Any

import voluptuous as vol

from farm_engine.const import DEFAULT_TASK_TITLE, FALLBACK_TASK_OFFSET_DAYS
from farm_engine.exceptions import ProviderError
from farm_engine.models import NutrientLevel, ScheduleProposal, SoilAnalysisResult, Task, TaskType, WeatherData
from farm_engine.utils import new_id, parse_date

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "SCHEDULE_SCHEMA",
    "SOIL_RESULT_SCHEMA",
    "TASK_DRAFT_SCHEMA",
    "WEATHER_SCHEMA",
    "coerce_task_drafts",
    "parse_schedule",
    "parse_soil_result",
    "parse_weather",
]

OPTIONAL_TEXT = vol.Any(None, vol.Coerce(str))


def _task_type(value: Any) -> TaskType:
    return TaskType(str(value).strip().upper())


SOIL_RESULT_SCHEMA = vol.Schema(
    {
        vol.Required("ph"): vol.All(vol.Coerce(float), vol.Range(min=0, max=14)),
        vol.Required("nitrogen"): vol.Coerce(NutrientLevel),
        vol.Required("phosphorus"): vol.Coerce(NutrientLevel),
        vol.Required("potassium"): vol.Coerce(NutrientLevel),
        vol.Required("organicMatter"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Required("recommendations"): [vol.Coerce(str)],
        vol.Required("calculatedFertilizerAmount"): vol.Coerce(str),
        vol.Optional("idealPlantingTime", default=None): OPTIONAL_TEXT,
    },
    extra=vol.REMOVE_EXTRA,
)

WEATHER_SCHEMA = vol.Schema(
    {
        vol.Required("temp"): vol.Coerce(float),
        vol.Required("condition"): vol.All(vol.Coerce(str), vol.Length(min=1)),
        vol.Required("humidity"): vol.Coerce(float),
        vol.Required("windSpeed"): vol.Coerce(float),
        vol.Required("rainChance"): vol.Coerce(float),
        vol.Optional("radarImageUrl", default=None): OPTIONAL_TEXT,
    },
    extra=vol.REMOVE_EXTRA,
)

TASK_DRAFT_SCHEMA = vol.Schema(
    {
        vol.Required("type"): _task_type,
        vol.Optional("title", default=None): OPTIONAL_TEXT,
        vol.Optional("date", default=None): object,
        vol.Optional("endDate", default=None): object,
        vol.Optional("description", default=None): OPTIONAL_TEXT,
    },
    extra=vol.REMOVE_EXTRA,
)

SCHEDULE_SCHEMA = vol.Schema(
    {
        vol.Optional("tasks", default=list): vol.Any(None, list),
        vol.Optional("warning", default=None): OPTIONAL_TEXT,
    },
    extra=vol.REMOVE_EXTRA,
)


def parse_soil_result(payload: Any) -> SoilAnalysisResult:
    try:
        data = SOIL_RESULT_SCHEMA(payload)
    except vol.Invalid as err:
        raise ProviderError(f"malformed soil analysis: {err}") from err
    return SoilAnalysisResult(
        ph=data["ph"],
        nitrogen=data["nitrogen"],
        phosphorus=data["phosphorus"],
        potassium=data["potassium"],
        organic_matter=data["organicMatter"],
        recommendations=tuple(data["recommendations"]),
        calculated_fertilizer_amount=data["calculatedFertilizerAmount"],
        ideal_planting_time=data["idealPlantingTime"] or None,
    )


def parse_weather(payload: Any) -> WeatherData:
    try:
        data = WEATHER_SCHEMA(payload)
    except vol.Invalid as err:
        raise ProviderError(f"malformed weather reading: {err}") from err
    return WeatherData(
        temp=data["temp"],
        condition=data["condition"],
        humidity=data["humidity"],
        wind_speed=data["windSpeed"],
        rain_chance=data["rainChance"],
        radar_image_url=data["radarImageUrl"] or None,
    )


def coerce_task_drafts(
    drafts: Any,
    field_id: str,
    *,
    today: date | None = None,
    analysis_id: str | None = None,
    existing_ids: Collection[str] = (),
) -> list[Task]:
    """Turn raw task drafts into :class:`Task` records.

    An unparseable start date becomes ``today`` plus one week, an unparseable
    end date is dropped and a draft with an unknown task type is skipped.
    """

    if isinstance(drafts, Mapping):
        drafts = drafts.get("tasks")
    if not isinstance(drafts, list):
        if drafts is not None:
            _LOGGER.warning("Expected a list of task drafts, got %s", type(drafts).__name__)
        return []

    today = today or date.today()
    taken = set(existing_ids)
    tasks: list[Task] = []
    for raw in drafts:
        try:
            draft = TASK_DRAFT_SCHEMA(raw)
        except vol.Invalid as err:
            _LOGGER.warning("Skipping malformed task draft %r: %s", raw, err)
            continue
        start = parse_date(draft["date"])
        if start is None:
            start = today + timedelta(days=FALLBACK_TASK_OFFSET_DAYS)
        task_id = new_id(taken)
        taken.add(task_id)
        tasks.append(
            Task(
                id=task_id,
                field_id=field_id,
                analysis_id=analysis_id,
                title=(draft["title"] or "").strip() or DEFAULT_TASK_TITLE,
                date=start,
                end_date=parse_date(draft["endDate"]),
                type=draft["type"],
                completed=False,
                description=draft["description"],
            )
        )
    return tasks


def parse_schedule(
    payload: Any,
    field_id: str,
    *,
    today: date | None = None,
    existing_ids: Collection[str] = (),
) -> ScheduleProposal:
    try:
        data = SCHEDULE_SCHEMA(payload)
    except vol.Invalid as err:
        raise ProviderError(f"malformed schedule: {err}") from err
    tasks = coerce_task_drafts(data["tasks"], field_id, today=today, existing_ids=existing_ids)
    return ScheduleProposal(tasks=tasks, warning=(data["warning"] or "").strip() or None)
