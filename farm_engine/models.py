"""Records held by the farm state store."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from .utils import parse_date

__all__ = [
    "AnalysisRecord",
    "CropType",
    "Field",
    "NutrientLevel",
    "ScheduleProposal",
    "SoilAnalysisResult",
    "Task",
    "TaskType",
    "WeatherData",
]


class CropType(StrEnum):
    """Crops a field can be planted with."""

    WHEAT = "Buğday"
    CORN = "Mısır"
    COTTON = "Pamuk"
    TOMATO = "Domates"
    SUNFLOWER = "Ayçiçeği"
    BARLEY = "Arpa"

    @classmethod
    def parse(cls, value: Any) -> CropType:
        """Return the member matching a display value or member name."""

        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"unknown crop type {value!r}")


class TaskType(StrEnum):
    FERTILIZER = "FERTILIZER"
    IRRIGATION = "IRRIGATION"
    PESTICIDE = "PESTICIDE"
    PLANTING = "PLANTING"
    HARVEST = "HARVEST"


class NutrientLevel(StrEnum):
    LOW = "Low"
    OPTIMAL = "Optimal"
    HIGH = "High"


@dataclass(slots=True)
class Field:
    """A parcel of land owned by the farmer."""

    id: str
    name: str
    location: str
    size_decares: float
    crop_type: CropType
    has_irrigation: bool
    created_at: datetime
    seasonal_warning: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Field:
        created = payload["created_at"]
        if not isinstance(created, datetime):
            created = datetime.fromisoformat(str(created).replace("Z", "+00:00"))
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            location=str(payload["location"]),
            size_decares=float(payload["size_decares"]),
            crop_type=CropType.parse(payload["crop_type"]),
            has_irrigation=bool(payload.get("has_irrigation", False)),
            created_at=created,
            seasonal_warning=payload.get("seasonal_warning"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "size_decares": self.size_decares,
            "crop_type": self.crop_type.value,
            "has_irrigation": self.has_irrigation,
            "created_at": self.created_at.isoformat(),
            "seasonal_warning": self.seasonal_warning,
        }


@dataclass(slots=True)
class Task:
    """A scheduled agricultural action.

    ``end_date`` turns the task into a range; an end date preceding ``date``
    is treated as absent.
    """

    id: str
    field_id: str
    title: str
    date: date
    type: TaskType
    end_date: date | None = None
    completed: bool = False
    description: str | None = None
    analysis_id: str | None = None

    def __post_init__(self) -> None:
        if self.end_date is not None and self.end_date < self.date:
            self.end_date = None

    @property
    def is_range(self) -> bool:
        return self.end_date is not None and self.end_date != self.date

    @property
    def is_analysis_based(self) -> bool:
        return self.analysis_id is not None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Task:
        start = parse_date(payload.get("date"))
        if start is None:
            raise ValueError(f"invalid task date {payload.get('date')!r}")
        return cls(
            id=str(payload["id"]),
            field_id=str(payload["field_id"]),
            title=str(payload.get("title") or ""),
            date=start,
            type=TaskType(payload["type"]),
            end_date=parse_date(payload.get("end_date")),
            completed=bool(payload.get("completed", False)),
            description=payload.get("description"),
            analysis_id=payload.get("analysis_id"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "field_id": self.field_id,
            "analysis_id": self.analysis_id,
            "title": self.title,
            "date": self.date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "type": self.type.value,
            "completed": self.completed,
            "description": self.description,
        }


@dataclass(slots=True, frozen=True)
class SoilAnalysisResult:
    """Structured outcome of one soil analysis."""

    ph: float
    nitrogen: NutrientLevel
    phosphorus: NutrientLevel
    potassium: NutrientLevel
    organic_matter: float
    recommendations: tuple[str, ...]
    calculated_fertilizer_amount: str
    ideal_planting_time: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "ph": self.ph,
            "nitrogen": self.nitrogen.value,
            "phosphorus": self.phosphorus.value,
            "potassium": self.potassium.value,
            "organic_matter": self.organic_matter,
            "recommendations": list(self.recommendations),
            "calculated_fertilizer_amount": self.calculated_fertilizer_amount,
            "ideal_planting_time": self.ideal_planting_time,
        }


@dataclass(slots=True, frozen=True)
class AnalysisRecord:
    """Immutable snapshot of one soil analysis.

    ``field_name`` and ``crop_type`` are captured when the record is created
    and are not updated when the field is edited later.
    """

    id: str
    created_at: datetime
    field_id: str
    field_name: str
    crop_type: CropType
    result: SoilAnalysisResult

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "field_id": self.field_id,
            "field_name": self.field_name,
            "crop_type": self.crop_type.value,
            "result": self.result.as_dict(),
        }


@dataclass(slots=True, frozen=True)
class WeatherData:
    temp: float
    condition: str
    humidity: float
    wind_speed: float
    rain_chance: float
    radar_image_url: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "temp": self.temp,
            "condition": self.condition,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "rain_chance": self.rain_chance,
            "radar_image_url": self.radar_image_url,
        }


@dataclass(slots=True)
class ScheduleProposal:
    """Tasks proposed by the schedule generator plus an optional warning."""

    tasks: list[Task] = field(default_factory=list)
    warning: str | None = None
