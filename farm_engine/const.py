"""Constants shared across the farm engine."""

from __future__ import annotations

from typing import Final

from .models import NutrientLevel

TURKISH_MONTHS: Final[tuple[str, ...]] = (
    "Ocak",
    "Şubat",
    "Mart",
    "Nisan",
    "Mayıs",
    "Haziran",
    "Temmuz",
    "Ağustos",
    "Eylül",
    "Ekim",
    "Kasım",
    "Aralık",
)

ANALYSIS_LABEL_PREFIX: Final = "Analiz"
UNKNOWN_FIELD_NAME: Final = "Bilinmeyen Tarla"
DEFAULT_TASK_TITLE: Final = "Zirai Görev"
URGENT_TASK_LIMIT: Final = 3
# Start date used when the provider sends an unparseable one.
FALLBACK_TASK_OFFSET_DAYS: Final = 7

NUTRIENT_SCORES: Final[dict[NutrientLevel, int]] = {
    NutrientLevel.LOW: 30,
    NutrientLevel.OPTIMAL: 70,
    NutrientLevel.HIGH: 100,
}

# (label, colour) used when charting the three macro nutrients
NUTRIENT_CHART_SERIES: Final[dict[str, tuple[str, str]]] = {
    "nitrogen": ("Azot", "#3b82f6"),
    "phosphorus": ("Fosfor", "#f97316"),
    "potassium": ("Potasyum", "#8b5cf6"),
}
