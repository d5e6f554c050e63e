"""Deterministic substitutes used when the AI provider is unavailable."""

from __future__ import annotations

from .models import NutrientLevel, SoilAnalysisResult, WeatherData

__all__ = ["CANNED_SOIL_RESULT", "WARM_REGIONS", "location_hash", "synthetic_weather"]

CANNED_SOIL_RESULT = SoilAnalysisResult(
    ph=6.8,
    nitrogen=NutrientLevel.LOW,
    phosphorus=NutrientLevel.OPTIMAL,
    potassium=NutrientLevel.HIGH,
    organic_matter=2.5,
    recommendations=(
        "Toprak pH seviyesi ideal aralıkta.",
        "Azot seviyesi düşük, ekim öncesi Üre gübresi tavsiye edilir.",
        "Potasyum seviyesi yüksek, ek potasyum takviyesine gerek yok.",
    ),
    calculated_fertilizer_amount="20 kg/dekar Üre",
    ideal_planting_time="Ekim sonu",
)

WARM_REGIONS = ("antalya", "adana", "mersin", "izmir", "aydın")

_CONDITIONS = ("Güneşli", "Parçalı Bulutlu", "Bulutlu", "Hafif Yağmurlu")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def location_hash(location: str) -> int:
    """Return the JavaScript-style string hash of ``location``.

    Each step computes ``unit + ((hash << 5) - hash)`` over UTF-16 code
    units. Only the shift truncates to 32 bits, so the result may fall
    outside the int32 range. Unlike :func:`hash` it is stable across
    processes.
    """

    data = location.encode("utf-16-le")
    value = 0
    for index in range(0, len(data), 2):
        unit = data[index] | data[index + 1] << 8
        value = unit + (_to_int32(_to_int32(value) << 5) - value)
    return value


def synthetic_weather(location: str) -> WeatherData:
    """Return a plausible, repeatable weather reading for ``location``."""

    seed = abs(location_hash(location))
    lowered = location.lower()
    base_temp = 22 if any(region in lowered for region in WARM_REGIONS) else 15
    condition = _CONDITIONS[seed % len(_CONDITIONS)]
    return WeatherData(
        temp=base_temp + seed % 10,
        condition=condition,
        humidity=30 + seed % 50,
        wind_speed=5 + seed % 25,
        rain_chance=80 if "Yağmur" in condition else seed % 20,
        radar_image_url=None,
    )
