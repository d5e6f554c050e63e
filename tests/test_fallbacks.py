import pytest

from farm_engine.fallbacks import CANNED_SOIL_RESULT, WARM_REGIONS, location_hash, synthetic_weather
from farm_engine.models import NutrientLevel


def test_location_hash_small_inputs():
    assert location_hash("") == 0
    assert location_hash("abc") == 96354


def test_location_hash_only_truncates_the_shift():
    value = location_hash("Konya, Meram")
    assert value == 2332556864
    assert value > 2**31 - 1


def test_synthetic_weather_pinned_reading():
    weather = synthetic_weather("Konya, Meram")
    assert (weather.temp, weather.humidity, weather.wind_speed) == (19, 44, 19)
    assert weather.condition == "Güneşli"
    assert weather.rain_chance == 4


def test_synthetic_weather_is_deterministic():
    assert synthetic_weather("Konya, Meram") == synthetic_weather("Konya, Meram")


@pytest.mark.parametrize("location", ["Antalya, Muratpaşa", "Adana, Seyhan", "Ankara, Çankaya", "Erzurum"])
def test_synthetic_weather_ranges(location):
    weather = synthetic_weather(location)
    seed = abs(location_hash(location))
    base = 22 if any(region in location.lower() for region in WARM_REGIONS) else 15

    assert weather.temp == base + seed % 10
    assert weather.humidity == 30 + seed % 50
    assert weather.wind_speed == 5 + seed % 25
    if "Yağmur" in weather.condition:
        assert weather.rain_chance == 80
    else:
        assert weather.rain_chance == seed % 20
    assert weather.radar_image_url is None


def test_warm_region_runs_warmer():
    assert synthetic_weather("Antalya").temp >= 22
    assert synthetic_weather("Erzurum").temp < 25


def test_canned_soil_result():
    assert CANNED_SOIL_RESULT.ph == 6.8
    assert (CANNED_SOIL_RESULT.nitrogen, CANNED_SOIL_RESULT.phosphorus, CANNED_SOIL_RESULT.potassium) == (
        NutrientLevel.LOW,
        NutrientLevel.OPTIMAL,
        NutrientLevel.HIGH,
    )
    assert len(CANNED_SOIL_RESULT.recommendations) == 3
    assert CANNED_SOIL_RESULT.calculated_fertilizer_amount == "20 kg/dekar Üre"
