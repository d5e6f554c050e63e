import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
WEATHER_SCRIPT = ROOT / "scripts/weather_lookup.py"
SOIL_SCRIPT = ROOT / "scripts/soil_analysis.py"


def _offline_env() -> dict[str, str]:
    return {key: value for key, value in os.environ.items() if key not in {"GEMINI_API_KEY", "API_KEY"}}


def _run(*args: str, check: bool = True) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, *args],
        capture_output=True,
        text=True,
        check=check,
        env=_offline_env(),
        cwd=ROOT,
    )


def test_weather_lookup_json():
    result = _run(str(WEATHER_SCRIPT), "Konya, Meram", "--json")
    data = json.loads(result.stdout)
    assert data["location"] == "Konya, Meram"
    assert {"temp", "condition", "humidity", "wind_speed", "rain_chance"} <= data.keys()


def test_soil_analysis_offline(tmp_path):
    image = tmp_path / "toprak.jpg"
    image.write_bytes(b"\xff\xd8 fake jpeg")

    result = _run(str(SOIL_SCRIPT), str(image), "--crop", "corn", "--size", "8", "--json")
    data = json.loads(result.stdout)
    assert data["calculated_fertilizer_amount"] == "20 kg/dekar Üre"


def test_soil_analysis_rejects_unknown_crop(tmp_path):
    image = tmp_path / "toprak.jpg"
    image.write_bytes(b"\xff\xd8")

    result = _run(str(SOIL_SCRIPT), str(image), "--crop", "Patates", check=False)
    assert result.returncode == 2


def test_unified_cli_lists_commands():
    result = _run("-m", "scripts", "--list")
    lines = {line.split()[0]: line for line in result.stdout.splitlines() if line.strip()}
    assert set(lines) == {"serve", "soil-analysis", "weather-lookup"}
    assert "Print the current weather for a location." in lines["weather-lookup"]


def test_unified_cli_dispatches():
    result = _run("-m", "scripts", "weather-lookup", "Erzurum", "--json")
    assert json.loads(result.stdout)["location"] == "Erzurum"
