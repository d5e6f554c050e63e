#!/usr/bin/env python3
"""Print the current weather for a location."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from farm_ai import FarmAIConfig, FarmAIProvider  # noqa: E402
from farm_engine.models import WeatherData  # noqa: E402


async def _lookup(location: str, config: FarmAIConfig) -> WeatherData:
    provider = FarmAIProvider.from_config(config)
    try:
        return await provider.async_get_weather(location)
    finally:
        await provider.async_close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Weather lookup for a farm location")
    parser.add_argument("location", nargs="?", help="city and district, e.g. 'Konya, Meram'")
    parser.add_argument("--json", action="store_true", help="print raw JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    config = FarmAIConfig.from_env()
    location = args.location or config.default_location
    weather = asyncio.run(_lookup(location, config))

    if args.json:
        print(json.dumps({"location": location, **weather.as_dict()}, ensure_ascii=False, indent=2))
        return
    print(f"{location}: {weather.condition}, {weather.temp:g}°C")
    print(f"  nem %{weather.humidity:g}, rüzgar {weather.wind_speed:g} km/s, yağış ihtimali %{weather.rain_chance:g}")


if __name__ == "__main__":  # pragma: no cover
    main()
