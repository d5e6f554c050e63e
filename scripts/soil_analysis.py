#!/usr/bin/env python3
"""Analyse a soil photo or lab report image from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from farm_ai import FarmAIConfig, FarmAIProvider  # noqa: E402
from farm_engine.models import CropType, SoilAnalysisResult  # noqa: E402
from farm_engine.views import nutrient_chart  # noqa: E402


async def _analyse(image: bytes, mime_type: str, crop: CropType, size: float) -> SoilAnalysisResult:
    provider = FarmAIProvider.from_config(FarmAIConfig.from_env())
    try:
        return await provider.async_analyze_soil(image, crop, size, mime_type)
    finally:
        await provider.async_close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Soil analysis from an image")
    parser.add_argument("image", type=Path, help="path to the soil photo or report scan")
    parser.add_argument("--crop", default=CropType.WHEAT.name, help="crop name, e.g. WHEAT or Buğday")
    parser.add_argument("--size", type=float, default=10.0, help="field size in decares")
    parser.add_argument("--json", action="store_true", help="print raw JSON")
    args = parser.parse_args(argv)

    try:
        crop = CropType.parse(args.crop)
    except ValueError as err:
        parser.error(str(err))
    if args.size <= 0:
        parser.error("--size must be positive")

    logging.basicConfig(level=logging.WARNING)
    mime_type = mimetypes.guess_type(args.image.name)[0] or "image/jpeg"
    result = asyncio.run(_analyse(args.image.read_bytes(), mime_type, crop, args.size))

    if args.json:
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
        return
    print(f"pH {result.ph:g}, organik madde %{result.organic_matter:g}")
    for bar in nutrient_chart(result):
        print(f"  {bar['name']}: {bar['value']}")
    print(f"Gübre: {result.calculated_fertilizer_amount}")
    if result.ideal_planting_time:
        print(f"İdeal ekim zamanı: {result.ideal_planting_time}")
    for line in result.recommendations:
        print(f"- {line}")


if __name__ == "__main__":  # pragma: no cover
    main()
