"""The four AI-backed provider calls and their failure policies.

=====================  =============================================
call                   on failure
=====================  =============================================
soil analysis          canned result, never raises
schedule generation    empty schedule; quota errors add a warning
analysis → tasks       quota errors raise TaskGenerationError,
                       other errors yield an empty list
weather                synthetic reading derived from the location
=====================  =============================================

Without an API key every call takes its offline branch directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from datetime import date

from aiohttp import ClientSession

from farm_engine.exceptions import ProviderError, QuotaExceededError, TaskGenerationError
from farm_engine.fallbacks import CANNED_SOIL_RESULT, synthetic_weather
from farm_engine.models import CropType, Field, ScheduleProposal, SoilAnalysisResult, Task, WeatherData

from .client import GeminiClient, image_part, text_part
from .config import FarmAIConfig
from .log_utils import log_fallback, warn_once
from .prompts import SOIL_RESPONSE_SCHEMA, analysis_tasks_prompt, schedule_prompt, soil_prompt, weather_prompt
from .schemas import coerce_task_drafts, parse_schedule, parse_soil_result, parse_weather

_LOGGER = logging.getLogger(__name__)

__all__ = ["FarmAIProvider", "SCHEDULE_QUOTA_WARNING", "TASKS_QUOTA_MESSAGE"]

SCHEDULE_QUOTA_WARNING = (
    "Sistem yoğunluğu nedeniyle takvim şu an oluşturulamadı. Lütfen daha sonra tekrar deneyin."
)
TASKS_QUOTA_MESSAGE = "Sistem yoğunluğu (Kota Aşımı). Lütfen daha sonra tekrar deneyiniz."


class FarmAIProvider:
    """Bridge between the store's records and the Gemini client."""

    def __init__(
        self,
        client: GeminiClient | None,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        self._today = today

    @classmethod
    def from_config(cls, config: FarmAIConfig, session: ClientSession | None = None) -> FarmAIProvider:
        client = GeminiClient(config, session) if config.online else None
        if client is None:
            _LOGGER.warning("Gemini API key not configured; running with offline fallbacks")
        return cls(client)

    @property
    def online(self) -> bool:
        return self._client is not None

    async def async_close(self) -> None:
        if self._client is not None:
            await self._client.async_close()

    async def async_analyze_soil(
        self,
        image: bytes,
        crop_type: CropType,
        size_decares: float,
        mime_type: str = "image/jpeg",
    ) -> SoilAnalysisResult:
        if self._client is None:
            return CANNED_SOIL_RESULT
        try:
            payload = await self._client.async_generate_json(
                [image_part(image, mime_type), text_part(soil_prompt(crop_type, size_decares))],
                response_schema=SOIL_RESPONSE_SCHEMA,
            )
            return parse_soil_result(payload)
        except ProviderError as err:
            log_fallback(_LOGGER, "soil_analysis", err, "returning canned analysis")
        return CANNED_SOIL_RESULT

    async def async_generate_schedule(
        self,
        field_id: str,
        crop_type: CropType,
        has_irrigation: bool,
        plant_date: date,
        location: str,
        *,
        existing_ids: Collection[str] = (),
    ) -> ScheduleProposal:
        if self._client is None:
            return ScheduleProposal()
        today = self._today()
        prompt = schedule_prompt(crop_type, location, has_irrigation, plant_date, today)
        try:
            payload = await self._client.async_generate_json([text_part(prompt)])
            return parse_schedule(payload, field_id, today=today, existing_ids=existing_ids)
        except ProviderError as err:
            log_fallback(_LOGGER, "schedule", err, f"no schedule for field {field_id}")
            if isinstance(err, QuotaExceededError):
                return ScheduleProposal(warning=SCHEDULE_QUOTA_WARNING)
            return ScheduleProposal()

    async def async_generate_tasks_from_analysis(
        self,
        field: Field,
        analysis: SoilAnalysisResult,
        *,
        analysis_id: str | None = None,
        existing_ids: Collection[str] = (),
    ) -> list[Task]:
        """Return tasks derived from ``analysis``.

        Raises :class:`TaskGenerationError` when the provider is rate limited
        so callers can tell "try again later" apart from "nothing to do".
        """

        if self._client is None:
            return []
        today = self._today()
        try:
            payload = await self._client.async_generate_json([text_part(analysis_tasks_prompt(field, analysis, today))])
        except QuotaExceededError as err:
            warn_once(_LOGGER, "analysis_tasks_quota", "quota exceeded while generating tasks")
            raise TaskGenerationError(TASKS_QUOTA_MESSAGE) from err
        except ProviderError as err:
            log_fallback(_LOGGER, "analysis_tasks", err, f"no tasks for field {field.id}")
            return []
        return coerce_task_drafts(
            payload,
            field.id,
            today=today,
            analysis_id=analysis_id,
            existing_ids=existing_ids,
        )

    async def async_get_weather(self, location: str) -> WeatherData:
        if self._client is None:
            return synthetic_weather(location)
        try:
            payload = await self._client.async_generate_json([text_part(weather_prompt(location))], use_search=True)
            return parse_weather(payload)
        except ProviderError as err:
            log_fallback(_LOGGER, "weather", err, f"synthetic weather for {location}")
        return synthetic_weather(location)
