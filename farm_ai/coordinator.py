"""Coordinator wiring the state store to the AI provider."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from farm_engine.exceptions import FarmError
from farm_engine.models import AnalysisRecord, Field, Task, WeatherData
from farm_engine.store import FarmStore

from .providers import FarmAIProvider

_LOGGER = logging.getLogger(__name__)

__all__ = ["AnalysisNotFoundError", "FarmCoordinator"]


class AnalysisNotFoundError(FarmError, KeyError):
    """Raised when an analysis id is not present in the store."""


class FarmCoordinator:
    """Run provider calls on behalf of :class:`FarmStore` and merge the results.

    Store mutations stay synchronous; only the provider calls suspend. The
    coordinator does not serialise concurrent calls for the same field.
    """

    def __init__(self, store: FarmStore, provider: FarmAIProvider) -> None:
        self.store = store
        self.provider = provider
        self._background: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    async def async_create_field(self, data: Mapping[str, Any]) -> Field:
        """Create a field and start generating its schedule in the background.

        The field is returned before the schedule generator answers.
        """

        field = self.store.create_field(data)
        task = asyncio.create_task(self._async_generate_schedule(field))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return field

    async def _async_generate_schedule(self, field: Field) -> None:
        proposal = await self.provider.async_generate_schedule(
            field.id,
            field.crop_type,
            field.has_irrigation,
            date.today(),
            field.location,
            existing_ids=self.store.task_ids(),
        )
        if self.store.apply_schedule(field.id, proposal):
            _LOGGER.debug("Added %d scheduled tasks to field %s", len(proposal.tasks), field.id)

    async def async_block_till_done(self) -> None:
        """Wait for every background schedule generation to finish."""

        while self._background:
            await asyncio.gather(*list(self._background))

    # ------------------------------------------------------------------
    async def async_run_analysis(
        self,
        field_id: str,
        image: bytes,
        mime_type: str = "image/jpeg",
    ) -> AnalysisRecord:
        field = self.store.require_field(field_id)
        result = await self.provider.async_analyze_soil(image, field.crop_type, field.size_decares, mime_type)
        return self.store.create_analysis_record(field.id, result)

    async def async_add_analysis_to_calendar(self, analysis_id: str, *, replace: bool) -> list[Task]:
        """Generate tasks from a stored analysis and merge them into the calendar.

        :class:`~farm_engine.exceptions.TaskGenerationError` propagates to the
        caller unchanged; the calendar is untouched in that case.
        """

        record = self.store.get_analysis(analysis_id)
        if record is None:
            raise AnalysisNotFoundError(f"analysis {analysis_id} not found")
        field = self.store.require_field(record.field_id)
        tasks = await self.provider.async_generate_tasks_from_analysis(
            field,
            record.result,
            analysis_id=record.id,
            existing_ids=self.store.task_ids(),
        )
        # the field may have been deleted while the provider was running
        if self.store.get_field(field.id) is None:
            _LOGGER.debug("Field %s deleted during task generation; discarding tasks", field.id)
            return []
        self.store.apply_generated_tasks(field.id, tasks, replace)
        return tasks

    async def async_get_weather(self, location: str) -> WeatherData:
        return await self.provider.async_get_weather(location)

    async def async_shutdown(self) -> None:
        await self.async_block_till_done()
        await self.provider.async_close()
