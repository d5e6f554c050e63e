from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query, status

from farm_ai import AnalysisNotFoundError, FarmAIConfig, FarmAIProvider, FarmCoordinator
from farm_engine.exceptions import (
    ConfirmationRequiredError,
    FieldNotFoundError,
    FieldValidationError,
    TaskGenerationError,
)
from farm_engine.models import AnalysisRecord, Task
from farm_engine.store import FarmStore
from farm_engine.views import (
    ALL_FIELDS,
    analysis_display_label,
    analysis_history_view,
    calendar_view,
    format_task_date_range,
    is_past,
    nutrient_chart,
    pending_task_count,
    urgent_tasks_view,
)

_LOGGER = logging.getLogger(__name__)

UNPROCESSABLE = 422
MODE_REPLACE = "replace"
MODE_APPEND = "append"


def _decode_image(data: Mapping[str, Any]) -> tuple[bytes, str]:
    """Return image bytes and MIME type from a base64 string or data URL."""

    raw = data.get("image")
    if not isinstance(raw, str) or not raw.strip():
        raise HTTPException(status_code=UNPROCESSABLE, detail="image required")
    mime_type = str(data.get("mime_type") or "image/jpeg")
    text = raw.strip()
    if text.startswith("data:") and "," in text:
        header, text = text.split(",", 1)
        mime_type = header[5:].split(";", 1)[0] or mime_type
    try:
        return base64.b64decode(text, validate=True), mime_type
    except (binascii.Error, ValueError) as err:
        raise HTTPException(status_code=UNPROCESSABLE, detail="image is not valid base64") from err


class FarmApp:
    """Serialises store records for HTTP responses."""

    def __init__(self, coordinator: FarmCoordinator, default_location: str) -> None:
        self.coordinator = coordinator
        self.store = coordinator.store
        self.default_location = default_location

    def task_payload(self, task: Task) -> dict[str, Any]:
        item = task.as_dict()
        item["date_label"] = format_task_date_range(task)
        item["field_name"] = self.store.field_name(task.field_id)
        item["is_range"] = task.is_range
        item["is_past"] = is_past(task)
        return item

    def analysis_payload(self, record: AnalysisRecord) -> dict[str, Any]:
        item = record.as_dict()
        item["label"] = analysis_display_label(record, self.store.analyses)
        item["chart"] = nutrient_chart(record.result)
        return item


def create_app(coordinator: FarmCoordinator | None = None, config: FarmAIConfig | None = None) -> FastAPI:
    config = config or FarmAIConfig.from_env()
    if coordinator is None:
        coordinator = FarmCoordinator(FarmStore(), FarmAIProvider.from_config(config))

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await coordinator.async_shutdown()

    app = FastAPI(title="Farm Assistant", lifespan=lifespan)
    farm = FarmApp(coordinator, config.default_location)
    store = farm.store
    app.state.farm = farm

    @app.get("/fields")
    async def handle_fields() -> dict[str, Any]:
        return {"fields": [field.as_dict() for field in store.fields]}

    @app.post("/fields", status_code=status.HTTP_201_CREATED)
    async def handle_field_create(data: dict[str, Any]) -> dict[str, Any]:
        try:
            field = await coordinator.async_create_field(data)
        except FieldValidationError as err:
            raise HTTPException(status_code=UNPROCESSABLE, detail=str(err)) from err
        return {"field": field.as_dict()}

    @app.put("/fields/{field_id}")
    async def handle_field_update(field_id: str, data: dict[str, Any]) -> dict[str, Any]:
        try:
            field = store.update_field(field_id, data)
        except FieldNotFoundError as err:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
        except FieldValidationError as err:
            raise HTTPException(status_code=UNPROCESSABLE, detail=str(err)) from err
        return {"field": field.as_dict()}

    @app.delete("/fields/{field_id}")
    async def handle_field_delete(field_id: str, confirm: bool = Query(False)) -> dict[str, Any]:
        try:
            store.delete_field(field_id, confirm=confirm)
        except FieldNotFoundError as err:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
        except ConfirmationRequiredError as err:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"error": "confirmation_required", "message": str(err)},
            ) from err
        return {"deleted": field_id}

    @app.get("/tasks")
    async def handle_tasks(field_id: str = Query(ALL_FIELDS, alias="field")) -> dict[str, Any]:
        tasks = calendar_view(store.tasks, field_id)
        return {
            "tasks": [farm.task_payload(task) for task in tasks],
            "pending": pending_task_count(store.tasks),
        }

    @app.get("/tasks/urgent")
    async def handle_urgent_tasks() -> dict[str, Any]:
        return {"tasks": [farm.task_payload(task) for task in urgent_tasks_view(store.tasks)]}

    @app.post("/tasks/{task_id}/toggle")
    async def handle_task_toggle(task_id: str) -> dict[str, Any]:
        task = store.toggle_task_completion(task_id)
        if task is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"task {task_id} not found")
        return {"task": farm.task_payload(task)}

    @app.get("/analyses")
    async def handle_analyses(field_id: str | None = Query(None, alias="field")) -> dict[str, Any]:
        records = analysis_history_view(store.analyses, field_id)
        return {"analyses": [farm.analysis_payload(record) for record in records]}

    @app.post("/fields/{field_id}/analyses", status_code=status.HTTP_201_CREATED)
    async def handle_analysis_create(field_id: str, data: dict[str, Any]) -> dict[str, Any]:
        image, mime_type = _decode_image(data)
        try:
            record = await coordinator.async_run_analysis(field_id, image, mime_type)
        except FieldNotFoundError as err:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
        return {"analysis": farm.analysis_payload(record)}

    @app.post("/analyses/{analysis_id}/calendar")
    async def handle_analysis_calendar(analysis_id: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        mode = (data or {}).get("mode")
        if mode not in (None, MODE_REPLACE, MODE_APPEND):
            raise HTTPException(status_code=UNPROCESSABLE, detail=f"unknown mode {mode}")
        record = store.get_analysis(analysis_id)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"analysis {analysis_id} not found")
        if mode is None and store.has_pending_tasks(record.field_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "error": "active_schedule",
                    "field_id": record.field_id,
                    "field_name": store.field_name(record.field_id),
                },
            )
        try:
            tasks = await coordinator.async_add_analysis_to_calendar(analysis_id, replace=mode == MODE_REPLACE)
        except TaskGenerationError as err:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(err)) from err
        except (AnalysisNotFoundError, FieldNotFoundError) as err:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
        return {"tasks": [farm.task_payload(task) for task in tasks]}

    @app.get("/weather")
    async def handle_weather(location: str | None = Query(None)) -> dict[str, Any]:
        target = (location or "").strip() or farm.default_location
        weather = await coordinator.async_get_weather(target)
        return {"location": target, "weather": weather.as_dict()}

    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(create_app(), host="0.0.0.0", port=8080)


if __name__ == "__main__":
    main()
