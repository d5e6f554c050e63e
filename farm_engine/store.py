"""In-memory state store for fields, tasks and soil analyses."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .const import UNKNOWN_FIELD_NAME
from .exceptions import ConfirmationRequiredError, FieldNotFoundError
from .models import AnalysisRecord, Field, ScheduleProposal, SoilAnalysisResult, Task
from .utils import new_id, utcnow
from .validators import validate_field_input

_LOGGER = logging.getLogger(__name__)

__all__ = ["FarmStore"]


def _check_owner(field_id: str, tasks: Iterable[Task]) -> None:
    for task in tasks:
        if task.field_id != field_id:
            raise ValueError(f"task {task.id} belongs to field {task.field_id}, not {field_id}")


class FarmStore:
    """Authoritative collections for one session.

    Every operation runs to completion synchronously, so callers on the event
    loop never observe a half-applied change. Nothing is persisted.
    """

    def __init__(self) -> None:
        self.fields: list[Field] = []
        self.tasks: list[Task] = []
        self.analyses: list[AnalysisRecord] = []

    # ------------------------------------------------------------------
    # Fields
    def create_field(self, data: Mapping[str, Any]) -> Field:
        """Validate ``data`` and append a new field with a fresh identifier."""

        attrs = validate_field_input(data)
        field = Field(
            id=new_id({item.id for item in self.fields}),
            created_at=utcnow(),
            **attrs,
        )
        self.fields.append(field)
        _LOGGER.debug("Created field %s (%s)", field.id, field.name)
        return field

    def update_field(self, field_id: str, data: Mapping[str, Any]) -> Field:
        """Replace a field wholesale, keeping its id, creation time and warning."""

        attrs = validate_field_input(data, update=True)
        for index, current in enumerate(self.fields):
            if current.id == field_id:
                updated = dataclasses.replace(current, **attrs)
                self.fields[index] = updated
                return updated
        raise FieldNotFoundError(field_id)

    def delete_field(self, field_id: str, *, confirm: bool = False) -> None:
        """Remove a field together with every task and analysis referencing it."""

        if self.get_field(field_id) is None:
            raise FieldNotFoundError(field_id)
        if not confirm:
            raise ConfirmationRequiredError(
                f"deleting field {field_id} removes its calendar and analyses; confirmation required"
            )
        self.fields = [item for item in self.fields if item.id != field_id]
        self.tasks = [task for task in self.tasks if task.field_id != field_id]
        self.analyses = [rec for rec in self.analyses if rec.field_id != field_id]
        _LOGGER.info("Deleted field %s with its tasks and analyses", field_id)

    def get_field(self, field_id: str) -> Field | None:
        return next((item for item in self.fields if item.id == field_id), None)

    def require_field(self, field_id: str) -> Field:
        field = self.get_field(field_id)
        if field is None:
            raise FieldNotFoundError(field_id)
        return field

    def field_name(self, field_id: str) -> str:
        field = self.get_field(field_id)
        return field.name if field else UNKNOWN_FIELD_NAME

    def apply_schedule(self, field_id: str, proposal: ScheduleProposal) -> bool:
        """Merge a generated schedule into the store.

        Returns ``False`` when the field disappeared while the schedule was
        being generated; the proposal is dropped in that case.
        """

        field = self.get_field(field_id)
        if field is None:
            _LOGGER.debug("Discarding schedule for deleted field %s", field_id)
            return False
        _check_owner(field_id, proposal.tasks)
        self.tasks.extend(proposal.tasks)
        if proposal.warning:
            field.seasonal_warning = proposal.warning
        return True

    # ------------------------------------------------------------------
    # Analyses
    def record_analysis(self, record: AnalysisRecord) -> AnalysisRecord:
        self.require_field(record.field_id)
        self.analyses.insert(0, record)
        return record

    def create_analysis_record(self, field_id: str, result: SoilAnalysisResult) -> AnalysisRecord:
        """Snapshot ``result`` against the field's current name and crop."""

        field = self.require_field(field_id)
        record = AnalysisRecord(
            id=new_id({rec.id for rec in self.analyses}),
            created_at=utcnow(),
            field_id=field.id,
            field_name=field.name,
            crop_type=field.crop_type,
            result=result,
        )
        return self.record_analysis(record)

    def get_analysis(self, analysis_id: str) -> AnalysisRecord | None:
        return next((rec for rec in self.analyses if rec.id == analysis_id), None)

    def analyses_for_field(self, field_id: str) -> list[AnalysisRecord]:
        return [rec for rec in self.analyses if rec.field_id == field_id]

    # ------------------------------------------------------------------
    # Tasks
    def apply_generated_tasks(self, field_id: str, new_tasks: Iterable[Task], replace: bool) -> None:
        """Append ``new_tasks``; with ``replace`` drop the field's tasks first.

        Replacement removes completed tasks too. Appending never deduplicates.
        Raises :class:`FieldNotFoundError` for an unknown field and
        ``ValueError`` when a task belongs to another field; the calendar is
        untouched in both cases.
        """

        self.require_field(field_id)
        new_tasks = list(new_tasks)
        _check_owner(field_id, new_tasks)
        if replace:
            self.tasks = [task for task in self.tasks if task.field_id != field_id]
        self.tasks.extend(new_tasks)

    def toggle_task_completion(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                task.completed = not task.completed
                return task
        return None

    def tasks_for_field(self, field_id: str) -> list[Task]:
        return [task for task in self.tasks if task.field_id == field_id]

    def has_pending_tasks(self, field_id: str) -> bool:
        """Return ``True`` if the field already has an active (incomplete) schedule."""
        return any(task.field_id == field_id and not task.completed for task in self.tasks)

    def task_ids(self) -> set[str]:
        return {task.id for task in self.tasks}
