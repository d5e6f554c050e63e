import uuid
from datetime import date

import pytest

from farm_engine import utils
from farm_engine.exceptions import ConfirmationRequiredError, FieldNotFoundError, FieldValidationError
from farm_engine.fallbacks import CANNED_SOIL_RESULT
from farm_engine.models import CropType, Field, ScheduleProposal, Task, TaskType


def test_create_field_normalises_input(store, field_input):
    field_input.update(name="  Dere Tarlası ", crop_type="corn", has_irrigation="yes", extra="ignored")
    field = store.create_field(field_input)

    assert field.name == "Dere Tarlası"
    assert field.crop_type is CropType.CORN
    assert field.has_irrigation is True
    assert field.size_decares == 12.0
    assert field.seasonal_warning is None
    assert store.fields == [field]


def test_crop_type_defaults_to_wheat(store, field_input):
    del field_input["crop_type"]
    assert store.create_field(field_input).crop_type is CropType.WHEAT


@pytest.mark.parametrize(
    "override",
    [
        {"size_decares": 0},
        {"size_decares": -3},
        {"size_decares": "çok"},
        {"size_decares": "inf"},
        {"size_decares": "nan"},
        {"size_decares": float("inf")},
        {"name": "   "},
        {"location": ""},
        {"crop_type": "Patates"},
    ],
)
def test_invalid_field_rejected(store, field_input, override):
    field_input.update(override)
    with pytest.raises(FieldValidationError):
        store.create_field(field_input)
    assert store.fields == []


def test_field_ids_skip_existing(store, field_input, monkeypatch):
    values = iter([uuid.UUID(int=1 << 124), uuid.UUID(int=1 << 124), uuid.UUID(int=2 << 124)])
    monkeypatch.setattr(utils.uuid, "uuid4", lambda: next(values))

    first = store.create_field(field_input)
    second = store.create_field(field_input)

    assert first.id == "100000000000"
    assert second.id == "200000000000"


def test_update_field_keeps_identity_and_warning(store, field_input):
    field = store.create_field(field_input)
    store.apply_schedule(field.id, ScheduleProposal(warning="Sezon uygun değil"))

    updated = store.update_field(field.id, {**field_input, "name": "Yeni Ad", "crop_type": "Pamuk"})

    assert updated.id == field.id
    assert updated.created_at == field.created_at
    assert updated.seasonal_warning == "Sezon uygun değil"
    assert updated.name == "Yeni Ad"
    assert updated.crop_type is CropType.COTTON
    assert store.fields == [updated]


def test_update_unknown_field(store, field_input):
    with pytest.raises(FieldNotFoundError) as excinfo:
        store.update_field("nope", field_input)
    assert excinfo.value.field_id == "nope"


def test_delete_requires_confirmation(store, field_input, make_task):
    field = store.create_field(field_input)
    store.apply_generated_tasks(field.id, [make_task(field_id=field.id)], replace=False)

    with pytest.raises(ConfirmationRequiredError):
        store.delete_field(field.id)

    assert store.fields == [field]
    assert len(store.tasks) == 1


def test_delete_cascades_only_to_own_records(store, field_input, make_task):
    doomed = store.create_field(field_input)
    kept = store.create_field({**field_input, "name": "Komşu"})
    store.apply_generated_tasks(doomed.id, [make_task(field_id=doomed.id)], replace=False)
    store.apply_generated_tasks(kept.id, [make_task(field_id=kept.id)], replace=False)
    store.create_analysis_record(doomed.id, CANNED_SOIL_RESULT)
    kept_record = store.create_analysis_record(kept.id, CANNED_SOIL_RESULT)

    store.delete_field(doomed.id, confirm=True)

    assert store.fields == [kept]
    assert {task.field_id for task in store.tasks} == {kept.id}
    assert store.analyses == [kept_record]


def test_delete_unknown_field(store):
    with pytest.raises(FieldNotFoundError):
        store.delete_field("nope", confirm=True)


def test_replace_drops_all_field_tasks(store, field_input, make_task):
    f1 = store.create_field(field_input).id
    f2 = store.create_field(field_input).id
    store.tasks = [
        make_task(id="open", field_id=f1),
        make_task(id="done", field_id=f1, completed=True),
        make_task(id="other", field_id=f2),
    ]
    new = [make_task(id="n1", field_id=f1), make_task(id="n2", field_id=f1)]

    store.apply_generated_tasks(f1, new, replace=True)

    assert [task.id for task in store.tasks_for_field(f1)] == ["n1", "n2"]
    assert [task.id for task in store.tasks_for_field(f2)] == ["other"]


def test_append_keeps_existing_tasks(store, field_input, make_task):
    f1 = store.create_field(field_input).id
    f2 = store.create_field(field_input).id
    store.tasks = [make_task(id="old", field_id=f1), make_task(id="other", field_id=f2)]
    before = len(store.tasks)

    store.apply_generated_tasks(f1, [make_task(id="n1", field_id=f1)], replace=False)

    assert len(store.tasks) == before + 1
    assert [task.id for task in store.tasks_for_field(f1)] == ["old", "n1"]


def test_generated_tasks_for_unknown_field_rejected(store, make_task):
    with pytest.raises(FieldNotFoundError):
        store.apply_generated_tasks("ghost", [make_task(field_id="ghost")], replace=False)
    assert store.tasks == []


def test_generated_tasks_for_other_field_rejected(store, field_input, make_task):
    own = store.create_field(field_input).id
    other = store.create_field(field_input).id
    store.tasks = [make_task(id="keep", field_id=own)]

    with pytest.raises(ValueError):
        store.apply_generated_tasks(own, [make_task(field_id=own), make_task(field_id=other)], replace=True)

    assert [task.id for task in store.tasks] == ["keep"]


def test_schedule_for_other_field_rejected(store, field_input, make_task):
    own = store.create_field(field_input)
    other = store.create_field(field_input)

    with pytest.raises(ValueError):
        store.apply_schedule(own.id, ScheduleProposal(tasks=[make_task(field_id=other.id)], warning="x"))

    assert store.tasks == []
    assert own.seasonal_warning is None


def test_toggle_task_completion(store, make_task):
    store.tasks = [make_task(id="t1"), make_task(id="t2")]

    assert store.toggle_task_completion("t1").completed is True
    assert store.tasks[1].completed is False
    assert store.toggle_task_completion("t1").completed is False


def test_toggle_unknown_task_is_noop(store, make_task):
    store.tasks = [make_task(id="t1")]
    assert store.toggle_task_completion("missing") is None
    assert store.tasks[0].completed is False


def test_has_pending_tasks(store, make_task):
    store.tasks = [make_task(field_id="f1", completed=True)]
    assert store.has_pending_tasks("f1") is False
    store.tasks.append(make_task(field_id="f1"))
    assert store.has_pending_tasks("f1") is True
    assert store.has_pending_tasks("f2") is False


def test_apply_schedule(store, field_input, make_task):
    field = store.create_field(field_input)
    proposal = ScheduleProposal(tasks=[make_task(field_id=field.id, start=date(2024, 11, 1))], warning="Geç kalındı")

    assert store.apply_schedule(field.id, proposal) is True
    assert store.tasks_for_field(field.id) == proposal.tasks
    assert field.seasonal_warning == "Geç kalındı"


def test_apply_schedule_after_delete_is_dropped(store, field_input, make_task):
    field = store.create_field(field_input)
    store.delete_field(field.id, confirm=True)

    proposal = ScheduleProposal(tasks=[make_task(field_id=field.id)])

    assert store.apply_schedule(field.id, proposal) is False
    assert store.tasks == []


def test_analysis_records_snapshot_field(store, field_input):
    field = store.create_field(field_input)
    first = store.create_analysis_record(field.id, CANNED_SOIL_RESULT)
    second = store.create_analysis_record(field.id, CANNED_SOIL_RESULT)

    store.update_field(field.id, {**field_input, "name": "Yeni Ad", "crop_type": "Arpa"})

    assert store.analyses == [second, first]
    assert first.field_name == field_input["name"]
    assert first.crop_type is CropType.WHEAT
    assert store.get_analysis(first.id) is first
    assert store.analyses_for_field(field.id) == [second, first]


def test_analysis_for_unknown_field(store):
    with pytest.raises(FieldNotFoundError):
        store.create_analysis_record("nope", CANNED_SOIL_RESULT)


def test_field_name_fallback(store):
    assert store.field_name("nope") == "Bilinmeyen Tarla"


@pytest.mark.parametrize("missing", ["crop_type", "has_irrigation", "size_decares"])
def test_update_requires_every_attribute(store, field_input, missing):
    field = store.create_field({**field_input, "crop_type": "Pamuk", "has_irrigation": True})
    partial = {key: value for key, value in field_input.items() if key != missing}

    with pytest.raises(FieldValidationError):
        store.update_field(field.id, partial)

    assert store.fields == [field]
    assert field.crop_type is CropType.COTTON
    assert field.has_irrigation is True


def test_field_round_trips_through_dict(store, field_input):
    field = store.create_field(field_input)
    field.seasonal_warning = "Geç ekim"

    assert Field.from_dict(field.as_dict()) == field


def test_task_round_trips_through_dict(make_task):
    task = make_task(
        field_id="f1",
        start=date(2024, 10, 15),
        end_date=date(2024, 10, 20),
        type=TaskType.PLANTING,
        description="Tohum",
        analysis_id="a1",
        completed=True,
    )

    assert Task.from_dict(task.as_dict()) == task


@pytest.mark.parametrize("end_date", ["2024-10-01", "yakında", None])
def test_task_from_dict_drops_invalid_end_date(make_task, end_date):
    payload = make_task(start=date(2024, 10, 15)).as_dict()
    payload["end_date"] = end_date

    task = Task.from_dict(payload)

    assert task.end_date is None
    assert task.date == date(2024, 10, 15)


def test_task_from_dict_requires_start_date(make_task):
    payload = make_task().as_dict()
    payload["date"] = "bilinmiyor"

    with pytest.raises(ValueError):
        Task.from_dict(payload)
