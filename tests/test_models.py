# tests/test_models.py

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from taskboard.enums import TaskPriority, TaskStatus
from taskboard.models import TaskCreate, TaskResponse, TaskStats, TaskUpdate, format_timestamp

from .helpers import iso_from_now


def test_create_defaults() -> None:
    task = TaskCreate.model_validate({"title": "  Write report "})
    assert task.title == "Write report"
    assert task.description is None
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date is None


def test_create_missing_title_reports_required() -> None:
    with pytest.raises(PydanticValidationError) as exc_info:
        TaskCreate.model_validate({"description": "no title"})
    errors = exc_info.value.errors()
    assert errors[0]["loc"] == ("title",)
    assert str(errors[0]["ctx"]["error"]) == "Title is required"


def test_create_accepts_camel_case_due_date() -> None:
    task = TaskCreate.model_validate({"title": "t", "dueDate": iso_from_now(3600)})
    assert task.due_date is not None
    assert task.due_date.tzinfo is None


def test_create_rejects_past_due_date() -> None:
    with pytest.raises(PydanticValidationError, match="cannot be in the past"):
        TaskCreate.model_validate({"title": "t", "dueDate": iso_from_now(-3600)})


def test_create_rejects_unknown_status() -> None:
    with pytest.raises(PydanticValidationError, match="Allowed: pending, in_progress, completed"):
        TaskCreate.model_validate({"title": "t", "status": "done"})


def test_update_changes_only_sent_fields() -> None:
    patch = TaskUpdate.model_validate({"status": "completed"})
    assert patch.changes() == {"status": TaskStatus.COMPLETED}

    assert TaskUpdate.model_validate({}).changes() == {}


def test_update_explicit_null_clears_optional_fields() -> None:
    patch = TaskUpdate.model_validate({"description": None, "dueDate": None})
    assert patch.changes() == {"description": None, "due_date": None}


@pytest.mark.parametrize("field", ["title", "status", "priority"])
def test_update_rejects_null_for_required_fields(field) -> None:
    with pytest.raises(PydanticValidationError):
        TaskUpdate.model_validate({field: None})


def test_format_timestamp() -> None:
    assert format_timestamp(datetime(2030, 5, 6, 7, 8, 9, 123456)) == "2030-05-06T07:08:09.123Z"
    assert format_timestamp(None) is None


def test_response_serializes_camel_case() -> None:
    created = datetime(2030, 1, 1, 10, 0, 0)
    response = TaskResponse(
        id=1,
        title="t",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        created_at=created,
        updated_at=created,
    )
    data = response.model_dump(by_alias=True, mode="json")
    assert data == {
        "id": 1,
        "title": "t",
        "description": None,
        "status": "in_progress",
        "priority": "high",
        "dueDate": None,
        "createdAt": "2030-01-01T10:00:00.000Z",
        "updatedAt": "2030-01-01T10:00:00.000Z",
    }


def test_stats_keeps_enum_keys() -> None:
    data = TaskStats().model_dump(by_alias=True)
    assert data == {
        "totalTasks": 0,
        "byStatus": {"pending": 0, "in_progress": 0, "completed": 0},
        "byPriority": {"low": 0, "medium": 0, "high": 0},
    }
