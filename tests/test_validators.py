# tests/test_validators.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from taskboard import validators
from taskboard.enums import TaskPriority, TaskStatus, allowed_values
from taskboard.exceptions import ValidationError


def test_title_is_trimmed() -> None:
    assert validators.clean_title("  Buy milk  ") == "Buy milk"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_title_required(value) -> None:
    with pytest.raises(ValueError, match="Title is required"):
        validators.clean_title(value)


def test_title_length_limit_applies_after_trim() -> None:
    assert validators.clean_title(" " + "a" * 100 + " ") == "a" * 100
    with pytest.raises(ValueError, match="Max 100 characters"):
        validators.clean_title("a" * 101)


def test_description_empty_becomes_none() -> None:
    assert validators.clean_description("   ") is None
    assert validators.clean_description(None) is None
    assert validators.clean_description(" notes ") == "notes"


def test_description_length_limit() -> None:
    assert validators.clean_description("d" * 500) == "d" * 500
    with pytest.raises(ValueError, match="Max 500 characters"):
        validators.clean_description("d" * 501)


def test_allowed_values_keeps_declaration_order() -> None:
    assert allowed_values(TaskStatus) == "pending, in_progress, completed"
    assert allowed_values(TaskPriority) == "low, medium, high"


def test_parse_enum_lists_allowed_values() -> None:
    assert validators.parse_enum(TaskStatus, "in_progress", "status") is TaskStatus.IN_PROGRESS
    with pytest.raises(ValueError) as exc_info:
        validators.parse_enum(TaskPriority, "urgent", "priority")
    assert str(exc_info.value) == "Invalid priority value. Allowed: low, medium, high"


@pytest.mark.parametrize("value", [None, ""])
def test_due_date_blank_means_none(value) -> None:
    assert validators.parse_due_date(value) is None


def test_due_date_is_normalized_to_naive_utc() -> None:
    assert validators.parse_due_date("2030-01-02T03:04:05Z") == datetime(2030, 1, 2, 3, 4, 5)
    assert validators.parse_due_date("2030-01-02T05:04:05+02:00") == datetime(2030, 1, 2, 3, 4, 5)
    assert validators.parse_due_date("2030-01-02T03:04:05") == datetime(2030, 1, 2, 3, 4, 5)
    assert validators.parse_due_date("2030-01-02") == datetime(2030, 1, 2)


@pytest.mark.parametrize(
    "value",
    [
        "tomorrow",
        "2030-13-01",
        1700000000,
        ["2030-01-01"],
        "9999-12-31T23:59:59-01:00",
        "0001-01-01T00:00:00+01:00",
    ],
)
def test_due_date_unparsable(value) -> None:
    with pytest.raises(ValueError, match="Invalid due date"):
        validators.parse_due_date(value)


def test_due_date_tolerance_window() -> None:
    now = datetime(2030, 1, 1, 12, 0, 0)
    assert validators.check_due_date_window(now - timedelta(seconds=30), now=now) == now - timedelta(seconds=30)
    assert validators.check_due_date_window(now - timedelta(seconds=60), now=now) == now - timedelta(seconds=60)
    with pytest.raises(ValueError, match="Due date/time cannot be in the past"):
        validators.check_due_date_window(now - timedelta(seconds=120), now=now)
    assert validators.check_due_date_window(None, now=now) is None


@pytest.mark.parametrize("raw", [None, "", ",", " , "])
def test_enum_list_absent_means_no_filter(raw) -> None:
    assert validators.parse_enum_list(raw, TaskStatus, "status") == []


def test_enum_list_trims_and_deduplicates() -> None:
    parsed = validators.parse_enum_list(" pending , completed,pending", TaskStatus, "status")
    assert parsed == [TaskStatus.PENDING, TaskStatus.COMPLETED]


def test_enum_list_rejects_any_unknown_value() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validators.parse_enum_list("pending,bogus", TaskStatus, "status")
    assert exc_info.value.message == "Invalid status value. Allowed: pending, in_progress, completed"
    assert exc_info.value.errors == {"status": [exc_info.value.message]}


def test_search_query_length() -> None:
    assert validators.check_search_query("q" * 100) == "q" * 100
    assert validators.check_search_query("") is None
    with pytest.raises(ValidationError, match="too long"):
        validators.check_search_query("q" * 101)


def test_parse_task_id() -> None:
    assert validators.parse_task_id("42") == 42
    assert validators.parse_task_id(" 12 ") == 12
    for raw in ("abc", "1.5", "1e3", "+5", "-1", "", str(2 ** 63)):
        with pytest.raises(ValidationError, match="Invalid id"):
            validators.parse_task_id(raw)
