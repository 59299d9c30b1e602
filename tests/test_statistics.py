# tests/test_statistics.py

from __future__ import annotations

import pytest

from taskboard.core.statistics import StatisticsCalculator
from taskboard.models import TaskCreate


@pytest.mark.asyncio
async def test_empty_table_has_all_keys(session) -> None:
    stats = await StatisticsCalculator(session).compute()

    assert stats.total_tasks == 0
    assert stats.by_status.model_dump() == {"pending": 0, "in_progress": 0, "completed": 0}
    assert stats.by_priority.model_dump() == {"low": 0, "medium": 0, "high": 0}


@pytest.mark.asyncio
async def test_counts_by_status_and_priority(session, repo) -> None:
    rows = [
        ("pending", "high"),
        ("pending", "low"),
        ("completed", "high"),
        ("in_progress", "medium"),
    ]
    for status, priority in rows:
        await repo.create_task(TaskCreate(title=f"{status}/{priority}", status=status, priority=priority))

    stats = await StatisticsCalculator(session).compute()

    assert stats.total_tasks == 4
    assert stats.by_status.model_dump() == {"pending": 2, "in_progress": 1, "completed": 1}
    assert stats.by_priority.model_dump() == {"low": 1, "medium": 1, "high": 2}
    assert sum(stats.by_status.model_dump().values()) == stats.total_tasks
