import logging
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import TaskRecord
from taskboard.enums import TaskPriority, TaskStatus
from taskboard.models import PriorityCounts, StatusCounts, TaskStats

logger = logging.getLogger(__name__)


class StatisticsCalculator:
    """Агрегированная статистика по задачам"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count_by(self, column) -> Dict[str, int]:
        rows = await self.session.execute(select(column, func.count()).group_by(column))
        return {key.value: int(count) for key, count in rows.all()}

    async def compute(self) -> TaskStats:
        """
        Общее число задач и распределения по статусу и приоритету.

        Набор ключей фиксирован: отсутствующие группы дают 0.
        """
        total = await self.session.scalar(select(func.count()).select_from(TaskRecord))
        by_status = await self._count_by(TaskRecord.status)
        by_priority = await self._count_by(TaskRecord.priority)

        stats = TaskStats(
            total_tasks=int(total or 0),
            by_status=StatusCounts(**{s.value: by_status.get(s.value, 0) for s in TaskStatus}),
            by_priority=PriorityCounts(**{p.value: by_priority.get(p.value, 0) for p in TaskPriority}),
        )
        logger.debug("Stats computed total=%s", stats.total_tasks)
        return stats
