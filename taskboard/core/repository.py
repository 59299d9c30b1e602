import logging
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import TaskRecord, utcnow
from taskboard.core.queries import TaskFilters, build_list_query
from taskboard.models import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    CRUD над таблицей tasks.

    Каждая операция - одна SQL-инструкция. Отсутствие строки - обычный
    результат (None/False), а не исключение.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # === ЧТЕНИЕ ===

    async def list_tasks(self, filters: Optional[TaskFilters] = None) -> List[TaskRecord]:
        """Отфильтрованный и отсортированный список, без пагинации"""
        stmt = build_list_query(filters or TaskFilters())
        result = await self.session.scalars(stmt)
        return list(result.all())

    async def get_task(self, task_id: int) -> Optional[TaskRecord]:
        return await self.session.get(TaskRecord, task_id)

    # === ИЗМЕНЕНИЕ ===

    async def create_task(self, data: TaskCreate) -> TaskRecord:
        now = utcnow()
        record = TaskRecord(
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        self.session.add(record)
        await self.session.commit()
        logger.debug("Task created id=%s status=%s priority=%s", record.id, record.status.value, record.priority.value)
        return record

    async def update_task(self, task_id: int, patch: TaskUpdate) -> Optional[TaskRecord]:
        """
        Применить только переданные поля и обновить updated_at.

        UPDATE ... WHERE id = ? RETURNING, без предварительного чтения.
        """
        values = patch.changes()
        values["updated_at"] = utcnow()

        stmt = (
            update(TaskRecord)
            .where(TaskRecord.id == task_id)
            .values(**values)
            .returning(TaskRecord)
            .execution_options(populate_existing=True)
        )
        record = (await self.session.scalars(stmt)).one_or_none()
        await self.session.commit()

        if record is None:
            logger.debug("Task update skipped, id=%s not found", task_id)
        else:
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(values))
        return record

    async def delete_task(self, task_id: int) -> bool:
        stmt = delete(TaskRecord).where(TaskRecord.id == task_id).returning(TaskRecord.id)
        deleted_id = (await self.session.execute(stmt)).scalar_one_or_none()
        await self.session.commit()

        logger.debug("Task delete id=%s removed=%s", task_id, deleted_id is not None)
        return deleted_id is not None
