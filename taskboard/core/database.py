"""
Схема хранения задач (SQLAlchemy 2.x, декларативный стиль).

Статус и приоритет хранятся как VARCHAR с CHECK-ограничением, а не как
нативный enum СУБД: сортировка по priority лексическая на любом бэкенде.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Enum, Index, Integer, String
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from taskboard.enums import TaskPriority, TaskStatus
from taskboard.validators import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (так оно хранится в таблице)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    pass


class TaskRecord(Base):
    """Строка таблицы tasks"""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(
            TaskStatus,
            name="task_status",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
            length=20,
        ),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(
            TaskPriority,
            name="task_priority",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
            length=20,
        ),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_priority", "priority"),
        Index("idx_tasks_due_date", "due_date"),
        Index("idx_tasks_status_created_at", "status", "created_at"),
        Index("idx_tasks_priority_created_at", "priority", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<TaskRecord(id={self.id}, title={self.title!r}, status={self.status.value})>"


async def create_tables(engine: AsyncEngine) -> None:
    """Создать таблицы и индексы, если их ещё нет"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Схема БД проверена: %s", ", ".join(Base.metadata.tables))
