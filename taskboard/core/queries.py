"""
Построение запроса списка задач: фильтры и сортировка.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import Select, and_, select

from taskboard.core.database import TaskRecord
from taskboard.enums import TaskPriority, TaskStatus
from taskboard import validators

SORT_COLUMNS = {
    "created_at": TaskRecord.created_at,
    "priority": TaskRecord.priority,
    "due_date": TaskRecord.due_date,
}
SORT_DIRECTIONS = ("asc", "desc")

DEFAULT_SORT_COLUMN = "created_at"
DEFAULT_SORT_DIRECTION = "desc"


@dataclass
class TaskFilters:
    """Проверенные параметры запроса списка"""

    q: Optional[str] = None
    statuses: List[TaskStatus] = field(default_factory=list)
    priorities: List[TaskPriority] = field(default_factory=list)
    sort: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        q: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> "TaskFilters":
        """Разобрать сырые query-параметры; бросает ValidationError"""
        return cls(
            q=validators.check_search_query(q),
            statuses=validators.parse_enum_list(status, TaskStatus, "status"),
            priorities=validators.parse_enum_list(priority, TaskPriority, "priority"),
            sort=sort,
        )


def parse_sort(sort: Optional[str]) -> Tuple[str, str]:
    """
    Разобрать дескриптор "<column>.<direction>".

    Неизвестный столбец -> created_at, неизвестное или пропущенное
    направление -> desc.
    """
    if not sort:
        return DEFAULT_SORT_COLUMN, DEFAULT_SORT_DIRECTION

    parts = sort.split(".")
    column = parts[0]
    direction = parts[1] if len(parts) > 1 else ""
    if column not in SORT_COLUMNS:
        column = DEFAULT_SORT_COLUMN
    if direction not in SORT_DIRECTIONS:
        direction = DEFAULT_SORT_DIRECTION
    return column, direction


def build_order_by(sort: Optional[str]) -> list:
    column_name, direction = parse_sort(sort)
    column = SORT_COLUMNS[column_name]
    descending = direction == "desc"

    # priority хранится строкой, порядок лексический: high < low < medium
    order = column.desc() if descending else column.asc()
    if column_name == "due_date":
        # NULL в конце при asc и в начале при desc, как в PostgreSQL
        order = order.nulls_first() if descending else order.nulls_last()

    tiebreak = TaskRecord.id.desc() if descending else TaskRecord.id.asc()
    return [order, tiebreak]


def build_conditions(filters: TaskFilters) -> list:
    conditions = []
    if filters.q:
        conditions.append(TaskRecord.title.icontains(filters.q, autoescape=True))
    if filters.statuses:
        conditions.append(TaskRecord.status.in_(filters.statuses))
    if filters.priorities:
        conditions.append(TaskRecord.priority.in_(filters.priorities))
    return conditions


def build_list_query(filters: TaskFilters) -> Select:
    """Один SELECT: конъюнкция фильтров и порядок сортировки"""
    stmt = select(TaskRecord)
    conditions = build_conditions(filters)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    return stmt.order_by(*build_order_by(filters.sort))
