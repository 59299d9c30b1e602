# taskboard/core/__init__.py

"""
Ядро: схема хранения, построение запросов, CRUD и статистика.
"""

from .database import Base, TaskRecord, create_tables, utcnow
from .queries import TaskFilters, build_list_query, parse_sort
from .repository import TaskRepository
from .statistics import StatisticsCalculator

__all__ = [
    "Base",
    "TaskRecord",
    "create_tables",
    "utcnow",
    "TaskFilters",
    "build_list_query",
    "parse_sort",
    "TaskRepository",
    "StatisticsCalculator",
]
