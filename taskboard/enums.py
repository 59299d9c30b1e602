# taskboard/enums.py

from enum import Enum
from typing import Type


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def allowed_values(enum_cls: Type[Enum]) -> str:
    """Список допустимых значений для сообщений об ошибках"""
    return ", ".join(member.value for member in enum_cls)
