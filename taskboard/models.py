from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from taskboard.enums import TaskPriority, TaskStatus
from taskboard import validators


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """naive UTC -> ISO-8601 с миллисекундами и суффиксом Z"""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"


# ===== ВХОДНЫЕ ДАННЫЕ =====

class TaskBase(BaseModel):
    """Общие правила полей для создания и обновления задачи"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def validate_title(cls, v):
        return validators.clean_title(v)

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def validate_description(cls, v):
        return validators.clean_description(v)

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def validate_status(cls, v):
        return validators.parse_enum(TaskStatus, v, "status")

    @field_validator("priority", mode="before", check_fields=False)
    @classmethod
    def validate_priority(cls, v):
        return validators.parse_enum(TaskPriority, v, "priority")

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def parse_due_date(cls, v):
        return validators.parse_due_date(v)

    @field_validator("due_date", mode="after", check_fields=False)
    @classmethod
    def check_due_date(cls, v):
        return validators.check_due_date_window(v)


class TaskCreate(TaskBase):
    # Отсутствующий title проходит через validate_title и даёт "Title is required"
    title: str = Field(default=None, validate_default=True)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None


class TaskUpdate(TaskBase):
    """
    Частичное обновление.

    Отсутствующее поле не меняется; явный null в description/dueDate
    очищает значение. Различие берётся из model_fields_set.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    def changes(self) -> Dict[str, Any]:
        """Только явно переданные поля, ключи совпадают со столбцами таблицы"""
        return {name: getattr(self, name) for name in self.model_fields_set}


# ===== ОТВЕТЫ =====

class TaskResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("due_date", "created_at", "updated_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value)


class StatusCounts(BaseModel):
    pending: int = 0
    in_progress: int = 0
    completed: int = 0


class PriorityCounts(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class TaskStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_tasks: int = 0
    by_status: StatusCounts = Field(default_factory=StatusCounts)
    by_priority: PriorityCounts = Field(default_factory=PriorityCounts)


class DeleteResponse(BaseModel):
    success: bool = True


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Dict[str, Any] = {}
