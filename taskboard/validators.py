"""
Правила валидации входных данных.

Функции полей (title, description, status, priority, dueDate) бросают
ValueError и используются валидаторами pydantic-моделей. Функции разбора
параметров запроса и id бросают ValidationError приложения напрямую.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from taskboard.enums import allowed_values
from taskboard.exceptions import ValidationError

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
SEARCH_MAX_LENGTH = 100

# Допуск на рассинхронизацию часов и время в пути запроса
DUE_DATE_TOLERANCE = timedelta(seconds=60)

# id - неотрицательное целое в пределах знакового 64-битного столбца
_ID_MAX = 2 ** 63 - 1
_ID_PATTERN = re.compile(r"[0-9]+")

E = TypeVar("E", bound=Enum)


def clean_title(value: Any) -> str:
    if value is None:
        raise ValueError("Title is required")
    if not isinstance(value, str):
        raise ValueError("Title must be a string")
    title = value.strip()
    if not title:
        raise ValueError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Max {TITLE_MAX_LENGTH} characters")
    return title


def clean_description(value: Any) -> Optional[str]:
    """Пустое после trim описание нормализуется в None"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    description = value.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Max {DESCRIPTION_MAX_LENGTH} characters")
    return description or None


def parse_enum(enum_cls: Type[E], value: Any, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise ValueError(f"Invalid {field} value. Allowed: {allowed_values(enum_cls)}")


def parse_due_date(value: Any) -> Optional[datetime]:
    """
    Разобрать срок выполнения.

    None и пустая строка означают "без срока". Строки разбираются как
    ISO-8601 (дата или дата-время, с Z или смещением); время без зоны
    считается UTC. Результат всегда naive UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("Invalid due date") from None
    else:
        raise ValueError("Invalid due date")

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise ValueError("Invalid due date") from None
    return parsed


def check_due_date_window(value: Optional[datetime], now: Optional[datetime] = None) -> Optional[datetime]:
    """Срок не может быть раньше (now - DUE_DATE_TOLERANCE)"""
    if value is None:
        return None
    if now is None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
    if value < now - DUE_DATE_TOLERANCE:
        raise ValueError("Due date/time cannot be in the past")
    return value


def parse_enum_list(raw: Optional[str], enum_cls: Type[E], field: str) -> List[E]:
    """
    Разобрать список значений через запятую из query-параметра.

    Отсутствующий или пустой параметр означает "без фильтра" (пустой список).
    Любое неизвестное значение отклоняет весь запрос.
    """
    if not raw:
        return []
    items = [item.strip() for item in raw.split(",")]
    items = [item for item in items if item]

    known = {member.value: member for member in enum_cls}
    if any(item not in known for item in items):
        raise ValidationError.for_field(
            field, f"Invalid {field} value. Allowed: {allowed_values(enum_cls)}"
        )

    result: List[E] = []
    for item in items:
        if known[item] not in result:
            result.append(known[item])
    return result


def check_search_query(q: Optional[str]) -> Optional[str]:
    if q is None:
        return None
    if len(q) > SEARCH_MAX_LENGTH:
        raise ValidationError.for_field("q", f"Query 'q' too long (max {SEARCH_MAX_LENGTH}).")
    return q or None


def parse_task_id(raw: str) -> int:
    if not isinstance(raw, str) or not _ID_PATTERN.fullmatch(raw.strip()):
        raise ValidationError.for_field("id", "Invalid id")
    task_id = int(raw.strip())
    if task_id > _ID_MAX:
        raise ValidationError.for_field("id", "Invalid id")
    return task_id
