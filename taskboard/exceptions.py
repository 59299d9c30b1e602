from typing import Dict, List, Optional


class TaskboardError(Exception):
    """Базовое исключение приложения"""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    """Некорректные входные данные (тело запроса, параметры, id)"""

    status_code = 400

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors: Dict[str, List[str]] = errors or {}

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: [message]})


class NotFoundError(TaskboardError):
    """Задача с таким id не существует"""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class InternalError(TaskboardError):
    """Непредвиденная ошибка (например, недоступно хранилище)"""

    status_code = 500
