# taskboard/__init__.py

"""
Taskboard - REST API задач с веб-страницей

Список, фильтрация, создание, обновление и удаление задач,
агрегированная статистика по статусу и приоритету.
"""

__version__ = "1.0.0"
