# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.app import create_app
from taskboard.config import TaskboardSettings
from taskboard.core.database import create_tables
from taskboard.core.repository import TaskRepository
from taskboard.dependencies import build_engine, build_session_factory


@pytest.fixture()
def settings(tmp_path: Path) -> TaskboardSettings:
    """
    Настройки с отдельным файлом SQLite на каждый тест.

    _env_file=None: локальный .env не должен влиять на тесты.
    """
    return TaskboardSettings(
        _env_file=None,
        ENVIRONMENT="testing",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'tasks.sqlite3'}",
    )


@pytest.fixture()
async def session(settings: TaskboardSettings):
    engine = build_engine(settings)
    await create_tables(engine)
    factory = build_session_factory(engine)
    async with factory() as db_session:
        yield db_session
    await engine.dispose()


@pytest.fixture()
def repo(session) -> TaskRepository:
    return TaskRepository(session)


@pytest.fixture()
def client(settings: TaskboardSettings):
    """Клиент приложения; lifespan создаёт и закрывает движок БД"""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
