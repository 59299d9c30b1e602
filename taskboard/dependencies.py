#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Taskboard - Dependencies
Подключение к базе данных и провайдеры зависимостей для FastAPI

Версия: 1.0.0
Дата: 2025-06-10
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Depends
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from taskboard.config import TaskboardSettings
from taskboard.core.database import create_tables
from taskboard.core.repository import TaskRepository
from taskboard.core.statistics import StatisticsCalculator
from taskboard.exceptions import InternalError

logger = logging.getLogger(__name__)

# ===== ГЛОБАЛЬНЫЕ ПЕРЕМЕННЫЕ =====

_db_engine: Optional[AsyncEngine] = None
_db_session_factory: Optional[async_sessionmaker] = None

# ===== ИНИЦИАЛИЗАЦИЯ КОМПОНЕНТОВ =====


def _ensure_sqlite_dir(url: str) -> None:
    """Создать каталог для файла SQLite"""
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


def build_engine(settings: TaskboardSettings) -> AsyncEngine:
    """Создать async-движок; параметры пула только для серверных СУБД"""
    engine_kwargs = {"echo": settings.DB_ECHO}
    if settings.is_sqlite:
        _ensure_sqlite_dir(settings.DATABASE_URL)
    else:
        engine_kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return create_async_engine(settings.DATABASE_URL, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_database(settings: TaskboardSettings) -> async_sessionmaker:
    """Инициализация базы данных"""
    global _db_engine, _db_session_factory

    if _db_engine is None:
        logger.info("🔄 Инициализация базы данных...")
        _db_engine = build_engine(settings)
        _db_session_factory = build_session_factory(_db_engine)

        if settings.CREATE_TABLES:
            await create_tables(_db_engine)

        logger.info("✅ База данных инициализирована")

    return _db_session_factory


async def close_database() -> None:
    """Закрыть пул соединений"""
    global _db_engine, _db_session_factory

    if _db_engine is not None:
        await _db_engine.dispose()
        logger.info("✅ Соединения с БД закрыты")

    _db_engine = None
    _db_session_factory = None


def get_engine() -> Optional[AsyncEngine]:
    return _db_engine


# ===== ПРОВАЙДЕРЫ ЗАВИСИМОСТЕЙ =====

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Одна сессия на запрос"""
    if _db_session_factory is None:
        raise InternalError("Database is not initialized")

    async with _db_session_factory() as session:
        yield session


async def get_task_repository(session: AsyncSession = Depends(get_session)) -> TaskRepository:
    return TaskRepository(session)


async def get_statistics_calculator(session: AsyncSession = Depends(get_session)) -> StatisticsCalculator:
    return StatisticsCalculator(session)
