#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Taskboard - Configuration
Конфигурация API задач с настройками для разных сред

Версия: 1.0.0
Дата: 2025-06-10
"""

import json
import logging
import sys
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TaskboardSettings(BaseSettings):
    """Настройки приложения Taskboard"""

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Tasks API",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия API"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Режим отладки"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска сервера"
    )

    PORT: int = Field(
        default=4000,
        description="Порт для запуска сервера"
    )

    API_PREFIX: str = Field(
        default="",
        description="Префикс маршрутов API (например /api)"
    )

    DOCS_URL: Optional[str] = Field(
        default="/docs",
        description="URL документации API (None для отключения)"
    )

    # ===== CORS НАСТРОЙКИ =====

    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    # ===== БАЗА ДАННЫХ =====

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/tasks.db",
        description="URL базы данных (async-драйвер SQLAlchemy)"
    )

    DB_ECHO: bool = Field(
        default=False,
        description="Логировать SQL-запросы"
    )

    DB_POOL_SIZE: int = Field(
        default=5,
        description="Размер пула соединений БД"
    )

    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Максимальное количество дополнительных соединений"
    )

    CREATE_TABLES: bool = Field(
        default=True,
        description="Создавать таблицы при старте приложения"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOGS_DIR: Optional[Path] = Field(
        default=None,
        description="Директория логов (None - только консоль)"
    )

    LOG_MAX_BYTES: int = Field(
        default=10_000_000,
        description="Максимальный размер файла лога"
    )

    LOG_BACKUP_COUNT: int = Field(
        default=5,
        description="Количество ротируемых файлов лога"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ["development", "production", "testing", "staging"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Валидация порта"""
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v):
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def validate_origins(cls, v):
        """Валидация CORS origins"""
        if isinstance(v, str):
            # JSON-список или строка через запятую
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def validate_production_settings(self):
        """В продакшене отключаем DEBUG и документацию API"""
        if self.ENVIRONMENT == "production":
            self.DEBUG = False
            self.DOCS_URL = None
        return self

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def setup_logging(self) -> None:
        """Настройка логирования: консоль и, если задан LOGS_DIR, файл с ротацией"""
        root = logging.getLogger()
        root.setLevel(getattr(logging, self.LOG_LEVEL))

        # Убираем ранее установленные обработчики, чтобы не дублировать вывод
        for handler in list(root.handlers):
            root.removeHandler(handler)

        formatter = logging.Formatter(fmt=self.LOG_FORMAT, datefmt=self.LOG_DATE_FORMAT)

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        root.addHandler(console)

        if self.LOGS_DIR is not None:
            self.LOGS_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.LOGS_DIR / "taskboard.log",
                maxBytes=self.LOG_MAX_BYTES,
                backupCount=self.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        # Настройка логгеров внешних библиотек
        if not self.DEBUG:
            logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        if not self.DB_ECHO:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> TaskboardSettings:
    """Настройки из окружения и .env (кэшируются)"""
    return TaskboardSettings()
