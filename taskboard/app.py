#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Taskboard - FastAPI Application
REST API задач и веб-страница со списком, фильтрами и статистикой

Версия: 1.0.0
Дата: 2025-06-10
"""

import argparse
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskboard import dependencies
from taskboard.api import tasks
from taskboard.config import TaskboardSettings, get_settings
from taskboard.exceptions import TaskboardError, ValidationError
from taskboard.models import HealthCheck

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
STATIC_DIR = PACKAGE_DIR / "static"
TEMPLATES_DIR = PACKAGE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_SKIPPED_LOC_PARTS = ("body", "query", "path")


# ===== ОБРАБОТЧИКИ ОШИБОК =====

def _error_response(status_code: int, detail: str, errors: Optional[Dict[str, List[str]]] = None) -> JSONResponse:
    content = {"detail": detail, "status_code": status_code}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def collect_field_errors(errors: Sequence[dict]) -> Dict[str, List[str]]:
    """Ошибки pydantic -> {поле: [сообщения]}"""
    fields: Dict[str, List[str]] = {}
    for err in errors:
        loc = [
            str(part) for part in err.get("loc", ())
            if part not in _SKIPPED_LOC_PARTS and not isinstance(part, int)
        ]
        field = ".".join(loc) or "body"
        ctx_error = (err.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else err.get("msg", "Invalid value")
        fields.setdefault(field, []).append(message)
    return fields


async def taskboard_error_handler(request: Request, exc: TaskboardError):
    if exc.status_code >= 500:
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, "Internal server error")

    errors = exc.errors if isinstance(exc, ValidationError) else None
    return _error_response(exc.status_code, exc.message, errors)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Ошибки разбора тела запроса - 400, как и остальные ошибки валидации"""
    return _error_response(400, "Validation error", collect_field_errors(exc.errors()))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return _error_response(500, "Internal server error")


# ===== ЖИЗНЕННЫЙ ЦИКЛ =====

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    settings: TaskboardSettings = app.state.settings

    if not settings.is_testing:
        settings.setup_logging()

    logger.info(f"🚀 Запуск {settings.APP_NAME} ({settings.ENVIRONMENT})...")
    app.state.start_time = time.time()

    await dependencies.init_database(settings)
    logger.info("✅ API готово к работе")

    yield

    logger.info("🛑 Остановка API...")
    await dependencies.close_database()


# ===== СОЗДАНИЕ ПРИЛОЖЕНИЯ =====

def create_app(settings: Optional[TaskboardSettings] = None) -> FastAPI:
    """Фабрика для создания приложения"""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="API for managing tasks",
        version=settings.VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.start_time = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов и время обработки"""
        start_time = time.time()
        request_id = uuid.uuid4().hex
        client_ip = request.headers.get("X-Forwarded-For") or (request.client.host if request.client else "-")

        try:
            response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.exception(f"❌ Ошибка обработки запроса {request.method} {request.url.path} ({process_time:.3f}s)")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error", "request_id": request_id},
            )

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s "
            f"- {client_ip}"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        response.headers["X-Request-ID"] = request_id
        return response

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # ===== РОУТЕРЫ И СТАТИКА =====

    app.include_router(tasks.router, prefix=settings.API_PREFIX)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def task_board(request: Request):
        """Главная страница: список задач, фильтры и статистика"""
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": settings.APP_NAME,
                "api_base": settings.API_PREFIX,
                "debug": settings.DEBUG,
            },
        )

    @app.get("/health", response_model=HealthCheck, tags=["system"])
    async def health_check():
        """Health check для мониторинга: проверяем доступность БД"""
        engine = dependencies.get_engine()
        try:
            if engine is None:
                raise RuntimeError("Database is not initialized")
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "taskboard",
                    "timestamp": time.time(),
                },
            )

        return HealthCheck(
            status="healthy",
            service="taskboard",
            version=settings.VERSION,
            timestamp=time.time(),
            data={
                "environment": settings.ENVIRONMENT,
                "uptime_seconds": time.time() - app.state.start_time,
            },
        )

    return app


app = create_app()


# ===== ЗАПУСК ПРИЛОЖЕНИЯ =====

def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    dev: Optional[bool] = None,
    reload: Optional[bool] = None,
):
    """Запуск API через uvicorn"""
    settings = get_settings()

    host = host or settings.HOST
    port = port or settings.PORT
    dev = dev if dev is not None else settings.DEBUG
    reload = reload if reload is not None else dev

    settings.setup_logging()
    logger.info(f"🌐 Запуск API на http://{host}:{port}")
    logger.info(f"🗄️ База данных: {settings.DATABASE_URL}")
    logger.info(f"🔧 Режим отладки: {dev}, автоперезагрузка: {reload}")

    try:
        uvicorn.run(
            "taskboard.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if dev else "info",
            access_log=dev,
            server_header=False,
        )
    except KeyboardInterrupt:
        logger.info("👋 API остановлено")


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="taskboard", description="Запуск Tasks API")
    parser.add_argument("--host", default=settings.HOST, help="Host для запуска")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port для запуска")
    parser.add_argument("--dev", action="store_true", help="Режим разработки")
    parser.add_argument("--reload", action="store_true", help="Автоперезагрузка")
    args = parser.parse_args(argv)

    run_server(
        host=args.host,
        port=args.port,
        dev=args.dev or None,
        reload=args.reload or None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
