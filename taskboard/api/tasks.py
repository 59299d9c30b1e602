import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status as http_status

from taskboard.core.queries import TaskFilters
from taskboard.core.repository import TaskRepository
from taskboard.core.statistics import StatisticsCalculator
from taskboard.dependencies import get_statistics_calculator, get_task_repository
from taskboard.exceptions import NotFoundError
from taskboard.models import DeleteResponse, TaskCreate, TaskResponse, TaskStats, TaskUpdate
from taskboard.validators import parse_task_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse], summary="List tasks")
async def list_tasks(
    status: Optional[str] = Query(None, description="Comma-separated list of statuses"),
    priority: Optional[str] = Query(None, description="Comma-separated list of priorities"),
    q: Optional[str] = Query(None, description="Search in title"),
    sort: Optional[str] = Query(None, description="<column>.<direction>", examples=["created_at.desc"]),
    repo: TaskRepository = Depends(get_task_repository),
):
    """
    Получить список задач с фильтрацией и сортировкой
    """
    filters = TaskFilters.from_query(status=status, priority=priority, q=q, sort=sort)
    tasks = await repo.list_tasks(filters)
    return [TaskResponse.model_validate(task) for task in tasks]


# Объявлен до /{task_id}, иначе "stats" будет принят за id
@router.get("/stats", response_model=TaskStats, summary="Tasks statistics")
async def get_stats(calculator: StatisticsCalculator = Depends(get_statistics_calculator)):
    """
    Общее количество задач и распределения по статусу и приоритету
    """
    return await calculator.compute()


@router.get("/{task_id}", response_model=TaskResponse, summary="Get task by id")
async def get_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    task = await repo.get_task(parse_task_id(task_id))
    if task is None:
        raise NotFoundError()
    return TaskResponse.model_validate(task)


@router.post("", response_model=TaskResponse, status_code=http_status.HTTP_201_CREATED, summary="Create task")
async def create_task(payload: TaskCreate, repo: TaskRepository = Depends(get_task_repository)):
    task = await repo.create_task(payload)
    logger.info(f"Создана задача #{task.id}")
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse, summary="Update task")
async def update_task(task_id: str, patch: TaskUpdate, repo: TaskRepository = Depends(get_task_repository)):
    """
    Частичное обновление: меняются только переданные поля
    """
    task = await repo.update_task(parse_task_id(task_id), patch)
    if task is None:
        raise NotFoundError()
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", response_model=DeleteResponse, summary="Delete task")
async def delete_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    deleted = await repo.delete_task(parse_task_id(task_id))
    if not deleted:
        raise NotFoundError()
    logger.info(f"Удалена задача #{task_id}")
    return DeleteResponse(success=True)
