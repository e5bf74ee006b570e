"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache

from src.taskflow.config import Config
from src.taskflow.logger import setup_logger
from src.tasks import StatisticsSnapshot, Task, TaskRepository

from .schemas import StatisticsResponse, TaskResponse

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Application configuration loaded once from config/app_config.yaml."""
    return config


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    """Singleton TaskRepository."""
    return TaskRepository(data_path=get_config().tasks_path)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def serialize_task(task: Task) -> TaskResponse:
    """Convert domain Task to API response."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        assignee=task.assignee,
        due_date=task.due_date,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def serialize_statistics(snapshot: StatisticsSnapshot) -> StatisticsResponse:
    return StatisticsResponse(
        total=snapshot.total,
        by_status=dict(snapshot.by_status),
        by_priority=dict(snapshot.by_priority),
        by_due_date=dict(snapshot.by_due_date),
        completion_rate=snapshot.completion_rate,
    )
