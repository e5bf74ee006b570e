"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.tasks import TaskPriority, TaskStatus


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, as the frontend expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskResponse(CamelModel):
    """Serialized task record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )

    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    assignee: Optional[str] = None
    due_date: Optional[str] = None
    created_at: str
    updated_at: str


class TaskCreateRequest(CamelModel):
    """Request body for creating a task.

    Field rules (length, enum values, due date) are checked by
    ``src.tasks.validation`` so that the API and the form report the same
    messages.
    """

    title: str = ""
    description: Optional[str] = Field(default="")
    status: str = Field(default=TaskStatus.TODO.value)
    priority: str = Field(default=TaskPriority.MEDIUM.value)
    assignee: Optional[str] = None
    due_date: Optional[str] = Field(default=None, description="ISO date (YYYY-MM-DD)")


class TaskUpdateRequest(CamelModel):
    """Request body for updating a task. Only the fields sent are changed."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[str] = None


class StatisticsResponse(CamelModel):
    """Aggregated statistics for a task list."""

    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    by_due_date: Dict[str, int]
    completion_rate: int


class TaskListMeta(CamelModel):
    total: int
    filtered: int
    timestamp: str
    degraded: bool = Field(
        default=False,
        description="True when the task file could not be read and an empty list is served",
    )


class TaskListResponse(CamelModel):
    """Response for the task list endpoint."""

    tasks: List[TaskResponse]
    stats: StatisticsResponse
    meta: TaskListMeta


class StatisticsEnvelope(CamelModel):
    """Response for the task statistics endpoint."""

    statistics: StatisticsResponse
    insights: List[str]
    timestamp: str


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str
    timestamp: str


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: ErrorDetail
