"""Task endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Response

from src.tasks import (
    UNSET,
    WILDCARD,
    FilterCriteria,
    TaskError,
    TaskNotFoundError,
    TaskPriority,
    TaskStatus,
    TaskValidationError,
    aggregate,
    filter_tasks,
    generate_insights,
)
from src.tasks.models import PRIORITY_VALUES, STATUS_VALUES
from src.tasks.validation import errors, validate_form

from ..dependencies import (
    get_task_repository,
    serialize_statistics,
    serialize_task,
    utc_timestamp,
)
from ..schemas import (
    ErrorResponse,
    StatisticsEnvelope,
    StatisticsResponse,
    TaskCreateRequest,
    TaskListMeta,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _parse_criteria(
    status: Optional[str], priority: Optional[str], search: Optional[str]
) -> FilterCriteria:
    criteria = FilterCriteria(search=search or "")
    if status and status != WILDCARD:
        try:
            criteria.status = TaskStatus(status).value
        except ValueError:
            raise TaskError(
                "INVALID_QUERY_PARAMETER",
                f"Invalid status value. Must be one of: {', '.join(STATUS_VALUES)}",
                {"parameter": "status", "value": status},
            ) from None
    if priority and priority != WILDCARD:
        if priority not in PRIORITY_VALUES:
            raise TaskError(
                "INVALID_QUERY_PARAMETER",
                f"Invalid priority value. Must be one of: {', '.join(PRIORITY_VALUES)}",
                {"parameter": "priority", "value": priority},
            )
        criteria.priority = priority
    return criteria


def _check(payload: dict, fields) -> None:
    failed = errors(validate_form(payload, fields=fields))
    if failed:
        raise TaskValidationError("Task validation failed", failed)


def register_task_routes(app: FastAPI, read_only: bool = False) -> None:
    """Register task endpoints. Write endpoints are skipped when ``read_only``."""

    @app.get("/api/tasks", response_model=TaskListResponse, responses=ERROR_RESPONSES)
    async def list_tasks(
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> TaskListResponse:
        """List tasks, optionally filtered by status, priority and search text."""
        criteria = _parse_criteria(status, priority, search)
        repo = get_task_repository()
        try:
            all_tasks = await asyncio.to_thread(repo.list)
        except Exception as exc:
            logger.exception("Failed to list tasks: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to retrieve tasks") from exc

        filtered = filter_tasks(all_tasks, criteria)
        return TaskListResponse(
            tasks=[serialize_task(task) for task in filtered],
            stats=serialize_statistics(aggregate(filtered)),
            meta=TaskListMeta(
                total=len(all_tasks),
                filtered=len(filtered),
                timestamp=utc_timestamp(),
                degraded=repo.degraded,
            ),
        )

    @app.get("/api/tasks/stats", response_model=StatisticsEnvelope)
    async def task_statistics() -> StatisticsEnvelope:
        """Statistics over every task, with insights."""
        repo = get_task_repository()
        try:
            tasks = await asyncio.to_thread(repo.list)
        except Exception as exc:
            logger.exception("Failed to calculate statistics: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to calculate statistics") from exc
        snapshot = aggregate(tasks)
        return StatisticsEnvelope(
            statistics=serialize_statistics(snapshot),
            insights=generate_insights(snapshot),
            timestamp=utc_timestamp(),
        )

    @app.get("/api/stats", response_model=StatisticsResponse)
    async def statistics() -> StatisticsResponse:
        """Plain statistics object over every task."""
        repo = get_task_repository()
        try:
            tasks = await asyncio.to_thread(repo.list)
        except Exception as exc:
            logger.exception("Failed to calculate statistics: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to calculate statistics") from exc
        return serialize_statistics(aggregate(tasks))

    @app.get("/api/tasks/{task_id}", response_model=TaskResponse, responses=ERROR_RESPONSES)
    async def get_task(task_id: int) -> TaskResponse:
        repo = get_task_repository()
        task = await asyncio.to_thread(repo.get, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return serialize_task(task)

    if read_only:
        logger.info("Read-only mode: task write endpoints disabled")
        return

    @app.post(
        "/api/tasks", response_model=TaskResponse, status_code=201, responses=ERROR_RESPONSES
    )
    async def create_task(request: TaskCreateRequest) -> TaskResponse:
        """Create a new task."""
        payload = {
            "title": request.title,
            "description": request.description or "",
            "status": request.status,
            "priority": request.priority,
            "dueDate": request.due_date,
        }
        _check(payload, None)

        repo = get_task_repository()
        try:
            task = await asyncio.to_thread(
                repo.create,
                request.title.strip(),
                (request.description or "").strip(),
                TaskStatus(request.status),
                TaskPriority(request.priority),
                request.assignee or None,
                request.due_date or None,
            )
        except TaskError:
            raise
        except Exception as exc:
            logger.exception("Failed to create task: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to create task") from exc
        return serialize_task(task)

    @app.put("/api/tasks/{task_id}", response_model=TaskResponse, responses=ERROR_RESPONSES)
    async def update_task(task_id: int, request: TaskUpdateRequest) -> TaskResponse:
        """Update an existing task with the fields present in the body."""
        repo = get_task_repository()
        current = await asyncio.to_thread(repo.get, task_id)
        if current is None:
            raise TaskNotFoundError(task_id)

        changes = request.model_dump(exclude_unset=True)
        payload = {
            "title": changes.get("title"),
            "description": changes.get("description"),
            "status": changes.get("status"),
            "priority": changes.get("priority"),
            "dueDate": changes.get("due_date"),
        }
        fields = [
            name
            for name in ("title", "description", "status", "priority")
            if changes.get(name) is not None
        ]
        # an unchanged (possibly past) due date is not re-validated
        if changes.get("due_date") and changes["due_date"] != current.due_date:
            fields.append("dueDate")
        _check(payload, fields)

        try:
            task = await asyncio.to_thread(
                lambda: repo.update(
                    task_id,
                    title=changes["title"].strip() if changes.get("title") else None,
                    description=changes.get("description"),
                    status=TaskStatus(changes["status"]) if changes.get("status") else None,
                    priority=TaskPriority(changes["priority"]) if changes.get("priority") else None,
                    assignee=(changes["assignee"] or None) if "assignee" in changes else UNSET,
                    due_date=(changes["due_date"] or None) if "due_date" in changes else UNSET,
                )
            )
        except TaskError:
            raise
        except Exception as exc:
            logger.exception("Failed to update task: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to update task") from exc
        if task is None:
            raise TaskNotFoundError(task_id)
        return serialize_task(task)

    @app.delete("/api/tasks/{task_id}", status_code=204, responses=ERROR_RESPONSES)
    async def delete_task(task_id: int) -> Response:
        """Delete a task."""
        repo = get_task_repository()
        try:
            deleted = await asyncio.to_thread(repo.delete, task_id)
        except TaskError:
            raise
        except Exception as exc:
            logger.exception("Failed to delete task: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to delete task") from exc
        if not deleted:
            raise TaskNotFoundError(task_id)
        return Response(status_code=204)
