from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from .exceptions import TaskStorageError
from .models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

UNSET = object()


class TaskRepository:
    """JSONファイルベースのタスク管理。

    ファイルは ``{"tasks": [...]}`` もしくはタスク配列そのものを受け付け、``{"tasks": [...]}`` 形式で書き戻す。
    読み込みに失敗した場合は空リストとして扱い、``degraded`` を立てる。
    """

    def __init__(self, data_path: Optional[Path] = None):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "tasks.json"
        env_path = os.getenv("TASKFLOW_DATA_PATH")
        if data_path:
            self.data_path = Path(data_path)
        elif env_path:
            self.data_path = Path(env_path)
        else:
            self.data_path = default_path
        self.degraded = False
        self.last_error: Optional[str] = None
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _read(self, strict: bool = False) -> list[Task]:
        """タスクを読み込む

        Args:
            strict: Trueの場合、ファイル破損時は空リストではなく TaskStorageError を送出する
        """
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            records = payload.get("tasks", []) if isinstance(payload, dict) else payload
            tasks = [Task.from_dict(record) for record in records]
        except FileNotFoundError:
            if strict:
                return []
            self._mark_degraded(f"Task file not found: {self.data_path}")
            return []
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Error reading tasks from %s: %s", self.data_path, exc)
            self._mark_degraded(str(exc))
            if strict:
                raise TaskStorageError(
                    "Task file is unreadable; refusing to overwrite it",
                    {"path": str(self.data_path), "reason": str(exc)},
                ) from exc
            return []
        self.degraded = False
        self.last_error = None
        return tasks

    def _mark_degraded(self, reason: str) -> None:
        if not self.degraded:
            logger.warning("Task repository degraded, serving empty list: %s", reason)
        self.degraded = True
        self.last_error = reason

    def _write(self, tasks: list[Task]) -> None:
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.data_path.with_suffix(self.data_path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(
                    {"tasks": [task.to_dict() for task in tasks]}, f, ensure_ascii=False, indent=2
                )
            os.replace(tmp_path, self.data_path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def list(self) -> list[Task]:
        with self._lock:
            return self._read()

    def get(self, task_id: int) -> Optional[Task]:
        for task in self.list():
            if task.id == task_id:
                return task
        return None

    def create(
        self,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        assignee: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> Task:
        now = self._now()
        with self._lock:
            tasks = self._read(strict=True)
            next_id = max((task.id for task in tasks), default=0) + 1
            task = Task(
                id=next_id,
                title=title,
                description=description,
                status=status,
                priority=priority,
                assignee=assignee,
                due_date=due_date,
                created_at=now,
                updated_at=now,
            )
            tasks.append(task)
            self._write(tasks)
        logger.info("Task created: id=%s", task.id)
        return task

    def update(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        assignee: Any = UNSET,
        due_date: Any = UNSET,
    ) -> Optional[Task]:
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if status is not None:
            changes["status"] = status
        if priority is not None:
            changes["priority"] = priority
        if assignee is not UNSET:
            changes["assignee"] = assignee
        if due_date is not UNSET:
            changes["due_date"] = due_date

        with self._lock:
            tasks = self._read(strict=True)
            for index, task in enumerate(tasks):
                if task.id == task_id:
                    break
            else:
                return None

            if not changes:
                return task

            updated = replace(task, updated_at=self._now(), **changes)
            tasks[index] = updated
            self._write(tasks)
        logger.info("Task updated: id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: int) -> bool:
        with self._lock:
            tasks = self._read(strict=True)
            remaining = [task for task in tasks if task.id != task_id]
            if len(remaining) == len(tasks):
                return False
            self._write(remaining)
        logger.info("Task deleted: id=%s", task_id)
        return True

    def bulk_create(self, items: Iterable[dict]) -> list[Task]:
        """テスト/初期データ投入用のヘルパー。"""
        created: list[Task] = []
        for item in items:
            created.append(
                self.create(
                    title=item.get("title", ""),
                    description=item.get("description", ""),
                    status=TaskStatus(item.get("status", TaskStatus.TODO.value)),
                    priority=TaskPriority(item.get("priority", TaskPriority.MEDIUM.value)),
                    assignee=item.get("assignee"),
                    due_date=item.get("dueDate", item.get("due_date")),
                )
            )
        return created
