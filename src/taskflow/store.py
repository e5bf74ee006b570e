"""In-memory task store owned by the controller."""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Tuple

from src.tasks import Task


class TaskStore:
    """Ordered task records with unique, immutable identifiers.

    Readers get tuples; only the controller mutates the store, and only after
    a completed API call.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = threading.Lock()
        self._tasks: List[Task] = []
        self.replace_all(tasks)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        tasks = list(tasks)
        ids = [task.id for task in tasks]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate task ids in task list")
        with self._lock:
            self._tasks = tasks

    def add(self, task: Task) -> None:
        with self._lock:
            if any(existing.id == task.id for existing in self._tasks):
                raise ValueError(f"Task {task.id} already exists")
            self._tasks.append(task)

    def replace(self, task: Task) -> bool:
        with self._lock:
            for index, existing in enumerate(self._tasks):
                if existing.id == task.id:
                    self._tasks[index] = task
                    return True
        return False

    def remove(self, task_id: int) -> bool:
        with self._lock:
            before = len(self._tasks)
            self._tasks = [task for task in self._tasks if task.id != task_id]
            return len(self._tasks) != before

    def get(self, task_id: int) -> Optional[Task]:
        with self._lock:
            for task in self._tasks:
                if task.id == task_id:
                    return task
        return None

    def all(self) -> Tuple[Task, ...]:
        with self._lock:
            return tuple(self._tasks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
