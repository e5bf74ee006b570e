"""Task board: tasks grouped into status columns."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.tasks import Task, TaskStatus
from src.tasks.models import STATUS_VALUES
from src.tasks.statistics import parse_due_date

from ..events import (
    EventBus,
    TaskAddRequested,
    TaskDeleteRequested,
    TaskEditRequested,
    TaskStatusChangeRequested,
)

logger = logging.getLogger(__name__)

COLUMN_TITLES = {"todo": "To Do", "in-progress": "In Progress", "done": "Done"}
STATUS_FLOW: Dict[str, Tuple[str, ...]] = {
    "todo": ("in-progress",),
    "in-progress": ("todo", "done"),
    "done": ("in-progress",),
}


def due_date_class(due_date: Optional[str], today: Optional[date] = None) -> str:
    due = parse_due_date(due_date)
    if due is None:
        return ""
    days = (due - (today or date.today())).days
    if days < 0:
        return "overdue"
    if days <= 1:
        return "due-soon"
    if days <= 3:
        return "due-upcoming"
    return ""


class TaskBoard:
    """Holds the tasks it was last given and turns user actions into intents.

    The board never calls the API itself; the controller handles the intents.
    """

    def __init__(self, bus: EventBus) -> None:
        self.bus = bus
        self.tasks: Tuple[Task, ...] = ()
        self.columns: Dict[str, List[Task]] = {status: [] for status in STATUS_VALUES}

    def update_tasks(self, tasks: Iterable[Task]) -> None:
        self.tasks = tuple(tasks)
        columns: Dict[str, List[Task]] = {status: [] for status in STATUS_VALUES}
        for task in self.tasks:
            columns[task.status.value].append(task)
        self.columns = columns

    @property
    def counts(self) -> Dict[str, int]:
        return {status: len(tasks) for status, tasks in self.columns.items()}

    def find(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    @staticmethod
    def available_moves(status: str) -> Tuple[str, ...]:
        return STATUS_FLOW.get(status, ())

    def card(self, task: Task, today: Optional[date] = None) -> Dict[str, Any]:
        """Render data for a single task card."""
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "assignee": task.assignee or "",
            "priority": task.priority.value,
            "priorityLabel": task.priority.value.capitalize(),
            "dueDate": task.due_date,
            "dueClass": due_date_class(task.due_date, today),
            "moves": [
                {"status": move, "label": f"Move to {COLUMN_TITLES[move]}"}
                for move in self.available_moves(task.status.value)
            ],
        }

    def request_add(self, status: str = TaskStatus.TODO.value) -> None:
        self.bus.publish(TaskAddRequested(default_status=status))

    def request_edit(self, task_id: int) -> bool:
        task = self.find(task_id)
        if task is None:
            return False
        self.bus.publish(TaskEditRequested(task=task))
        return True

    def request_delete(self, task_id: int, confirmed: bool = True) -> bool:
        if not confirmed or self.find(task_id) is None:
            return False
        self.bus.publish(TaskDeleteRequested(task_id=task_id))
        return True

    def request_status_change(self, task_id: int, new_status: str) -> bool:
        """Move a task to another column. A move to its current column is ignored."""
        task = self.find(task_id)
        new_status = TaskStatus(new_status).value
        if task is None or task.status.value == new_status:
            return False
        self.bus.publish(TaskStatusChangeRequested(task_id=task_id, new_status=new_status))
        return True

    def drop(self, task_id: int, column_status: str) -> bool:
        """Drag-and-drop of a card onto a column."""
        return self.request_status_change(task_id, column_status)
