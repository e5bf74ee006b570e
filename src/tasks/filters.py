"""Filter predicate applied to the task list."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from .models import WILDCARD, FilterCriteria, Task
from .statistics import due_bucket


def _searchable_fields(task: Task) -> tuple:
    return (task.title or "", task.description or "", task.assignee or "")


def matches(task: Task, criteria: FilterCriteria, today: Optional[date] = None) -> bool:
    """Return True when ``task`` passes every restriction in ``criteria``."""
    if criteria.status != WILDCARD and task.status.value != criteria.status:
        return False
    if criteria.priority != WILDCARD and task.priority.value != criteria.priority:
        return False
    if criteria.due != WILDCARD and due_bucket(task.due_date, today) != criteria.due:
        return False
    if criteria.search:
        term = criteria.search.lower()
        if not any(term in text.lower() for text in _searchable_fields(task)):
            return False
    return True


def filter_tasks(
    tasks: Iterable[Task], criteria: FilterCriteria, today: Optional[date] = None
) -> List[Task]:
    return [task for task in tasks if matches(task, criteria, today)]
