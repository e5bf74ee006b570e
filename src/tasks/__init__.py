"""Task domain shared by the API server, the client layer and the CLI."""

from .exceptions import TaskError, TaskNotFoundError, TaskStorageError, TaskValidationError
from .filters import filter_tasks, matches
from .models import WILDCARD, FilterCriteria, Task, TaskPriority, TaskStatus
from .repository import UNSET, TaskRepository
from .statistics import StatisticsSnapshot, aggregate, generate_insights

__all__ = [
    "FilterCriteria",
    "StatisticsSnapshot",
    "Task",
    "TaskError",
    "TaskNotFoundError",
    "TaskPriority",
    "TaskRepository",
    "TaskStorageError",
    "TaskStatus",
    "TaskValidationError",
    "UNSET",
    "WILDCARD",
    "aggregate",
    "filter_tasks",
    "generate_insights",
    "matches",
]
