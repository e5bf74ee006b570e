from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

WILDCARD = "all"


class TaskStatus(str, Enum):
    """Task status shared by the board columns and the API."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    # legacy spellings
    PENDING = "todo"
    COMPLETED = "done"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TaskStatus"]:
        if isinstance(value, str):
            legacy = {
                "completed": cls.DONE,
                "doing": cls.IN_PROGRESS,
                "in_progress": cls.IN_PROGRESS,
                "pending": cls.TODO,
            }
            return legacy.get(value.strip().lower())
        return None


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


STATUS_VALUES = tuple(status.value for status in TaskStatus)
PRIORITY_VALUES = tuple(priority.value for priority in TaskPriority)
DUE_BUCKETS = ("overdue", "today", "week", "none")
_FILTER_LABELS = {"status": "Status", "priority": "Priority", "due": "Due"}


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(slots=True, frozen=True)
class Task:
    """A single task record as stored in the JSON task file."""

    id: int
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: Optional[str] = None
    due_date: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        """Build a task from the camelCase file/wire form (snake_case also accepted)."""
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=TaskStatus(data.get("status") or TaskStatus.TODO.value),
            priority=TaskPriority(data.get("priority") or TaskPriority.MEDIUM.value),
            assignee=data.get("assignee") or None,
            due_date=_pick(data, "dueDate", "due_date") or None,
            created_at=_pick(data, "createdAt", "created_at") or "",
            updated_at=_pick(data, "updatedAt", "updated_at") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "assignee": self.assignee,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class FilterCriteria:
    """Current filter selection. Every field defaults to unrestricted."""

    status: str = WILDCARD
    priority: str = WILDCARD
    search: str = ""
    due: str = WILDCARD

    def copy(self) -> "FilterCriteria":
        return FilterCriteria(
            status=self.status, priority=self.priority, search=self.search, due=self.due
        )

    def is_default(self) -> bool:
        return self.active_count() == 0

    def active_count(self) -> int:
        count = sum(
            1 for name in ("status", "priority", "due") if getattr(self, name) != WILDCARD
        )
        if self.search != "":
            count += 1
        return count

    def summary(self) -> str:
        parts = []
        for name in ("status", "priority", "due"):
            value = getattr(self, name)
            if value != WILDCARD:
                parts.append(f"{_FILTER_LABELS[name]}: {format_filter_value(value)}")
        if self.search != "":
            parts.append(f'Search: "{self.search}"')
        return ", ".join(parts) if parts else "No filters applied"

    def to_query(self) -> Dict[str, str]:
        """Return only the restricted fields, as sent to the API."""
        return {
            key: value
            for key, value in asdict(self).items()
            if value and value != WILDCARD
        }


def format_filter_value(value: str) -> str:
    return " ".join(word.capitalize() for word in value.split("-"))
