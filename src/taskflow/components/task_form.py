"""Task form: create/edit with per-field validation."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Optional

from src.tasks import Task, TaskPriority, TaskStatus
from src.tasks.validation import (
    FORM_FIELDS,
    ValidationResult,
    errors,
    is_valid,
    validate_field,
    validate_form,
)

from ..events import EventBus, TaskSubmitted

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = FORM_FIELDS + ("assignee",)


def _empty_values(default_status: str = TaskStatus.TODO.value) -> Dict[str, str]:
    return {
        "title": "",
        "description": "",
        "status": default_status,
        "priority": TaskPriority.MEDIUM.value,
        "dueDate": "",
        "assignee": "",
    }


class TaskForm:
    """Form state for creating or editing a task.

    Every ``set_field`` re-validates that field; ``submit`` validates the whole
    form and publishes ``TaskSubmitted`` only when every field passes.
    """

    def __init__(self, bus: EventBus, today: Optional[Callable[[], date]] = None) -> None:
        self.bus = bus
        self._today = today or date.today
        self.values: Dict[str, str] = _empty_values()
        self.errors: Dict[str, str] = {}
        self.current_task: Optional[Task] = None
        self.is_open = False
        self.submitting = False

    @property
    def is_editing(self) -> bool:
        return self.current_task is not None

    @property
    def title(self) -> str:
        return "Edit Task" if self.is_editing else "Add New Task"

    @property
    def submit_label(self) -> str:
        if self.submitting:
            return "Saving..." if self.is_editing else "Creating..."
        return "Update Task" if self.is_editing else "Create Task"

    def open(self, task: Optional[Task] = None, default_status: str = TaskStatus.TODO.value) -> None:
        self.reset()
        if task is not None:
            self.current_task = task
            self.values.update(
                title=task.title,
                description=task.description,
                status=task.status.value,
                priority=task.priority.value,
                dueDate=task.due_date or "",
                assignee=task.assignee or "",
            )
        else:
            self.values["status"] = TaskStatus(default_status).value
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.reset()

    def reset(self) -> None:
        self.values = _empty_values()
        self.errors = {}
        self.current_task = None
        self.submitting = False

    def _skip_due_date(self) -> bool:
        # an existing task keeps its due date even once it has passed
        return (
            self.current_task is not None
            and (self.values.get("dueDate") or None) == self.current_task.due_date
        )

    def _record(self, name: str, result: ValidationResult) -> ValidationResult:
        if result.valid:
            self.errors.pop(name, None)
        else:
            self.errors[name] = result.message
        return result

    def set_field(self, name: str, value: Any) -> ValidationResult:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        self.values[name] = "" if value is None else str(value)
        return self.validate_field(name)

    def validate_field(self, name: str) -> ValidationResult:
        if name == "assignee" or (name == "dueDate" and self._skip_due_date()):
            return self._record(name, ValidationResult(True))
        return self._record(name, validate_field(name, self.values.get(name), self._today()))

    def validate(self) -> bool:
        fields = [name for name in FORM_FIELDS if not (name == "dueDate" and self._skip_due_date())]
        results = validate_form(self.values, fields=fields, today=self._today())
        self.errors = errors(results)
        return is_valid(results)

    def char_count(self, name: str) -> int:
        return len(self.values.get(name, ""))

    def form_data(self) -> Dict[str, Any]:
        """Trimmed values; empty optional fields become None."""
        data: Dict[str, Any] = {name: (value or "").strip() for name, value in self.values.items()}
        for optional in ("description", "dueDate", "assignee"):
            if not data.get(optional):
                data[optional] = None
        return data

    def submit(self) -> bool:
        """Validate and publish the submission. Blocked while a submit is in flight."""
        if self.submitting:
            logger.debug("Submit ignored: previous submission still in flight")
            return False
        if not self.validate():
            logger.debug("Submit blocked by validation errors: %s", self.errors)
            return False
        task_id = self.current_task.id if self.current_task else None
        self.bus.publish(TaskSubmitted(data=self.form_data(), task_id=task_id))
        return True

    def set_submitting(self, submitting: bool) -> None:
        self.submitting = submitting
