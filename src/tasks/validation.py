"""Field-level validation rules used by the task form and the write API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from .models import PRIORITY_VALUES, STATUS_VALUES, TaskPriority, TaskStatus
from .statistics import parse_due_date

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

FIELD_LABELS = {
    "title": "Title",
    "description": "Description",
    "status": "Status",
    "priority": "Priority",
    "dueDate": "Due Date",
}
REQUIRED_FIELDS = ("title", "status", "priority")
FORM_FIELDS = ("title", "description", "status", "priority", "dueDate")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str = ""


_OK = ValidationResult(True)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (TaskStatus, TaskPriority)):
        return value.value
    return str(value)


def validate_field(name: str, value: Any, today: Optional[date] = None) -> ValidationResult:
    """Validate one form field and return the first failing rule, if any."""
    text = _text(value)
    trimmed = text.strip()

    if name in REQUIRED_FIELDS and not trimmed:
        return ValidationResult(False, f"{FIELD_LABELS[name]} is required")
    if not trimmed:
        return _OK

    if name == "title":
        if len(trimmed) < TITLE_MIN_LENGTH:
            return ValidationResult(
                False, f"Title must be at least {TITLE_MIN_LENGTH} characters long"
            )
        if len(trimmed) > TITLE_MAX_LENGTH:
            return ValidationResult(
                False, f"Title must be less than {TITLE_MAX_LENGTH} characters"
            )
    elif name == "description":
        if len(text) > DESCRIPTION_MAX_LENGTH:
            return ValidationResult(
                False, f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"
            )
    elif name == "status":
        try:
            TaskStatus(trimmed)
        except ValueError:
            return ValidationResult(
                False, f"Status must be one of: {', '.join(STATUS_VALUES)}"
            )
    elif name == "priority":
        if trimmed not in PRIORITY_VALUES:
            return ValidationResult(
                False, f"Priority must be one of: {', '.join(PRIORITY_VALUES)}"
            )
    elif name == "dueDate":
        if isinstance(value, datetime):
            due = value.date()
        elif isinstance(value, date):
            due = value
        else:
            due = parse_due_date(trimmed)
        if due is None:
            return ValidationResult(False, "Due date must be a valid date (YYYY-MM-DD)")
        if due < (today or date.today()):
            return ValidationResult(False, "Due date cannot be in the past")

    return _OK


def validate_form(
    data: Mapping[str, Any],
    fields: Optional[Iterable[str]] = None,
    today: Optional[date] = None,
) -> Dict[str, ValidationResult]:
    """Validate every form field (or only ``fields``) of ``data``."""
    names = tuple(fields) if fields is not None else FORM_FIELDS
    return {name: validate_field(name, data.get(name), today) for name in names}


def is_valid(results: Mapping[str, ValidationResult]) -> bool:
    return all(result.valid for result in results.values())


def errors(results: Mapping[str, ValidationResult]) -> Dict[str, str]:
    return {name: result.message for name, result in results.items() if not result.valid}
