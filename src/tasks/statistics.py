"""Task statistics: counts by status, priority and due-date bucket."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from .models import DUE_BUCKETS, PRIORITY_VALUES, STATUS_VALUES, Task, TaskStatus

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


def parse_due_date(value: Optional[str]) -> Optional[date]:
    """Return the calendar date of an ISO date/datetime string, or None."""
    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            logger.debug("Unparseable due date: %r", value)
            return None


def due_bucket(due_date: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Classify a due date as overdue/today/week/none.

    Dates more than a week out, and dates that cannot be parsed, belong to no
    bucket and yield None.
    """
    if not due_date:
        return "none"
    due = parse_due_date(due_date)
    if due is None:
        return None
    today = today or date.today()
    if due < today:
        return "overdue"
    if due == today:
        return "today"
    if due <= today + timedelta(days=WEEK_DAYS):
        return "week"
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class StatisticsSnapshot:
    """Point-in-time statistics derived from a task sequence."""

    total: int = 0
    by_status: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(STATUS_VALUES, 0))
    by_priority: Dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(PRIORITY_VALUES, 0)
    )
    by_due_date: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(DUE_BUCKETS, 0))
    completion_rate: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "byStatus": dict(self.by_status),
            "byPriority": dict(self.by_priority),
            "byDueDate": dict(self.by_due_date),
            "completionRate": self.completion_rate,
        }


def aggregate(tasks: Iterable[Task], today: Optional[date] = None) -> StatisticsSnapshot:
    """Compute a fresh snapshot in a single pass over ``tasks``."""
    today = today or date.today()
    snapshot = StatisticsSnapshot()

    for task in tasks:
        snapshot.total += 1
        status = task.status.value
        priority = task.priority.value
        snapshot.by_status[status] = snapshot.by_status.get(status, 0) + 1
        snapshot.by_priority[priority] = snapshot.by_priority.get(priority, 0) + 1

        bucket = due_bucket(task.due_date, today)
        if bucket is not None:
            snapshot.by_due_date[bucket] += 1

    if snapshot.total > 0:
        done = snapshot.by_status[TaskStatus.DONE.value]
        snapshot.completion_rate = _round_half_up(done / snapshot.total * 100)

    return snapshot


def generate_insights(snapshot: StatisticsSnapshot) -> List[str]:
    """Human readable hints shown under the statistics panel."""
    insights: List[str] = []

    rate = snapshot.completion_rate
    if rate >= 80:
        insights.append("Great job! You're completing most of your tasks.")
    elif rate >= 50:
        insights.append("Good progress! Keep pushing forward.")
    elif rate > 0:
        insights.append("You're making progress. Consider breaking down larger tasks.")

    by_priority = snapshot.by_priority
    if by_priority.get("high", 0) > by_priority.get("medium", 0) + by_priority.get("low", 0):
        insights.append("Many high-priority tasks. Focus on the most critical ones first.")

    overdue = snapshot.by_due_date.get("overdue", 0)
    if overdue > 0:
        insights.append(f"{overdue} task(s) overdue. Consider addressing them soon.")

    due_today = snapshot.by_due_date.get("today", 0)
    if due_today > 0:
        insights.append(f"{due_today} task(s) due today. Stay focused!")

    if not insights:
        insights.append("Add some tasks to see productivity insights.")
    return insights


def summarize(snapshot: StatisticsSnapshot) -> Dict[str, int]:
    return {
        "total": snapshot.total,
        "completed": snapshot.by_status.get(TaskStatus.DONE.value, 0),
        "inProgress": snapshot.by_status.get(TaskStatus.IN_PROGRESS.value, 0),
        "pending": snapshot.by_status.get(TaskStatus.TODO.value, 0),
        "completionRate": snapshot.completion_rate,
        "overdue": snapshot.by_due_date.get("overdue", 0),
    }
