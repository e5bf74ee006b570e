"""Statistics panel: counts, progress, due dates and quick filters."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.tasks import FilterCriteria, StatisticsSnapshot, Task, aggregate, generate_insights
from src.tasks.statistics import summarize

from ..events import EventBus, StatsQuickAction, StatsRefreshRequested

QUICK_ACTIONS = ("show-overdue", "show-high-priority", "show-completed", "clear-filters")
STAT_CARD_FILTERS = {"completed": "done", "in-progress": "in-progress", "pending": "todo"}


class StatisticsPanel:
    def __init__(self, bus: EventBus) -> None:
        self.bus = bus
        self.tasks: Tuple[Task, ...] = ()
        self.criteria = FilterCriteria()
        self.snapshot = StatisticsSnapshot()
        self.insights: List[str] = generate_insights(self.snapshot)

    def update_statistics(
        self,
        tasks: Iterable[Task],
        criteria: Optional[FilterCriteria] = None,
        today: Optional[date] = None,
    ) -> StatisticsSnapshot:
        """Recompute everything from ``tasks``; nothing is carried over."""
        self.tasks = tuple(tasks)
        if criteria is not None:
            self.criteria = criteria.copy()
        self.snapshot = aggregate(self.tasks, today)
        self.insights = generate_insights(self.snapshot)
        return self.snapshot

    def priority_share(self, priority: str) -> float:
        """Share of tasks with ``priority`` in percent, for the distribution bars."""
        if self.snapshot.total == 0:
            return 0.0
        return self.snapshot.by_priority.get(priority, 0) / self.snapshot.total * 100

    def quick_action(self, action: str) -> None:
        if action not in QUICK_ACTIONS:
            raise ValueError(f"Unknown quick action: {action}")
        self.bus.publish(StatsQuickAction(action=action))

    def click_stat_card(self, stat: str) -> bool:
        status = STAT_CARD_FILTERS.get(stat)
        if status is None:
            return False
        self.bus.publish(StatsQuickAction(action="filter-by-status", value=status))
        return True

    def click_priority(self, priority: str) -> None:
        self.bus.publish(StatsQuickAction(action="filter-by-priority", value=priority))

    def refresh(self) -> None:
        self.bus.publish(StatsRefreshRequested())

    def summary(self) -> Dict[str, int]:
        return summarize(self.snapshot)

    def export(self) -> Dict[str, Any]:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "filter": {
                "status": self.criteria.status,
                "priority": self.criteria.priority,
                "search": self.criteria.search,
                "due": self.criteria.due,
            },
            "statistics": self.snapshot.to_dict(),
            "insights": list(self.insights),
        }
