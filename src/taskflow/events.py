"""Typed event bus connecting the UI components and the controller.

Each message is a frozen dataclass; handlers are registered per message type
and called synchronously in subscription order.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, Dict, List, Optional, Type

from src.tasks import FilterCriteria, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterChanged:
    filters: FilterCriteria
    changed_filter: str
    old_value: str
    new_value: str


@dataclass(frozen=True)
class FiltersCleared:
    old_filters: FilterCriteria
    new_filters: FilterCriteria


@dataclass(frozen=True)
class TaskCreated:
    task: Task


@dataclass(frozen=True)
class TaskUpdated:
    task: Task


@dataclass(frozen=True)
class TaskDeleted:
    task_id: int


@dataclass(frozen=True)
class StatsQuickAction:
    action: str
    value: Optional[str] = None


@dataclass(frozen=True)
class StatsRefreshRequested:
    pass


# intents: requests that still have to go through the API


@dataclass(frozen=True)
class TaskAddRequested:
    default_status: str = "todo"


@dataclass(frozen=True)
class TaskEditRequested:
    task: Task


@dataclass(frozen=True)
class TaskSubmitted:
    data: Dict[str, Any] = field(default_factory=dict)
    task_id: Optional[int] = None


@dataclass(frozen=True)
class TaskStatusChangeRequested:
    task_id: int
    new_status: str


@dataclass(frozen=True)
class TaskDeleteRequested:
    task_id: int


Handler = Callable[[Any], None]


class EventBus:
    """Synchronous publish/subscribe with one handler list per message type."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: DefaultDict[Type[Any], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[Any], handler: Handler) -> Callable[[], None]:
        """Register ``handler`` and return a function that removes it."""
        with self._lock:
            self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(event_type, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Any) -> int:
        """Deliver ``event`` to its subscribers. Returns the number of handlers run."""
        with self._lock:
            handlers = list(self._handlers.get(type(event), []))

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %r failed for %s", handler, type(event).__name__)
        return len(handlers)
