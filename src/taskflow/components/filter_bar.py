"""Filter bar: owns the current filter criteria."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from src.tasks import WILDCARD, FilterCriteria, TaskStatus
from src.tasks.models import DUE_BUCKETS, PRIORITY_VALUES

from ..debounce import Debouncer
from ..events import EventBus, FilterChanged, FiltersCleared

logger = logging.getLogger(__name__)

FILTER_FIELDS = ("status", "priority", "search", "due")


def _normalize(name: str, value: str) -> str:
    if name == "search":
        return (value or "").strip()
    if not value or value == WILDCARD:
        return WILDCARD
    if name == "status":
        return TaskStatus(value).value
    if name == "priority" and value not in PRIORITY_VALUES:
        raise ValueError(f"Invalid priority filter: {value}")
    if name == "due" and value not in DUE_BUCKETS:
        raise ValueError(f"Invalid due-date filter: {value}")
    return value


class FilterBar:
    """Owns the filter criteria; every change goes through ``update_filter``.

    Free-text search is debounced: ``input_search`` coalesces keystrokes and
    ``submit_search`` (Enter) applies the text immediately.
    """

    def __init__(self, bus: EventBus, debounce_seconds: float = 0.3) -> None:
        self.bus = bus
        self.search_text = ""
        self._lock = threading.Lock()
        self._filters = FilterCriteria()
        self._search_debouncer = Debouncer(debounce_seconds, self._apply_search)

    def update_filter(self, name: str, value: str) -> bool:
        """Set one filter. Publishes FilterChanged and returns True only if it changed."""
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {name}")
        value = _normalize(name, value)
        with self._lock:
            old_value = getattr(self._filters, name)
            if old_value == value:
                return False
            setattr(self._filters, name, value)
            filters = self._filters.copy()
        if name == "search":
            self.search_text = value

        logger.debug("Filter %s: %r -> %r", name, old_value, value)
        self.bus.publish(
            FilterChanged(
                filters=filters, changed_filter=name, old_value=old_value, new_value=value
            )
        )
        return True

    def input_search(self, text: str) -> None:
        """Keystroke in the search box."""
        self.search_text = text
        self._search_debouncer.schedule(text)

    def submit_search(self, text: Optional[str] = None) -> None:
        """Enter in the search box."""
        if text is not None:
            self.search_text = text
        self._search_debouncer.flush(self.search_text)

    def clear_search(self) -> None:
        self.search_text = ""
        self._search_debouncer.flush("")

    def _apply_search(self, text: str) -> None:
        self.update_filter("search", text)

    def clear_all(self) -> None:
        self._search_debouncer.cancel()
        with self._lock:
            old_filters = self._filters
            self._filters = FilterCriteria()
            new_filters = self._filters.copy()
        self.search_text = ""
        self.bus.publish(FiltersCleared(old_filters=old_filters, new_filters=new_filters))

    def get_filters(self) -> FilterCriteria:
        with self._lock:
            return self._filters.copy()

    def set_filters(self, **filters: str) -> bool:
        """Restore filter state without publishing an event."""
        for name in filters:
            if name not in FILTER_FIELDS:
                raise ValueError(f"Unknown filter: {name}")
        normalized = {name: _normalize(name, value) for name, value in filters.items()}
        with self._lock:
            changed = any(getattr(self._filters, k) != v for k, v in normalized.items())
            for name, value in normalized.items():
                setattr(self._filters, name, value)
        if "search" in normalized:
            self.search_text = normalized["search"]
        return changed

    def toggle_filter(self, name: str, value: str) -> bool:
        """Select ``value``, or reset the filter if it is already selected."""
        current = getattr(self.get_filters(), name)
        if current == _normalize(name, value):
            return self.update_filter(name, "" if name == "search" else WILDCARD)
        return self.update_filter(name, value)

    def has_active_filter(self, name: str) -> bool:
        default = "" if name == "search" else WILDCARD
        return getattr(self.get_filters(), name, default) != default

    def filter_by_status(self, status: str) -> bool:
        return self.update_filter("status", status)

    def filter_by_priority(self, priority: str) -> bool:
        return self.update_filter("priority", priority)

    def search(self, query: str) -> None:
        self.submit_search(query)

    @property
    def active_count(self) -> int:
        return self.get_filters().active_count()

    @property
    def status_text(self) -> str:
        count = self.active_count
        if count == 0:
            return "No filters active"
        return f"{count} {'filter' if count == 1 else 'filters'} active"

    @property
    def clear_enabled(self) -> bool:
        return self.active_count > 0

    def summary(self) -> str:
        return self.get_filters().summary()

    def close(self) -> None:
        self._search_debouncer.cancel()
