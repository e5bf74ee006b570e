"""User feedback services: notifications and loading scopes.

Components receive a ``FeedbackService`` at construction instead of reaching
for process-wide singletons.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import Counter, deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

logger = logging.getLogger(__name__)

NOTIFICATION_KINDS = ("success", "error", "warning", "info")


@dataclass
class Notification:
    id: str
    message: str
    kind: str
    timestamp: float
    duration: Optional[float]
    title: Optional[str] = None

    @property
    def persistent(self) -> bool:
        return self.duration is None


class NotificationManager:
    """Dismissable notifications, newest last. Oldest are dropped over the limit."""

    def __init__(self, max_notifications: int = 5, default_duration: float = 4.0) -> None:
        self.max_notifications = max_notifications
        self.default_duration = default_duration
        self._lock = threading.Lock()
        self._notifications: Deque[Notification] = deque()

    def show(
        self,
        message: str,
        kind: str = "info",
        duration: Optional[float] = -1,
        title: Optional[str] = None,
    ) -> str:
        """Add a notification and return its id. ``duration=None`` makes it persistent."""
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")
        notification = Notification(
            id=uuid.uuid4().hex,
            message=message,
            kind=kind,
            timestamp=time.time(),
            duration=self.default_duration if duration == -1 else duration,
            title=title,
        )
        with self._lock:
            self._notifications.append(notification)
            while len(self._notifications) > self.max_notifications:
                self._notifications.popleft()
        log = logger.warning if kind == "error" else logger.info
        log("[%s] %s", kind, message)
        return notification.id

    def success(self, message: str, **kwargs) -> str:
        return self.show(message, "success", **kwargs)

    def error(self, message: str, **kwargs) -> str:
        return self.show(message, "error", **kwargs)

    def dismiss(self, notification_id: str) -> bool:
        with self._lock:
            for notification in self._notifications:
                if notification.id == notification_id:
                    self._notifications.remove(notification)
                    return True
        return False

    def expire(self, now: Optional[float] = None) -> int:
        """Drop notifications whose duration has elapsed. Returns how many were dropped."""
        now = time.time() if now is None else now
        with self._lock:
            keep = deque(
                n for n in self._notifications
                if n.persistent or now - n.timestamp < n.duration
            )
            dropped = len(self._notifications) - len(keep)
            self._notifications = keep
        return dropped

    def clear(self) -> None:
        with self._lock:
            self._notifications.clear()

    @property
    def notifications(self) -> List[Notification]:
        with self._lock:
            return list(self._notifications)

    def latest(self, kind: Optional[str] = None) -> Optional[Notification]:
        for notification in reversed(self.notifications):
            if kind is None or notification.kind == kind:
                return notification
        return None


class LoadingManager:
    """Tracks which UI scopes are currently waiting on an external call."""

    GLOBAL_SCOPE = "global"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Counter = Counter()
        self.message: Optional[str] = None

    def start(self, scope: str, message: str = "Loading...") -> None:
        with self._lock:
            self._active[scope] += 1
            if scope == self.GLOBAL_SCOPE:
                self.message = message

    def stop(self, scope: str) -> None:
        with self._lock:
            if self._active[scope] > 0:
                self._active[scope] -= 1
            if self._active[scope] == 0:
                del self._active[scope]
                if scope == self.GLOBAL_SCOPE:
                    self.message = None

    def is_active(self, scope: str) -> bool:
        with self._lock:
            return self._active.get(scope, 0) > 0

    @property
    def active_scopes(self) -> List[str]:
        with self._lock:
            return sorted(self._active)


class FeedbackService:
    """Notification and loading capabilities handed to every component."""

    def __init__(
        self,
        notifications: Optional[NotificationManager] = None,
        loading: Optional[LoadingManager] = None,
    ) -> None:
        self.notifications = notifications or NotificationManager()
        self.loading = loading or LoadingManager()

    def notify(self, kind: str, message: str, **kwargs) -> str:
        return self.notifications.show(message, kind, **kwargs)

    @contextmanager
    def with_loading(self, scope: str, message: str = "Loading...") -> Iterator[None]:
        """Mark ``scope`` as in-flight for the duration of the block."""
        self.loading.start(scope, message)
        try:
            yield
        finally:
            self.loading.stop(scope)
