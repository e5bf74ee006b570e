"""Timer-based debouncing for the free-text search box."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    """Coalesce rapid calls: only the last ``schedule`` within ``delay`` runs.

    ``flush`` cancels any pending call and runs the callback immediately, so
    both entry points end in the same callback.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]) -> None:
        self.delay = delay
        self.callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[Any, ...]] = None

    def schedule(self, *args: Any) -> None:
        with self._lock:
            self._cancel_locked()
            self._pending = args
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self, *args: Any) -> None:
        with self._lock:
            self._cancel_locked()
        self.callback(*args)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return
            args = self._pending or ()
            self._timer = None
            self._pending = None
        try:
            self.callback(*args)
        except Exception:
            logger.exception("Debounced callback failed")
