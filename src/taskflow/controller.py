"""
TaskFlowコントローラー

コンポーネント・APIクライアント・タスクストアを束ねる唯一の調整役。
コンポーネントはイベントバス経由でのみ通信し、API呼び出しとストア更新は
全てこのクラスが行う。
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, Optional

from src.tasks import FilterCriteria, Task, filter_tasks

from .api_client import APIError, TasksAPI
from .components import FilterBar, StatisticsPanel, TaskBoard, TaskForm
from .config import Config
from .events import (
    EventBus,
    FilterChanged,
    FiltersCleared,
    StatsQuickAction,
    StatsRefreshRequested,
    TaskAddRequested,
    TaskCreated,
    TaskDeleted,
    TaskDeleteRequested,
    TaskEditRequested,
    TaskStatusChangeRequested,
    TaskSubmitted,
    TaskUpdated,
)
from .feedback import FeedbackService, LoadingManager, NotificationManager
from .store import TaskStore

logger = logging.getLogger(__name__)

FORM_SCOPE = "form"
BOARD_SCOPE = "board"

# クイックアクション → (フィルタ名, 値)
QUICK_ACTION_FILTERS = {
    "show-overdue": ("due", "overdue"),
    "show-high-priority": ("priority", "high"),
    "show-completed": ("status", "done"),
}


class TaskFlowController:
    """
    クライアントアプリケーションのルート

    変更系の操作は idle → in-flight → idle の順に進み、成功時のみストアを更新する。
    失敗時はストアに触れずエラー通知を出す。
    """

    def __init__(
        self,
        api: Optional[TasksAPI] = None,
        bus: Optional[EventBus] = None,
        feedback: Optional[FeedbackService] = None,
        config: Optional[Config] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Args:
            api: APIクライアント（省略時は設定のURLで生成）
            bus: イベントバス
            feedback: 通知・ローディングサービス
            config: 設定（省略時はデフォルト値）
            today: 日付の取得関数（テスト用）
        """
        self.config = config or Config()
        self.api = api or TasksAPI(
            self.config.client.api_url, timeout=self.config.client.timeout_seconds
        )
        self.bus = bus or EventBus()
        self.feedback = feedback or FeedbackService(
            NotificationManager(
                max_notifications=self.config.notifications.max_notifications,
                default_duration=self.config.notifications.duration_seconds,
            ),
            LoadingManager(),
        )
        self._today = today or date.today
        self._lock = threading.RLock()

        self.store = TaskStore()
        self.criteria = FilterCriteria()
        self.filtered: list = []

        self.filter_bar = FilterBar(
            self.bus, debounce_seconds=self.config.client.search_debounce_seconds
        )
        self.board = TaskBoard(self.bus)
        self.form = TaskForm(self.bus, today=self._today)
        self.statistics = StatisticsPanel(self.bus)

        self._unsubscribers = [
            self.bus.subscribe(FilterChanged, self._on_filters_changed),
            self.bus.subscribe(FiltersCleared, self._on_filters_changed),
            self.bus.subscribe(StatsQuickAction, self._on_quick_action),
            self.bus.subscribe(StatsRefreshRequested, self._on_refresh),
            self.bus.subscribe(TaskAddRequested, self._on_add_requested),
            self.bus.subscribe(TaskEditRequested, self._on_edit_requested),
            self.bus.subscribe(TaskSubmitted, self._on_submitted),
            self.bus.subscribe(TaskStatusChangeRequested, self._on_status_change),
            self.bus.subscribe(TaskDeleteRequested, self._on_delete_requested),
        ]

    # ------------------------------------------------------------------
    # 読み込み・描画
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """タスク一覧を取得して描画する

        Returns:
            bool: 取得に成功した場合True（失敗時はストアを空にしてエラー通知）
        """
        with self.feedback.with_loading(LoadingManager.GLOBAL_SCOPE, "Loading tasks..."):
            try:
                tasks = self.api.list_tasks()
            except APIError as e:
                logger.error(f"Failed to load tasks: {e.message}")
                with self._lock:
                    self.store.replace_all(())
                self.render()
                self.feedback.notify("error", f"Failed to load tasks: {e.message}")
                return False

        with self._lock:
            self.store.replace_all(tasks)
        logger.info(f"Loaded {len(tasks)} tasks")
        self.render()
        return True

    def render(self) -> None:
        """ストア全体に現在のフィルタを適用し、ボードと統計を再描画する"""
        with self._lock:
            self.criteria = self.filter_bar.get_filters()
            today = self._today()
            self.filtered = filter_tasks(self.store.all(), self.criteria, today)
            self.board.update_tasks(self.filtered)
            self.statistics.update_statistics(self.filtered, self.criteria, today)

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.filter_bar.close()

    # ------------------------------------------------------------------
    # イベントハンドラ
    # ------------------------------------------------------------------

    def _on_filters_changed(self, event: Any) -> None:
        self.render()

    def _on_quick_action(self, event: StatsQuickAction) -> None:
        if event.action == "clear-filters":
            self.filter_bar.clear_all()
        elif event.action in QUICK_ACTION_FILTERS:
            name, value = QUICK_ACTION_FILTERS[event.action]
            self.filter_bar.update_filter(name, value)
        elif event.action == "filter-by-status" and event.value:
            self.filter_bar.filter_by_status(event.value)
        elif event.action == "filter-by-priority" and event.value:
            self.filter_bar.filter_by_priority(event.value)
        else:
            logger.warning(f"Unknown quick action: {event.action}")

    def _on_refresh(self, event: StatsRefreshRequested) -> None:
        self.load()

    def _on_add_requested(self, event: TaskAddRequested) -> None:
        self.form.open(default_status=event.default_status)

    def _on_edit_requested(self, event: TaskEditRequested) -> None:
        self.form.open(task=event.task)

    def _on_submitted(self, event: TaskSubmitted) -> None:
        if event.task_id is None:
            self.create_task(event.data)
        else:
            self.update_task(event.task_id, event.data)

    def _on_status_change(self, event: TaskStatusChangeRequested) -> None:
        self.change_status(event.task_id, event.new_status)

    def _on_delete_requested(self, event: TaskDeleteRequested) -> None:
        self.delete_task(event.task_id)

    # ------------------------------------------------------------------
    # 変更系操作
    # ------------------------------------------------------------------

    def _mutate(self, scope: str, call: Callable[[], Any], failure_message: str) -> Any:
        """API呼び出しをローディングスコープ内で実行する

        Returns:
            呼び出し結果（APIError の場合は None）
        """
        if scope == FORM_SCOPE:
            self.form.set_submitting(True)
        try:
            with self.feedback.with_loading(scope):
                return call()
        except APIError as e:
            logger.error(f"{failure_message}: {e.message} (status={e.status}, code={e.code})")
            self.feedback.notify("error", failure_message)
            return None
        finally:
            if scope == FORM_SCOPE:
                self.form.set_submitting(False)

    def _store_task(self, task: Task) -> None:
        with self._lock:
            if not self.store.replace(task):
                self.store.add(task)
        self.render()

    def create_task(self, data: Dict[str, Any]) -> Optional[Task]:
        task = self._mutate(FORM_SCOPE, lambda: self.api.create_task(data), "Failed to create task")
        if task is None:
            return None
        self._store_task(task)
        self.form.close()
        self.bus.publish(TaskCreated(task=task))
        self.feedback.notify("success", "Task created successfully")
        return task

    def update_task(self, task_id: int, data: Dict[str, Any]) -> Optional[Task]:
        task = self._mutate(
            FORM_SCOPE, lambda: self.api.update_task(task_id, data), "Failed to update task"
        )
        if task is None:
            return None
        self._store_task(task)
        self.form.close()
        self.bus.publish(TaskUpdated(task=task))
        self.feedback.notify("success", "Task updated successfully")
        return task

    def change_status(self, task_id: int, new_status: str) -> Optional[Task]:
        task = self._mutate(
            BOARD_SCOPE,
            lambda: self.api.update_task(task_id, {"status": new_status}),
            "Failed to update task status",
        )
        if task is None:
            return None
        self._store_task(task)
        self.bus.publish(TaskUpdated(task=task))
        self.feedback.notify("success", f"Task moved to {task.status.value.replace('-', ' ')}")
        return task

    def delete_task(self, task_id: int) -> bool:
        def call() -> bool:
            self.api.delete_task(task_id)
            return True

        if not self._mutate(BOARD_SCOPE, call, "Failed to delete task"):
            return False
        with self._lock:
            self.store.remove(task_id)
        self.render()
        self.bus.publish(TaskDeleted(task_id=task_id))
        self.feedback.notify("success", "Task deleted successfully")
        return True
