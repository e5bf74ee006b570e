"""UI components. Each one keeps its own render state and talks through the EventBus."""

from .filter_bar import FilterBar
from .statistics_panel import StatisticsPanel
from .task_board import TaskBoard
from .task_form import TaskForm

__all__ = ["FilterBar", "StatisticsPanel", "TaskBoard", "TaskForm"]
