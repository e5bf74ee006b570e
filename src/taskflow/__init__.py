"""TaskFlow client application: API client, components and controller."""

from .api_client import APIError, TasksAPI
from .config import Config
from .controller import TaskFlowController
from .events import EventBus
from .feedback import FeedbackService

__all__ = [
    "APIError",
    "Config",
    "EventBus",
    "FeedbackService",
    "TaskFlowController",
    "TasksAPI",
]
