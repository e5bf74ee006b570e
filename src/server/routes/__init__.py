"""Route registration helpers."""

from .frontend import register_frontend_routes
from .health import register_health_routes
from .tasks import register_task_routes

__all__ = [
    "register_frontend_routes",
    "register_health_routes",
    "register_task_routes",
]
