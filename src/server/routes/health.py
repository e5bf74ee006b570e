"""Health check endpoint."""

from __future__ import annotations

from fastapi import FastAPI

from ..dependencies import utc_timestamp
from ..schemas import HealthResponse


def register_health_routes(app: FastAPI) -> None:
    """Register the health check endpoint."""

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", timestamp=utc_timestamp())
