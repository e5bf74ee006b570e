"""Single-page-app fallback: unmatched routes serve the frontend entry document."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

logger = logging.getLogger(__name__)

ENTRY_DOCUMENT = "index.html"


def register_frontend_routes(app: FastAPI, frontend_dir: Path) -> None:
    """Register the catch-all route. Must be registered after every API route."""
    root = Path(frontend_dir).resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail=f"Route /{full_path} not found")

        if full_path:
            candidate = (root / full_path).resolve()
            if candidate.is_file() and candidate.is_relative_to(root):
                return FileResponse(candidate)

        entry = root / ENTRY_DOCUMENT
        if not entry.is_file():
            logger.warning("Frontend entry document missing: %s", entry)
            raise HTTPException(status_code=404, detail="Frontend not available")
        return FileResponse(entry)
