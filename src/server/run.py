"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .dependencies import get_config


def main() -> None:
    """Run the development server."""
    config = get_config()
    uvicorn.run(
        "src.server.app:app",
        host=config.server.host,
        port=config.server.port,
        reload=True,
        reload_dirs=["src"],
    )


if __name__ == "__main__":
    main()
