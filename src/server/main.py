"""Main module for the FastAPI application."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI

from orgview.config import ORGVIEW_WORKSPACE
from orgview.utils.logging_config import get_logger
from server.routers import channel_router, preview_router
from server.server_config import APP_DESCRIPTION, APP_TITLE

logger = get_logger(__name__)


def create_app(workspace_root: Path | None = None) -> FastAPI:
    """Build the application serving previews for ``workspace_root``."""
    application = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION, docs_url=None, redoc_url=None)
    application.state.workspace_root = Path(workspace_root or ORGVIEW_WORKSPACE).resolve()
    application.include_router(preview_router)
    application.include_router(channel_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify that the server is running."""
        return {"status": "healthy"}

    logger.debug("Application created", extra={"workspace_root": str(application.state.workspace_root)})
    return application


app = create_app()
