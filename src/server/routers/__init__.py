"""API routers."""

from server.routers.channel import router as channel_router
from server.routers.preview import router as preview_router

__all__ = ["channel_router", "preview_router"]
