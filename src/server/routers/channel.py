"""WebSocket endpoint carrying the view <-> host message protocol."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from orgview.channel import MessageChannel
from orgview.exceptions import OrgviewError, ProtocolError
from orgview.host import HostBridge
from orgview.schemas.messages import VIEW_REQUEST_ADAPTER
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def preview_channel(websocket: WebSocket) -> None:
    """Answer view requests for one connected preview.

    Each inbound text frame is one request. Host responses produced while
    handling it are sent back in order. Malformed frames get an ``error``
    frame and the connection stays open, as do requests whose handler fails.
    """
    await websocket.accept()
    outbox: list[dict[str, Any]] = []
    channel = MessageChannel(outbox.append, adapter=VIEW_REQUEST_ADAPTER)
    HostBridge(channel, workspace_root=websocket.app.state.workspace_root)
    logger.debug("Preview channel opened")

    try:
        while True:
            payload = await websocket.receive_text()
            try:
                await asyncio.to_thread(channel.receive, payload)
            except ProtocolError as exc:
                logger.warning("Rejected view message", extra={"error": str(exc)})
                await websocket.send_json({"command": "error", "detail": str(exc)})
                continue
            except (OrgviewError, OSError) as exc:
                logger.exception("View request failed")
                outbox.clear()
                await websocket.send_json({"command": "error", "detail": str(exc)})
                continue
            while outbox:
                await websocket.send_json(outbox.pop(0))
    except WebSocketDisconnect:
        logger.debug("Preview channel closed")
