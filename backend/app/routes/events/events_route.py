"""
Event Routes

WebSocket channel that pushes every inquiry update to connected
dashboards.  Messages look like::

    {"event": "inquiry_updated", "data": {<full inquiry record>}}

There is no replay: a client that connects late should fetch the
current state from ``GET /api/inquiries/{id}``.

Endpoints
---------
WS     /ws      - inquiry update stream
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from backend.app.dependencies import get_engine
from backend.app.engine.broadcaster import Subscription
from backend.app.engine.inquiry_engine import InquiryEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


async def _forward(websocket: WebSocket, sub: Subscription) -> None:
    """Relay queued events to the socket until it goes away."""
    try:
        while True:
            event = await sub.next_event()
            await websocket.send_json(event)
    except Exception as exc:
        logger.info("Stopped forwarding to subscriber %s: %s", sub.id, exc)


@router.websocket("/ws")
async def inquiry_updates(
    websocket: WebSocket, engine: InquiryEngine = Depends(get_engine),
) -> None:
    """Stream ``inquiry_updated`` events until the client disconnects."""
    # Subscribed before the handshake so no update after accept is missed.
    sub = engine.broadcaster.subscribe()
    sender: asyncio.Task | None = None

    try:
        await websocket.accept()
        sender = asyncio.create_task(_forward(websocket, sub))
        # Incoming messages are ignored; receiving only detects disconnects.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("WebSocket: client disconnected (subscriber %s).", sub.id)
    finally:
        if sender is not None:
            sender.cancel()
        engine.broadcaster.unsubscribe(sub)
