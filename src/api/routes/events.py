"""WebSocket endpoint streaming product change events."""

from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.services.events.notifier import BroadcasterDependency

router = APIRouter(tags=["events"])


@router.websocket("/ws/events")
async def product_events(
    websocket: WebSocket, broadcaster: BroadcasterDependency
) -> None:
    """Push productCreated/productUpdated/productDeleted events to the client.

    Messages sent by the client are read and ignored.
    """
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)
