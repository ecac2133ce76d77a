"""Product change notifications pushed to real-time clients."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Annotated, Any

from fastapi import Depends, WebSocket
from starlette.requests import HTTPConnection

from src.config import settings

logger = logging.getLogger(__name__)

PRODUCT_CREATED = "productCreated"
PRODUCT_UPDATED = "productUpdated"
PRODUCT_DELETED = "productDeleted"


class EventNotifier(ABC):
    """Abstract publisher of named catalog events."""

    @abstractmethod
    async def publish(self, event: str, payload: Any) -> None:
        """Deliver ``payload`` under ``event``; ``payload`` must be JSON-ready."""


class NullNotifier(EventNotifier):
    """Notifier that drops every event."""

    async def publish(self, event: str, payload: Any) -> None:
        return None


class WebSocketBroadcaster(EventNotifier):
    """Fans events out to every WebSocket connected to this process.

    Delivery is best effort: there is no acknowledgement and no replay
    after a reconnect. Sends run concurrently, and a client that does not
    take a message within ``send_timeout`` seconds is dropped.
    """

    def __init__(self, send_timeout: float | None = None) -> None:
        self._connections: set[WebSocket] = set()
        self._send_timeout = (
            settings.EVENT_SEND_TIMEOUT_SECONDS if send_timeout is None else send_timeout
        )

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        # Registered before accept; a client past the handshake gets every event.
        self._connections.add(websocket)
        try:
            await websocket.accept()
        except Exception:
            self._connections.discard(websocket)
            raise
        logger.info("New client connected %s", websocket.client)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("Client disconnected %s", websocket.client)

    async def publish(self, event: str, payload: Any) -> None:
        message = {"event": event, "data": payload}
        await asyncio.gather(
            *(self._send(websocket, message) for websocket in list(self._connections))
        )

    async def _send(self, websocket: WebSocket, message: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(websocket.send_json(message), self._send_timeout)
        except TimeoutError:
            logger.warning(
                "Dropping client %s after %.1fs send timeout",
                websocket.client,
                self._send_timeout,
            )
            self.disconnect(websocket)
        except Exception as exc:
            logger.warning(
                "Dropping client %s after failed send: %s", websocket.client, exc
            )
            self.disconnect(websocket)


def get_event_notifier(connection: HTTPConnection) -> EventNotifier:
    """FastAPI dependency returning the notifier built by the lifespan."""
    return getattr(connection.app.state, "notifier", None) or NullNotifier()


def get_broadcaster(connection: HTTPConnection) -> WebSocketBroadcaster:
    """FastAPI dependency returning this process's WebSocket broadcaster."""
    return connection.app.state.broadcaster


NotifierDependency = Annotated[EventNotifier, Depends(get_event_notifier)]
BroadcasterDependency = Annotated[WebSocketBroadcaster, Depends(get_broadcaster)]
