"""Redis pub/sub fan-out so every worker process reaches its own clients."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.services.events.notifier import EventNotifier, WebSocketBroadcaster

logger = logging.getLogger(__name__)


def create_redis_client(url: str) -> redis.Redis:
    """Factory function to create the Redis client used for events."""
    return redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
    )


class RedisEventNotifier(EventNotifier):
    """Publishes events on a Redis channel instead of sending them directly."""

    def __init__(self, client: redis.Redis, channel: str) -> None:
        self._client = client
        self._channel = channel

    async def publish(self, event: str, payload: Any) -> None:
        message = json.dumps({"event": event, "data": payload})
        receivers = await self._client.publish(self._channel, message)
        logger.debug(
            "Published %s to %s (%d receivers)", event, self._channel, receivers
        )


class RedisEventRelay:
    """Forwards messages from the events channel to the local broadcaster.

    A dropped Redis connection is retried with exponential backoff, capped
    at ``max_retry_delay`` seconds; events published while disconnected
    are lost.
    """

    def __init__(
        self,
        client: redis.Redis,
        channel: str,
        broadcaster: WebSocketBroadcaster,
        retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
    ) -> None:
        self._client = client
        self._channel = channel
        self._broadcaster = broadcaster
        self._retry_delay = retry_delay
        self._max_retry_delay = max_retry_delay

    async def run_forever(self) -> None:
        """Relay until cancelled, resubscribing after connection errors."""
        delay = self._retry_delay
        while True:
            pubsub = self._client.pubsub()
            try:
                await pubsub.subscribe(self._channel)
                logger.info(
                    "Relaying catalog events from Redis channel %s", self._channel
                )
                delay = self._retry_delay
                async for message in pubsub.listen():
                    await self.dispatch(message)
            except RedisError as exc:
                logger.warning(
                    "Redis event relay lost its connection (%s); retrying in %.1fs",
                    exc,
                    delay,
                )
            finally:
                with contextlib.suppress(RedisError):
                    await pubsub.aclose()
            await asyncio.sleep(delay)
            delay = min(delay * 2, self._max_retry_delay)

    async def dispatch(self, message: dict[str, Any]) -> bool:
        """Broadcast one pub/sub message; returns False when it was skipped."""
        if message.get("type") != "message":
            return False
        try:
            envelope = json.loads(message["data"])
            event = envelope["event"]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed event message: %s", exc)
            return False
        await self._broadcaster.publish(event, envelope.get("data"))
        return True
