"""Tests for the product event notifiers and the WebSocket endpoint."""

import asyncio
import json

import pytest
from fakeredis import aioredis as fakeredis
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from src.main import app
from src.services.events.notifier import (
    NullNotifier,
    WebSocketBroadcaster,
    get_broadcaster,
)
from src.services.events.redis_relay import RedisEventNotifier, RedisEventRelay


class _StubWebSocket:
    def __init__(self, name: str, fail: bool = False, stall: bool = False) -> None:
        self.client = name
        self.fail = fail
        self.stall = stall
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        await asyncio.sleep(0)
        if self.stall:
            await asyncio.Event().wait()
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_null_notifier_accepts_events():
    assert await NullNotifier().publish("productCreated", {"id": "1"}) is None


@pytest.mark.asyncio
async def test_broadcaster_fans_out_to_every_client():
    broadcaster = WebSocketBroadcaster()
    first, second = _StubWebSocket("a"), _StubWebSocket("b")
    await broadcaster.connect(first)
    await broadcaster.connect(second)

    await broadcaster.publish("productDeleted", "64b7f0c2a1b2c3d4e5f60718")

    expected = {"event": "productDeleted", "data": "64b7f0c2a1b2c3d4e5f60718"}
    assert first.accepted and second.accepted
    assert first.sent == [expected]
    assert second.sent == [expected]


@pytest.mark.asyncio
async def test_broadcaster_drops_failing_clients():
    broadcaster = WebSocketBroadcaster()
    healthy, broken = _StubWebSocket("ok"), _StubWebSocket("gone", fail=True)
    await broadcaster.connect(healthy)
    await broadcaster.connect(broken)

    await broadcaster.publish("productUpdated", {"id": "1"})
    await broadcaster.publish("productUpdated", {"id": "2"})

    assert broadcaster.connection_count == 1
    assert [message["data"]["id"] for message in healthy.sent] == ["1", "2"]


@pytest.mark.asyncio
async def test_broadcaster_drops_stalled_clients_without_blocking():
    broadcaster = WebSocketBroadcaster(send_timeout=0.05)
    healthy, stalled = _StubWebSocket("ok"), _StubWebSocket("slow", stall=True)
    await broadcaster.connect(healthy)
    await broadcaster.connect(stalled)

    await asyncio.wait_for(broadcaster.publish("productCreated", {"id": "1"}), 1)

    assert healthy.sent == [{"event": "productCreated", "data": {"id": "1"}}]
    assert stalled.sent == []
    assert broadcaster.connection_count == 1

@pytest.mark.asyncio
async def test_broadcaster_without_clients_is_a_noop():
    broadcaster = WebSocketBroadcaster()

    await broadcaster.publish("productCreated", {"id": "1"})

    assert broadcaster.connection_count == 0


@pytest.mark.asyncio
async def test_redis_notifier_publishes_envelope():
    client = fakeredis.FakeRedis(decode_responses=True)
    pubsub = client.pubsub()
    await pubsub.subscribe("catalog:events")
    await pubsub.get_message(timeout=1)  # subscribe confirmation

    await RedisEventNotifier(client, "catalog:events").publish(
        "productCreated", {"id": "abc"}
    )

    message = None
    for _ in range(10):
        message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1)
        if message:
            break
    assert message is not None
    assert json.loads(message["data"]) == {
        "event": "productCreated",
        "data": {"id": "abc"},
    }
    await pubsub.aclose()
    await client.aclose()


@pytest.mark.asyncio
async def test_relay_forwards_channel_messages_to_broadcaster():
    broadcaster = WebSocketBroadcaster()
    socket = _StubWebSocket("listener")
    await broadcaster.connect(socket)
    relay = RedisEventRelay(fakeredis.FakeRedis(), "catalog:events", broadcaster)

    skipped = await relay.dispatch({"type": "subscribe", "data": 1})
    malformed = await relay.dispatch({"type": "message", "data": "{not json"})
    delivered = await relay.dispatch(
        {
            "type": "message",
            "data": json.dumps({"event": "productDeleted", "data": "abc"}),
        }
    )

    assert (skipped, malformed, delivered) == (False, False, True)
    assert socket.sent == [{"event": "productDeleted", "data": "abc"}]


def test_websocket_endpoint_registers_client():
    broadcaster = WebSocketBroadcaster()
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    try:
        client = TestClient(app)
        with client.websocket_connect("/ws/events") as websocket:
            assert broadcaster.connection_count == 1
            websocket.send_text("hello")
    finally:
        app.dependency_overrides.pop(get_broadcaster, None)


class _FlakyPubSub:
    def __init__(self, messages: list[dict] | None = None) -> None:
        self.messages = messages
        self.closed = False

    async def subscribe(self, channel: str) -> None:
        if self.messages is None:
            raise RedisConnectionError("Connection reset by peer")

    async def listen(self):
        for message in self.messages:
            yield message
        await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


class _FlakyRedis:
    def __init__(self, *pubsubs: _FlakyPubSub) -> None:
        self.pubsubs = list(pubsubs)

    def pubsub(self) -> _FlakyPubSub:
        return self.pubsubs.pop(0)


@pytest.mark.asyncio
async def test_relay_resubscribes_after_connection_error():
    broadcaster = WebSocketBroadcaster()
    socket = _StubWebSocket("listener")
    await broadcaster.connect(socket)
    dropped = _FlakyPubSub()
    recovered = _FlakyPubSub(
        [
            {
                "type": "message",
                "data": json.dumps({"event": "productCreated", "data": {"id": "x"}}),
            }
        ]
    )
    relay = RedisEventRelay(
        _FlakyRedis(dropped, recovered), "catalog:events", broadcaster, retry_delay=0
    )

    task = asyncio.create_task(relay.run_forever())
    for _ in range(50):
        if socket.sent:
            break
        await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert dropped.closed
    assert recovered.closed
    assert socket.sent == [{"event": "productCreated", "data": {"id": "x"}}]
