"""Integration tests for WebSocketChannel against a local BiDi-speaking server.

The server answers a handful of commands the way a remote end would and can
push events on request, so the full path (framing, id correlation, event
routing, inspector subscriptions) is exercised over a real socket.
"""

import asyncio
import json

import pytest
import pytest_asyncio
import websockets
from conftest import console_log_event, node_value

from bidi_inspector.config import ClientConfig
from bidi_inspector.errors import CommandTimeoutError, NoSuchFrameError, TransportError
from bidi_inspector.models import Locator
from bidi_inspector.services import BrowsingContext, LogInspector, WebSocketChannel


class FakeRemoteEnd:
    """Minimal remote end: records commands and answers from a script."""

    def __init__(self):
        self.received = []
        self.connections = []
        self.event_with_ack = None

    async def handler(self, websocket, path=None):
        self.connections.append(websocket)
        async for message in websocket:
            command = json.loads(message)
            self.received.append(command)
            await self.respond(websocket, command)

    async def respond(self, websocket, command):
        method = command["method"]
        params = command["params"]

        if method == "session.subscribe":
            await self.reply(websocket, command, {"subscription": "sub-1"})
            if self.event_with_ack is not None:
                await websocket.send(json.dumps(self.event_with_ack))
        elif method == "test.emitLog":
            event = {"type": "event", "method": "log.entryAdded", "params": console_log_event()}
            await websocket.send(json.dumps(event))
            await self.reply(websocket, command, {})
        elif method == "browsingContext.locateNodes":
            if params["context"] != "ctx-1":
                await websocket.send(
                    json.dumps(
                        {
                            "type": "error",
                            "id": command["id"],
                            "error": "no such frame",
                            "message": f"Context {params['context']} not found",
                        }
                    )
                )
                return
            nodes = [node_value(f"s-{index}") for index in range(3)]
            await self.reply(websocket, command, {"nodes": nodes[: params.get("maxNodeCount")]})
        elif method == "test.hang":
            return
        elif method == "test.drop":
            await websocket.close()
        else:
            await self.reply(websocket, command, {})

    async def reply(self, websocket, command, result):
        await websocket.send(json.dumps({"type": "success", "id": command["id"], "result": result}))


@pytest_asyncio.fixture
async def remote_end():
    remote = FakeRemoteEnd()
    async with websockets.serve(remote.handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        remote.url = f"ws://127.0.0.1:{port}/session"
        yield remote


@pytest_asyncio.fixture
async def channel(remote_end):
    config = ClientConfig(websocket_url=remote_end.url, command_timeout=2.0)
    async with WebSocketChannel(config=config) as channel:
        yield channel


@pytest.mark.asyncio
async def test_command_round_trip(remote_end, channel):
    context = BrowsingContext(channel, "ctx-1")

    nodes = await context.locate_nodes(Locator.css("div"), max_node_count=2)

    assert [node.shared_id for node in nodes] == ["s-0", "s-1"]
    assert remote_end.received[0]["method"] == "browsingContext.locateNodes"
    assert remote_end.received[0]["params"]["maxNodeCount"] == 2
    assert isinstance(remote_end.received[0]["id"], int)


@pytest.mark.asyncio
async def test_concurrent_commands_are_correlated(remote_end, channel):
    results = await asyncio.gather(
        BrowsingContext(channel, "ctx-1").locate_nodes(Locator.css("a"), max_node_count=1),
        BrowsingContext(channel, "ctx-1").locate_nodes(Locator.css("b"), max_node_count=3),
    )

    assert [len(nodes) for nodes in results] == [1, 3]
    assert len({command["id"] for command in remote_end.received}) == 2


@pytest.mark.asyncio
async def test_error_response_raises_typed_error(channel):
    with pytest.raises(NoSuchFrameError) as exc_info:
        await BrowsingContext(channel, "ctx-404").locate_nodes(Locator.css("div"))

    assert exc_info.value.method == "browsingContext.locateNodes"
    assert "ctx-404" in exc_info.value.message


@pytest.mark.asyncio
async def test_log_inspector_receives_events(remote_end, channel):
    received = asyncio.Queue()
    inspector = LogInspector(channel)

    await inspector.on_console_entry(received.put_nowait)
    await channel.send("test.emitLog")
    entry = await asyncio.wait_for(received.get(), timeout=2)

    assert entry.text == "Hello, world!"
    assert entry.method == "log"

    await inspector.close()
    unsubscribe = remote_end.received[-1]
    assert unsubscribe["method"] == "session.unsubscribe"
    assert unsubscribe["params"] == {"subscriptions": ["sub-1"]}


@pytest.mark.asyncio
async def test_command_timeout(remote_end):
    config = ClientConfig(websocket_url=remote_end.url, command_timeout=0.1)

    async with WebSocketChannel(config=config) as channel:
        with pytest.raises(CommandTimeoutError):
            await channel.send("test.hang")


@pytest.mark.asyncio
async def test_dropped_connection_fails_pending_commands(channel):
    with pytest.raises(TransportError):
        await channel.send("test.drop")


@pytest.mark.asyncio
async def test_send_without_connection():
    with pytest.raises(TransportError, match="Not connected"):
        await WebSocketChannel("ws://127.0.0.1:1/session").send("session.status")


@pytest.mark.asyncio
async def test_connect_failure_raises_transport_error():
    config = ClientConfig(websocket_url="ws://127.0.0.1:1/session", connect_timeout=1.0)

    with pytest.raises(TransportError):
        await WebSocketChannel(config=config).connect()


@pytest.mark.asyncio
async def test_event_sent_right_after_subscribe_ack_is_delivered(remote_end, channel):
    remote_end.event_with_ack = {
        "type": "event",
        "method": "log.entryAdded",
        "params": console_log_event(text="first"),
    }
    received = asyncio.Queue()
    inspector = LogInspector(channel)

    await inspector.on_log(received.put_nowait)
    entry = await asyncio.wait_for(received.get(), timeout=2)

    assert entry.text == "first"
    await inspector.close()
