"""Protocol channel: commands out, responses and events in.

The inspectors and commands only depend on ``ProtocolChannel``. The
``WebSocketChannel`` implementation speaks WebDriver BiDi framing over a
WebSocket connection:

- command:  {"id": 1, "method": "session.subscribe", "params": {...}}
- success:  {"type": "success", "id": 1, "result": {...}}
- error:    {"type": "error", "id": 1, "error": "no such frame", "message": "..."}
- event:    {"type": "event", "method": "log.entryAdded", "params": {...}}
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config import ClientConfig
from ..errors import (
    CommandTimeoutError,
    TransportError,
    protocol_error_from_response,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[Dict[str, Any]], None]


class ProtocolChannel(ABC):
    """Interface used by inspectors and commands.

    Subclasses implement ``send``; event handler bookkeeping and dispatch
    are shared.
    """

    def __init__(self):
        self._event_handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    @abstractmethod
    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send a command and wait for its response.

        Args:
            method: Command name (e.g. "browsingContext.locateNodes")
            params: Command parameters

        Returns:
            The ``result`` object of the success response

        Raises:
            ProtocolError: If the remote end answered with an error
            TransportError: If the channel failed before a response arrived
        """

    def on_event(self, method: str, handler: EventHandler) -> None:
        """Register a low-level handler for an event method."""
        self._event_handlers[method].append(handler)

    def off_event(self, method: str, handler: EventHandler) -> None:
        """Remove a handler added with on_event. Unknown handlers are ignored."""
        handlers = self._event_handlers.get(method)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._event_handlers[method]

    def handler_count(self, method: str) -> int:
        return len(self._event_handlers.get(method, ()))

    def dispatch_event(self, method: str, params: Dict[str, Any]) -> None:
        """Deliver one event to every handler registered for ``method``."""
        handlers = self._event_handlers.get(method)
        if not handlers:
            logger.debug(f"No handler for event {method}")
            return

        # Copy: handlers may detach themselves while being called
        for handler in list(handlers):
            try:
                handler(params)
            except Exception as e:
                logger.error(f"Error in event handler for {method}: {e}")


class WebSocketChannel(ProtocolChannel):
    """ProtocolChannel over a WebSocket connection."""

    def __init__(self, url: Optional[str] = None, config: Optional[ClientConfig] = None):
        """Initialize the channel.

        Args:
            url: WebSocket URL (defaults to config.websocket_url)
            config: Client configuration
        """
        super().__init__()
        self.config = config or ClientConfig()
        self.url = url or self.config.websocket_url
        self._websocket = None
        self._reader_task: Optional[asyncio.Task] = None
        self._next_id = 1
        self._pending: Dict[int, asyncio.Future] = {}
        self._pending_methods: Dict[int, str] = {}

    @property
    def is_connected(self) -> bool:
        return self._websocket is not None and self._reader_task is not None

    async def connect(self) -> None:
        """Open the WebSocket and start the read loop.

        Raises:
            RuntimeError: If already connected
            TransportError: If the connection cannot be established
        """
        if self._websocket is not None:
            raise RuntimeError("Already connected")

        try:
            self._websocket = await asyncio.wait_for(
                websockets.connect(
                    self.url,
                    max_size=self.config.max_message_size,
                    ping_interval=self.config.ping_interval,
                ),
                timeout=self.config.connect_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timed out connecting to {self.url}") from e
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to connect to {self.url}: {e}") from e

        self._reader_task = asyncio.create_task(self._read_loop())
        logger.info(f"Connected to {self.url}")

    async def close(self) -> None:
        """Close the connection and fail any pending commands."""
        if self._websocket is not None:
            try:
                await self._websocket.close()
            except Exception as e:
                logger.warning(f"Error closing WebSocket: {e}")

        if self._reader_task is not None:
            self._reader_task.cancel()
            try:
                await self._reader_task
            except asyncio.CancelledError:
                pass

        self._fail_pending(TransportError("Channel closed"))
        self._websocket = None
        self._reader_task = None
        logger.info(f"Disconnected from {self.url}")

    async def __aenter__(self) -> "WebSocketChannel":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._websocket is None:
            raise TransportError("Not connected")

        command_id = self._next_id
        self._next_id += 1

        future = asyncio.get_running_loop().create_future()
        self._pending[command_id] = future
        self._pending_methods[command_id] = method

        message = {"id": command_id, "method": method, "params": params or {}}
        try:
            await self._websocket.send(json.dumps(message))
            logger.debug(f"Sent command {command_id}: {method}")
            return await asyncio.wait_for(future, timeout=self.config.command_timeout)
        except asyncio.TimeoutError:
            raise CommandTimeoutError(
                f"Command {method} timed out after {self.config.command_timeout}s"
            ) from None
        except ConnectionClosed as e:
            raise TransportError(f"Connection closed while sending {method}: {e}") from e
        finally:
            self._pending.pop(command_id, None)
            self._pending_methods.pop(command_id, None)

    async def _read_loop(self) -> None:
        try:
            async for message in self._websocket:
                self._handle_message(message)
        except ConnectionClosed as e:
            logger.info(f"Connection closed by remote end: {e}")
            self._fail_pending(TransportError(f"Connection closed: {e}"))
        except Exception as e:
            logger.error(f"Error in read loop: {e}")
            self._fail_pending(TransportError(f"Read loop failed: {e}"))
        else:
            self._fail_pending(TransportError("Connection closed"))

    def _handle_message(self, message: str) -> None:
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse message: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object frame: {message[:100]}")
            return

        message_type = data.get("type")
        if message_type == "event":
            self.dispatch_event(data.get("method", ""), data.get("params") or {})
        elif message_type in ("success", "error"):
            self._resolve(data)
        else:
            logger.warning(f"Ignoring frame with unknown type {message_type!r}")

    def _resolve(self, data: Dict[str, Any]) -> None:
        command_id = data.get("id")
        future = self._pending.get(command_id)

        if future is None:
            if data.get("type") == "error":
                # Errors for unparseable commands come back with a null id
                logger.error(
                    f"Protocol error without a pending command: "
                    f"{data.get('error')}: {data.get('message')}"
                )
            else:
                logger.warning(f"Response for unknown command id {command_id}")
            return

        if future.done():
            return

        if data["type"] == "error":
            method = self._pending_methods.get(command_id)
            future.set_exception(protocol_error_from_response(data, method))
        else:
            future.set_result(data.get("result") or {})

    def _fail_pending(self, error: Exception) -> None:
        for future in list(self._pending.values()):
            if not future.done():
                future.set_exception(error)
