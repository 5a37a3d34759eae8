"""Shared helpers for CLI commands."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from rich.console import Console

from ...config import ClientConfig
from ...services import WebSocketChannel

console = Console()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_channel(config: ClientConfig, new_session: bool = False) -> AsyncIterator[WebSocketChannel]:
    """Connect a channel for the duration of a command.

    Args:
        config: Client configuration (websocket_url is used)
        new_session: Send session.new first, for endpoints that are not
            already bound to a session

    Yields:
        Connected WebSocketChannel
    """
    channel = WebSocketChannel(config=config)
    await channel.connect()
    try:
        if new_session:
            result = await channel.send("session.new", {"capabilities": {}})
            logger.info(f"Started session {result.get('sessionId')}")
        yield channel
    finally:
        if new_session:
            try:
                await channel.send("session.end", {})
            except Exception as e:
                logger.warning(f"Failed to end session: {e}")
        await channel.close()


async def wait_for(duration: Optional[float]) -> None:
    """Sleep for ``duration`` seconds, or until cancelled when None."""
    if duration is None:
        await asyncio.Event().wait()
    else:
        await asyncio.sleep(duration)
