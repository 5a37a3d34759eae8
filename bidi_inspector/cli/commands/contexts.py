"""Contexts command: stream browsing context events."""

import asyncio
import sys
from typing import Any, Optional

import click

from ...errors import BidiError
from ...models import BrowsingContextInfo, NavigationInfo, UserPromptInfo
from ...services import BrowsingContextInspector
from ..utils import console, open_channel, wait_for


def describe(event_name: str):
    """Build a callback printing one line per event."""

    def callback(info: Any) -> None:
        if isinstance(info, BrowsingContextInfo):
            detail = f"{info.id} {info.url}"
            if info.parent_browsing_context:
                detail += f" (parent {info.parent_browsing_context})"
        elif isinstance(info, NavigationInfo):
            detail = f"{info.browsing_context_id} {info.url}"
        elif isinstance(info, UserPromptInfo):
            detail = f"{info.browsing_context_id} {info.type}"
            if info.message is not None:
                detail += f" {info.message!r}"
            if info.accepted is not None:
                detail += f" accepted={info.accepted}"
        else:
            detail = repr(info)
        console.print(f"[cyan]{event_name:20}[/cyan] {detail}", highlight=False)

    return callback


@click.command()
@click.option("--duration", type=float, help="Stop after this many seconds")
@click.pass_context
def contexts(ctx, duration):
    """Stream browsing context lifecycle, navigation and prompt events."""
    try:
        asyncio.run(_contexts_command(ctx.obj, duration))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        sys.exit(0)
    except BidiError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


async def _contexts_command(obj: dict, duration: Optional[float]) -> None:
    config = obj["config"]

    async with open_channel(config, obj["new_session"]) as channel:
        async with BrowsingContextInspector(channel) as inspector:
            await inspector.on_browsing_context_created(describe("created"))
            await inspector.on_browsing_context_destroyed(describe("destroyed"))
            await inspector.on_navigation_started(describe("navigation started"))
            await inspector.on_fragment_navigated(describe("fragment navigated"))
            await inspector.on_dom_content_loaded(describe("dom content loaded"))
            await inspector.on_browsing_context_loaded(describe("loaded"))
            await inspector.on_user_prompt_opened(describe("prompt opened"))
            await inspector.on_user_prompt_closed(describe("prompt closed"))

            console.print(f"[green]Listening for context events on {config.websocket_url}[/green]")
            await wait_for(duration)
