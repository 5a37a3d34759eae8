"""Locate command: run browsingContext.locateNodes and show the result."""

import asyncio
import sys
from typing import List, Optional

import click
from rich.table import Table

from ...errors import BidiError
from ...models import Locator, RemoteValue, ResultOwnership
from ...services import BrowsingContext
from ..utils import console, open_channel


def build_locator(css: Optional[str], xpath: Optional[str], text: Optional[str]) -> Locator:
    options = (("css", css), ("xpath", xpath), ("text", text))
    given = [(name, value) for name, value in options if value is not None]
    if len(given) != 1:
        raise click.UsageError("Give exactly one of --css, --xpath or --text")

    name, value = given[0]
    if name == "css":
        return Locator.css(value)
    if name == "xpath":
        return Locator.xpath(value)
    return Locator.inner_text(value)


def render_nodes(nodes: List[RemoteValue]) -> Table:
    table = Table(title=f"{len(nodes)} node(s)")
    table.add_column("#", justify="right")
    table.add_column("Tag")
    table.add_column("Attributes")
    table.add_column("sharedId", style="dim")
    table.add_column("handle", style="dim")

    for index, node in enumerate(nodes):
        properties = node.value
        tag = getattr(properties, "local_name", None) or node.type
        attributes = getattr(properties, "attributes", None) or {}
        table.add_row(
            str(index),
            tag,
            " ".join(f'{key}="{value}"' for key, value in attributes.items()),
            node.shared_id or "",
            node.handle or "",
        )
    return table


@click.command()
@click.option("--context", "context_id", help="Browsing context id (default: first top-level context)")
@click.option("--css", help="CSS selector")
@click.option("--xpath", help="XPath expression")
@click.option("--text", help="Inner text to match")
@click.option("--max-count", type=click.IntRange(min=1), help="Maximum number of nodes")
@click.option(
    "--ownership",
    type=click.Choice([ownership.value for ownership in ResultOwnership]),
    help="Result ownership (root returns handles)",
)
@click.option("--sandbox", help="Sandbox realm name")
@click.pass_context
def locate(ctx, context_id, css, xpath, text, max_count, ownership, sandbox):
    """Locate nodes in a browsing context.

    \b
    Examples:
      bidi-inspector locate --css div
      bidi-inspector locate --xpath '/html/body/div[2]' --max-count 1
    """
    locator = build_locator(css, xpath, text)
    try:
        asyncio.run(_locate_command(ctx.obj, context_id, locator, max_count, ownership, sandbox))
    except BidiError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


async def _locate_command(
    obj: dict,
    context_id: Optional[str],
    locator: Locator,
    max_count: Optional[int],
    ownership: Optional[str],
    sandbox: Optional[str],
) -> None:
    config = obj["config"]

    async with open_channel(config, obj["new_session"]) as channel:
        if context_id is None:
            tree = await channel.send("browsingContext.getTree", {"maxDepth": 0})
            top_level = tree.get("contexts", [])
            if not top_level:
                raise click.ClickException("No browsing contexts available")
            context_id = top_level[0]["context"]

        context = BrowsingContext(channel, context_id)
        nodes = await context.locate_nodes(
            locator, max_node_count=max_count, ownership=ownership, sandbox=sandbox
        )
        console.print(render_nodes(nodes))
