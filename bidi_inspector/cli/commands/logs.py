"""Logs command: stream console and javascript log entries."""

import asyncio
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from ...errors import BidiError
from ...filters import FilterBy
from ...models import LogEntry, LogLevel
from ...services import LogInspector, LogRecorder
from ..utils import console, open_channel, wait_for

LEVEL_STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


def print_entry(entry: LogEntry) -> None:
    style = LEVEL_STYLES.get(entry.level, "white")
    source = entry.method or entry.type.value
    console.print(
        f"[{style}]{entry.level.value.upper():7}[/{style}] [dim]{source}[/dim] {entry.text}",
        highlight=False,
    )
    if entry.stack_trace is not None:
        for frame in entry.stack_trace.call_frames:
            console.print(
                f"[dim]    at {frame.function_name or '<anonymous>'} "
                f"({frame.url}:{frame.line_number}:{frame.column_number})[/dim]",
                highlight=False,
            )


@click.command()
@click.option(
    "--level",
    type=click.Choice([level.value for level in LogLevel]),
    help="Only show entries at this level",
)
@click.option("--errors-only", is_flag=True, help="Only show uncaught script errors")
@click.option("--context", "contexts", multiple=True, help="Browsing context id (repeatable)")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also append entries to this JSON-lines file",
)
@click.option("--duration", type=float, help="Stop after this many seconds")
@click.pass_context
def logs(ctx, level, errors_only, contexts, output, duration):
    """Stream log entries from the browser.

    \b
    Examples:
      bidi-inspector logs
      bidi-inspector logs --level error --output errors.jsonl
    """
    try:
        asyncio.run(
            _logs_command(ctx.obj, level, errors_only, tuple(contexts), output, duration)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        sys.exit(0)
    except BidiError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


async def _logs_command(
    obj: dict,
    level: Optional[str],
    errors_only: bool,
    contexts: Tuple[str, ...],
    output: Optional[Path],
    duration: Optional[float],
) -> None:
    config = obj["config"]
    filter_by = FilterBy.log_level(level) if level else None

    async with open_channel(config, obj["new_session"]) as channel:
        inspector = LogInspector(channel, browsing_context_ids=contexts or None)
        recorder = None
        try:
            if errors_only:
                await inspector.on_javascript_exception(print_entry, filter_by)
            else:
                await inspector.on_log(print_entry, filter_by)

            if output is not None:
                recorder = LogRecorder(
                    output,
                    flush_interval=config.recorder_flush_interval,
                    buffer_size=config.recorder_buffer_size,
                )
                await recorder.attach(inspector, filter_by)
                await recorder.start()

            console.print(f"[green]Listening for log entries on {config.websocket_url}[/green]")
            await wait_for(duration)
        finally:
            try:
                await inspector.close()
            finally:
                if recorder is not None:
                    await recorder.stop()
                    console.print(f"[dim]Wrote {recorder.entries_written} entries to {output}[/dim]")
