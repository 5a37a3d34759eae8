"""CLI entry point for bidi-inspector."""

import logging
from pathlib import Path

import click

from ..config import load_config
from .commands import contexts, locate, logs


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: ~/.bidi-inspector/config.json)",
)
@click.option("--url", help="WebSocket URL of the BiDi endpoint")
@click.option("--new-session", is_flag=True, help="Send session.new after connecting")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="bidi-inspector")
@click.pass_context
def cli(ctx, config_path, url, new_session, debug):
    """Inspect browser events and locate nodes over WebDriver BiDi."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    if url:
        config.websocket_url = url

    logging.basicConfig(level=config.log_level.upper(), format=config.log_format)
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["new_session"] = new_session


cli.add_command(logs)
cli.add_command(contexts)
cli.add_command(locate)


def main():
    """Main CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
