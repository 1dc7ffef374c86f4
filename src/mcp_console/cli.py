"""CLI entry point for mcp-console."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
import yaml

from mcp_console import __version__
from mcp_console.client import run_console
from mcp_console.config import load_settings


@click.command()
@click.version_option(version=__version__, prog_name="mcp-console")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Settings file (YAML). Defaults to ./mcp-console.yaml when present.",
)
@click.option("--verbose", is_flag=True, help="Log protocol and model traffic to stderr.")
def main(config_path: str | None, verbose: bool) -> None:
    """Browse and invoke an MCP server's tools, resources and prompts."""
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    path = Path(config_path) if config_path else None
    if path is not None and not path.exists():
        click.echo(f"Error: settings file not found: {path}", err=True)
        raise SystemExit(1)

    try:
        settings = load_settings(path)
    except (ValueError, yaml.YAMLError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    try:
        asyncio.run(run_console(settings))
    except KeyboardInterrupt:
        click.echo("\nDisconnected.", err=True)
