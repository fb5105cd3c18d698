#!/usr/bin/env python
"""Command line interface for chassis."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from chassis.cli.commands import fetch, load
from chassis.config import SETTINGS

app = typer.Typer(help="Inspect and exercise chassis models")
console = Console(stderr=True)

# Add command groups
app.add_typer(fetch.app, name="fetch")
app.add_typer(load.app, name="load")


@app.callback()
def callback(
    debug: bool = typer.Option(
        SETTINGS.debug, "--debug", help="Verbose logging (or CHASSIS_DEBUG=1)"
    ),
):
    """Observable attribute models with pluggable sync."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
    )


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
