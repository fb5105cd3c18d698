"""Command modules for the chassis CLI."""

from chassis.cli.commands import fetch, load

__all__ = ["fetch", "load"]
