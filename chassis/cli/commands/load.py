"""Load command: build a model from a JSON file and mutate it."""

import json
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from chassis import MISSING, Model
from chassis.cli.utils.pairs import parse_pair, render

app = typer.Typer(help="Load a model from a JSON file and apply mutations")
console = Console()


@app.callback(invoke_without_command=True)
def main(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    set_: List[str] = typer.Option(
        [], "--set", "-s", help="Attribute to write as key=value (repeatable)"
    ),
    unset: List[str] = typer.Option(
        [], "--unset", "-u", help="Attribute to remove (repeatable)"
    ),
):
    """Load PATH, apply --set/--unset in order and show both snapshots."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] not valid JSON in {path}: {e}")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        console.print("[bold red]Error:[/bold red] JSON must describe an object")
        raise typer.Exit(1)

    model = Model(data)
    changes = 0

    def count(*_payload):
        nonlocal changes
        changes += 1

    model.on("change", count)
    for raw in set_:
        key, value = parse_pair(raw)
        model.set(key, value)
    for key in unset:
        model.unset(key)

    current = model.to_json()
    previous = model.previous_attributes()
    table = Table("Attribute", "Current", "Previous")
    for key in sorted(set(current) | set(previous)):
        now = current.get(key, MISSING)
        before = previous.get(key, MISSING)
        table.add_row(
            key,
            "(absent)" if now is MISSING else render(now),
            "(absent)" if before is MISSING else render(before),
        )

    console.print(table)
    console.print(f"Change notifications: {changes}")
