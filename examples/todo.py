"""Example of how to use chassis models.

Run: python examples/todo.py [--verbose] [--url https://jsonplaceholder.typicode.com/todos/1]

Without --url the model talks to an in-memory backend through a
CallableTransport, so the example runs offline.
"""

from __future__ import annotations

import argparse
import itertools
import logging
from typing import Any, Dict

from rich import print_json
from rich.console import Console
from rich.logging import RichHandler

from chassis import CallableTransport, HttpTransport, Model, TransportError
from chassis.models import SyncRequest

console = Console()

logger = logging.getLogger("chassis.example")


class MemoryBackend:
    """Stores todos by id and answers GET/POST/PUT like a tiny REST API."""

    def __init__(self) -> None:
        self.rows: Dict[int, Dict[str, Any]] = {
            1: {"id": 1, "title": "Read the docs", "completed": False}
        }
        self._ids = itertools.count(2)

    def __call__(self, request: SyncRequest) -> Dict[str, Any]:
        logger.info("%s %s", request.type, request.url)
        if request.type == "GET":
            todo_id = int(str(request.url).rsplit("/", 1)[-1])
            if todo_id not in self.rows:
                raise TransportError(f"todo {todo_id} not found", status=404)
            return dict(self.rows[todo_id])
        row = dict(request.data or {})
        if request.type == "POST":
            row["id"] = next(self._ids)
        self.rows[row["id"]] = row
        return dict(row)


def build_todo_type(transport: Any):
    return Model.extend(
        {
            "defaults": {"title": "", "completed": False},
            "transport": transport,
            "url": lambda self: f"/todos/{self.id}" if self.id else "/todos",
        },
        name="Todo",
    )


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="chassis model walkthrough")
    p.add_argument("--url", default="", help="Fetch a real todo from this URL")
    p.add_argument("--verbose", action="store_true", help="Enable debug logs")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False)],
    )

    if args.url:
        Todo = build_todo_type(HttpTransport()).extend(url=lambda self: args.url)
    else:
        Todo = build_todo_type(CallableTransport(MemoryBackend()))

    todo = Todo({"id": 1})
    todo.on("change", lambda model: console.print(f"[green]change[/green] {model!r}"))
    todo.on("error", lambda model, exc: console.print(f"[bold red]error[/bold red] {exc}"))

    console.rule("fetch")
    todo.fetch().result()
    print_json(data=todo.to_json())

    console.rule("set")
    todo.set("completed", True)
    console.print(f"previous completed: {todo.previous('completed')}")

    console.rule("save new")
    fresh = Todo({"title": "Write an example"}, {"silent": True})
    fresh.on("change", lambda model: console.print(f"[green]change[/green] {model!r}"))
    fresh.save().result()
    print_json(data=fresh.to_json())

    console.rule("missing")
    Todo({"id": 99}).on("error", lambda model, exc: console.print(f"[yellow]{exc}[/yellow]")).fetch()


if __name__ == "__main__":
    main()
