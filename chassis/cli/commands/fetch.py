"""Fetch command: read a remote endpoint into a model."""

from typing import Any, Dict, List, Optional

import typer
from rich.console import Console

from chassis import HttpTransport, Model
from chassis.cli.utils.pairs import parse_pairs, render

app = typer.Typer(help="Fetch an endpoint into a model and print its attributes")
console = Console()


@app.callback(invoke_without_command=True)
def main(
    url: str = typer.Argument(..., help="Endpoint returning a JSON object"),
    parse_key: Optional[str] = typer.Option(
        None, "--parse-key", help="Read attributes from this key of the response"
    ),
    id_attribute: str = typer.Option("id", help="Attribute holding the domain id"),
    default: List[str] = typer.Option(
        [], "--default", "-d", help="Default attribute as key=value (repeatable)"
    ),
    silent: bool = typer.Option(False, help="Apply the response without notifying"),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds"),
):
    """Fetch URL and print the resulting attributes."""
    observed: List[str] = []
    failures: List[Any] = []

    def parse(self, response, options=None):
        if parse_key is None:
            return response
        if isinstance(response, dict):
            return response.get(parse_key)
        return None

    Remote = Model.extend(
        {
            "defaults": parse_pairs(default),
            "id_attribute": id_attribute,
            "transport": HttpTransport(timeout=timeout),
            "url": lambda self: url,
            "parse": parse,
        },
        name="Remote",
    )

    try:
        model = Remote(None, {"silent": True})
        model.on("all", lambda channel, *payload: observed.append(channel))
        model.on("error", lambda _model, exc: failures.append(exc))
        ok = model.fetch(silent=silent).result()
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    if not ok:
        reason = failures[0] if failures else "unknown error"
        console.print(f"[bold red]Error:[/bold red] fetch failed: {reason}")
        raise typer.Exit(1)

    attributes: Dict[str, Any] = model.to_json()
    console.print_json(data=attributes, default=str)
    ident = getattr(model, id_attribute, None)
    if ident is not None:
        console.print(f"[green]{id_attribute}:[/green] [bold]{render(ident)}[/bold]")
    console.print(f"Notifications: {', '.join(observed) or 'none'}")
