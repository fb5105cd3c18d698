"""Parsing of ``key=value`` command line arguments."""

import json
from typing import Any, Dict, Iterable, Tuple

import typer


def parse_value(raw: str) -> Any:
    """Decode ``raw`` as JSON when it is valid JSON, otherwise keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_pair(raw: str) -> Tuple[str, Any]:
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        raise typer.BadParameter(f"Expected key=value, got {raw!r}")
    return key, parse_value(value)


def parse_pairs(raws: Iterable[str]) -> Dict[str, Any]:
    return dict(parse_pair(raw) for raw in raws)


def render(value: Any) -> str:
    """Compact JSON rendering for table cells."""
    return json.dumps(value, ensure_ascii=False, default=str)
