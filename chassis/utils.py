"""Small helpers shared by the model layer: ids, merging and copying."""

from __future__ import annotations

import copy
import itertools
import threading
from typing import Any, Dict, MutableMapping, Optional


class _Missing:
    """Marker for an attribute that was never set (distinct from ``None``)."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Missing":
        return self


MISSING: Any = _Missing()

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def unique_id(prefix: str = "") -> str:
    """Return an id that no other call in this process has returned."""
    with _counter_lock:
        n = next(_counter)
    return f"{prefix}{n}"


def mixin(target: MutableMapping, *sources: Optional[MutableMapping]) -> MutableMapping:
    """Shallow-merge ``sources`` into ``target`` left to right; later keys win."""
    for source in sources:
        if source:
            target.update(source)
    return target


def clone(value: Any) -> Any:
    """Structural copy of ``value`` that shares no mutable state with it."""
    return copy.deepcopy(value)


__all__ = ["MISSING", "unique_id", "mixin", "clone"]
