"""
Instance-scoped publish/subscribe.

Every :class:`Events` owner keeps its own registry, so listeners attached to
one model never see another model's notifications. Dispatch is synchronous
and follows registration order; listeners of the ``"all"`` channel run after
the channel's own listeners and receive the channel name first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

LOGGER = logging.getLogger(__name__)

ALL = "all"

Handler = Callable[..., Any]


@dataclass(eq=False)
class _Listener:
    handler: Handler
    context: Any = None
    once: bool = False

    def matches(self, handler: Optional[Handler], context: Any) -> bool:
        if handler is not None and self.handler != handler:
            return False
        if context is not None and self.context is not context:
            return False
        return True


class Events:
    """Mixin providing ``on``/``once``/``off``/``trigger``."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[_Listener]] = {}

    def _registry(self) -> Dict[str, List[_Listener]]:
        # Subclasses may trigger before Events.__init__ has run
        try:
            return self._listeners
        except AttributeError:
            self._listeners = {}
            return self._listeners

    # ----- Subscribe -----

    def on(self, channel: str, handler: Handler, context: Any = None) -> "Events":
        """Subscribe ``handler`` to each whitespace-separated name in ``channel``."""
        registry = self._registry()
        for name in channel.split():
            registry.setdefault(name, []).append(_Listener(handler, context))
        return self

    def once(self, channel: str, handler: Handler, context: Any = None) -> "Events":
        """Subscribe ``handler`` for a single delivery."""
        registry = self._registry()
        for name in channel.split():
            registry.setdefault(name, []).append(
                _Listener(handler, context, once=True)
            )
        return self

    def off(
        self,
        channel: Optional[str] = None,
        handler: Optional[Handler] = None,
        context: Any = None,
    ) -> "Events":
        """
        Remove registrations.

        No arguments clears everything; ``channel`` alone clears that channel;
        ``handler``/``context`` narrow the removal to matching listeners.
        """
        registry = self._registry()
        if channel is None and handler is None and context is None:
            registry.clear()
            return self

        names = channel.split() if channel else list(registry)
        for name in names:
            listeners = registry.get(name)
            if not listeners:
                continue
            kept = [l for l in listeners if not l.matches(handler, context)]
            if kept:
                registry[name] = kept
            else:
                del registry[name]
        return self

    # ----- Publish -----

    def trigger(self, channel: str, *payload: Any) -> "Events":
        """Dispatch ``payload`` to the listeners of each name in ``channel``."""
        registry = self._registry()
        for name in channel.split():
            LOGGER.debug("trigger %r on %r", name, self)
            self._dispatch(registry, name, payload)
            if name != ALL:
                self._dispatch(registry, ALL, (name,) + payload)
        return self

    def _dispatch(
        self, registry: Dict[str, List[_Listener]], name: str, payload: tuple
    ) -> None:
        listeners = registry.get(name)
        if not listeners:
            return
        # Snapshot: listeners may subscribe or unsubscribe while running
        for listener in list(listeners):
            if listener.once:
                self._discard(registry, name, listener)
            listener.handler(*payload)

    @staticmethod
    def _discard(
        registry: Dict[str, List[_Listener]], name: str, listener: _Listener
    ) -> None:
        listeners = registry.get(name)
        if listeners and listener in listeners:
            listeners.remove(listener)
            if not listeners:
                del registry[name]

    # ----- Introspection -----

    def listeners(self, channel: str) -> List[Handler]:
        return [l.handler for l in self._registry().get(channel, [])]


__all__ = ["Events", "ALL"]
