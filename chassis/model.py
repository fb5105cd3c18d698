"""
Observable attribute model.

Public API:
  - Model(attributes=None, options=None, *args, **kwargs)
  - Model.get(name, default=MISSING) / has(name) / set(key, value, options, **opts)
  - Model.unset(name) / clear() / previous(name) / previous_attributes()
  - Model.to_json() -> deep copy of the current attributes
  - Model.change() -> manual "change" notification
  - Model.fetch(options=None, **opts) -> Future[bool]
  - Model.save(attributes=None, options=None, **opts) -> Future[bool]
  - Model.url() / parse() / sync() -> override points
  - Model.extend(extension) -> ModelType

Every ``set`` call that is not ``silent`` publishes exactly one ``"change"``
notification carrying the model, whether or not any value actually changed.
"""

from __future__ import annotations

import inspect
import logging
from concurrent.futures import Future
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from .config import SETTINGS
from .events import Events
from .factory import ModelType
from .transport import Transport, default_transport
from .utils import MISSING, clone, mixin, unique_id

LOGGER = logging.getLogger(__name__)


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


class Model(Events):
    """
    A bag of named attributes that notifies listeners when it is mutated and
    reconciles itself with a remote source through a pluggable transport.
    """

    # Attribute mirrored onto the instance whenever it appears in a ``set``
    id_attribute: str = "id"

    # Merged under the constructor attributes; never re-applied afterwards
    defaults: Mapping[str, Any] = {}

    # Callable transport used by ``sync``; None falls back to the module default
    transport: Optional[Transport] = None

    # Set by ModelType when the instance was built from a type description
    model_type: Optional["ModelType"] = None

    # Members the factory installs as plain values even when callable
    _plain_members: FrozenSet[str] = frozenset({"transport", "defaults"})

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        *args: Any,
        **kwargs: Any,
    ):
        Events.__init__(self)
        opts: Dict[str, Any] = dict(options or {})

        self._attributes: Dict[str, Any] = {}
        self._previous_attributes: Dict[str, Any] = {}
        self.cid = unique_id("c")
        if self.id_attribute not in self.__dict__:
            setattr(self, self.id_attribute, None)
        if opts.get("transport") is not None:
            self.transport = opts["transport"]

        attrs = mixin({}, clone(dict(self.defaults or {})), attributes)
        self.set(attrs, opts)

        self.init(attributes, options, *args, **kwargs)

    def init(self, *args: Any, **kwargs: Any) -> None:
        """Hook run once construction has populated the attributes."""

    def __repr__(self) -> str:
        name = self.model_type.name if self.model_type else type(self).__name__
        ident = getattr(self, self.id_attribute, None)
        return f"<{name} cid={self.cid} {self.id_attribute}={ident!r}>"

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    # ------------------------------ Attribute store ------------------------------

    @property
    def attributes(self) -> Dict[str, Any]:
        """The live current snapshot. Mutate it through :meth:`set` only."""
        return self._attributes

    def get(self, name: str, default: Any = MISSING) -> Any:
        """Current value of ``name``; ``default`` (:data:`MISSING`) when it was never set."""
        return self._attributes.get(name, default)

    def has(self, name: str) -> bool:
        """True when ``name`` holds a value other than ``None``."""
        value = self.get(name)
        return value is not MISSING and value is not None

    def set(
        self,
        key: Any,
        value: Any = MISSING,
        options: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> "Model":
        """
        Write one attribute (``set("k", v)``) or many (``set({"k": v}, options)``).

        Options: ``silent`` suppresses the change notification, ``unset``
        deletes the named keys instead of writing them. A ``None`` key is a
        no-op.
        """
        if key is None:
            return self

        if isinstance(key, Mapping):
            attrs = key
            first = value if isinstance(value, Mapping) else None
            options = mixin({}, first, options, opts)
        else:
            attrs = {key: None if value is MISSING else value}
            options = mixin({}, options, opts)

        self._previous_attributes = clone(self._attributes)

        if self.id_attribute in attrs:
            setattr(self, self.id_attribute, attrs[self.id_attribute])

        unset = options.get("unset")
        for name, item in attrs.items():
            if unset:
                self._attributes.pop(name, None)
            else:
                self._attributes[name] = item

        LOGGER.debug("%s %s on %r", "unset" if unset else "set", list(attrs), self)

        if not options.get("silent"):
            self.trigger("change", self)
        return self

    def unset(self, name: str, options: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Model":
        return self.set(name, None, options, unset=True, **opts)

    def clear(self, options: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Model":
        """Remove every attribute in a single mutation."""
        names = dict.fromkeys(self._attributes)
        return self.set(names, options, unset=True, **opts)

    def previous(self, name: str, default: Any = MISSING) -> Any:
        return self._previous_attributes.get(name, default)

    def previous_attributes(self) -> Dict[str, Any]:
        return clone(self._previous_attributes)

    def to_json(self) -> Dict[str, Any]:
        """Independent deep copy of the current attributes."""
        return clone(self._attributes)

    def change(self) -> "Model":
        """Publish ``"change"`` without a payload."""
        self.trigger("change")
        return self

    def is_new(self) -> bool:
        return not self.has(self.id_attribute)

    # ------------------------------ Sync lifecycle -------------------------------

    def url(self) -> Optional[str]:
        """Endpoint for this instance. Concrete model types supply it."""
        return None

    def parse(self, response: Any, options: Optional[Mapping[str, Any]] = None) -> Any:
        """Map a raw transport response to attributes for :meth:`set`."""
        return response

    def sync(self, request: Dict[str, Any]) -> Any:
        """Hand ``request`` to the transport. Override to swap transports."""
        transport = inspect.getattr_static(self, "transport", None)
        if isinstance(transport, staticmethod):
            transport = transport.__func__
        if transport is None:
            transport = default_transport()
        return transport(request)

    def fetch(self, options: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Future[bool]":
        """
        Read this model from its endpoint.

        On success the response goes through ``parse``, the caller's
        ``success(model)`` runs, then the parsed attributes are applied with
        the same options (``silent=True`` silences the change too). A parsed
        value that is not a mapping is logged and not applied, so
        ``dataType="text"`` needs a ``parse`` override to store anything.

        On failure ``"error"`` is published with ``(model, exc)`` and
        attributes are left untouched. The request's own ``error`` callback
        replaces the caller's, but the caller's ``error(model, exc)`` is still
        invoked afterwards rather than dropped.

        The returned future resolves to True or False once the transport
        settles. It never carries the transport error.
        """
        return self._round_trip("fetch", mixin({}, options, opts))

    def save(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> "Future[bool]":
        """
        Write this model to its endpoint: POST while new, PUT once it has an id.

        ``attributes`` are applied locally first. The server response is
        parsed and applied exactly like a fetch response.
        """
        options = mixin({}, options, opts)
        if attributes:
            self.set(attributes, options)
        options = mixin(
            {"type": "POST" if self.is_new() else "PUT", "data": self.to_json()},
            options,
        )
        return self._round_trip("save", options)

    def _round_trip(self, action: str, options: Dict[str, Any]) -> "Future[bool]":
        options = mixin(
            {"dataType": SETTINGS.default_data_type, "success": _noop}, options
        )
        url = self.url()
        future: "Future[bool]" = Future()
        future.set_running_or_notify_cancel()
        settled = False

        def claim() -> bool:
            nonlocal settled
            if settled:
                LOGGER.warning("Ignoring repeated completion of %s for %r", action, self)
                return False
            settled = True
            return True

        def success(response: Any = None) -> None:
            if not claim():
                return
            LOGGER.debug("%s of %r succeeded", action, self)
            try:
                attrs = self.parse(response, options)
                caller_success: Callable[..., Any] = options.get("success") or _noop
                caller_success(self)
                if attrs is None or isinstance(attrs, Mapping):
                    self.set(attrs, options)
                else:
                    LOGGER.warning(
                        "Not applying %s response to %r: parse returned %s, not a mapping",
                        action,
                        self,
                        type(attrs).__name__,
                    )
            except Exception as e:
                future.set_exception(e)
                raise
            future.set_result(True)

        def error(exc: Any = None) -> None:
            if not claim():
                return
            LOGGER.warning("%s of %r from %s failed: %s", action, self, url, exc)
            try:
                self.trigger("error", self, exc)
                caller_error = options.get("error")
                if caller_error is not None:
                    caller_error(self, exc)
            finally:
                future.set_result(False)

        request = mixin({}, options, {"url": url, "success": success, "error": error})
        LOGGER.debug("%s of %r via %s", action, self, url)
        self.sync(request)
        return future

    # ------------------------------ Extension ------------------------------------

    @classmethod
    def extend(
        cls,
        extension: Optional[Mapping[str, Any]] = None,
        statics: Optional[Mapping[str, Any]] = None,
        *,
        name: Optional[str] = None,
        **members: Any,
    ) -> "ModelType":
        """Describe a new model type layering ``extension`` over this class."""
        return ModelType.root(cls).extend(extension, statics, name=name, **members)


__all__ = ["Model"]
