"""
Model types as plain descriptions.

A :class:`ModelType` bundles a base class (the shared behaviour), a member
table (methods, ``defaults``, ``id_attribute`` ...) and statics. Extending a
type produces a new description; nothing is subclassed. Calling a type builds
an instance of the base class with the member table installed on it before
construction starts, so overrides take part in construction itself.
"""

from __future__ import annotations

import logging
import types
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional

from .utils import mixin

LOGGER = logging.getLogger(__name__)


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return types.MappingProxyType(dict(mapping))


@dataclass(frozen=True, eq=False)
class ModelType:
    base: type
    name: str = ""
    members: Mapping[str, Any] = field(default_factory=lambda: _frozen({}))
    statics: Mapping[str, Any] = field(default_factory=lambda: _frozen({}))
    parent: Optional["ModelType"] = None

    @classmethod
    def root(cls, base: type) -> "ModelType":
        """Type describing ``base`` with no extension applied."""
        return cls(base=base, name=base.__name__)

    def extend(
        self,
        extension: Optional[Mapping[str, Any]] = None,
        statics: Optional[Mapping[str, Any]] = None,
        *,
        name: Optional[str] = None,
        **members: Any,
    ) -> "ModelType":
        """
        New type with ``extension`` (and keyword ``members``) layered over this
        type's members. Extension wins on collision; ``defaults`` is replaced,
        not merged.
        """
        if extension is not None and not isinstance(extension, Mapping):
            raise TypeError(
                f"extension must be a mapping, got {type(extension).__name__}"
            )
        merged = mixin({}, self.members, extension, members)
        derived = ModelType(
            base=self.base,
            name=name or self.name,
            members=_frozen(merged),
            statics=_frozen(mixin({}, self.statics, statics)),
            parent=self,
        )
        LOGGER.debug("Extended %s into %s with %s", self.name, derived.name, sorted(merged))
        return derived

    def __call__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        instance = self.base.__new__(self.base)
        self._install(instance)
        instance.__init__(attributes, options, *args, **kwargs)
        return instance

    def _install(self, instance: Any) -> None:
        plain = getattr(self.base, "_plain_members", frozenset())
        for key, value in self.members.items():
            if isinstance(value, staticmethod):
                value = value.__func__
            elif isinstance(value, types.FunctionType) and key not in plain:
                value = types.MethodType(value, instance)
            setattr(instance, key, value)
        instance.model_type = self

    def inherited(self, key: str) -> Any:
        """
        The member ``key`` as this type's parent sees it, falling back to the
        base class attribute. Lets an override delegate to what it replaced:

            Child.inherited("parse")(self, response, options)
        """
        for ancestor in self.lineage():
            if ancestor is self:
                continue
            if key in ancestor.members:
                return ancestor.members[key]
        return getattr(self.base, key)

    def lineage(self) -> Iterator["ModelType"]:
        """This type, then each ancestor up to the root."""
        current: Optional[ModelType] = self
        while current is not None:
            yield current
            current = current.parent

    def is_instance(self, obj: Any) -> bool:
        """True when ``obj`` was built by this type or a type extended from it."""
        built_by = getattr(obj, "model_type", None)
        if not isinstance(built_by, ModelType):
            return False
        return any(t is self for t in built_by.lineage())

    def __getattr__(self, key: str) -> Any:
        if key.startswith("__"):
            raise AttributeError(key)
        statics = object.__getattribute__(self, "statics")
        try:
            return statics[key]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} {self.name!r} has no static {key!r}"
            ) from None


__all__ = ["ModelType"]
