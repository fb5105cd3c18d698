"""Validated view of the request descriptor handed to a transport."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import Field, field_validator

from ._base import WireModel


class SyncRequest(WireModel):
    """
    Descriptor built by ``Model.fetch``/``Model.save`` and consumed by transports.

    ``success`` and ``error`` are completion callbacks; a transport must call
    exactly one of them exactly once. Extra keys are transport passthrough.
    """

    url: Optional[str] = None
    data_type: str = Field("json", alias="dataType")
    type: str = "GET"
    data: Any = None
    headers: Optional[Dict[str, str]] = None
    timeout: Optional[float] = None
    success: Optional[Callable[..., Any]] = None
    error: Optional[Callable[..., Any]] = None

    @field_validator("type")
    @classmethod
    def _upper_verb(cls, value: str) -> str:
        return value.upper()

    @field_validator("data_type")
    @classmethod
    def _lower_data_type(cls, value: str) -> str:
        return value.lower()

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "SyncRequest":
        return cls.model_validate(dict(options))

    @property
    def passthrough(self) -> Dict[str, Any]:
        """Keys the descriptor carried beyond the known fields."""
        return dict(self.model_extra or {})


__all__ = ["SyncRequest"]
