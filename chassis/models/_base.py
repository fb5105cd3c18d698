from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..config import SETTINGS


class WireModel(BaseModel):
    """
    Project-wide base for transport-facing models.

    Unknown keys pass through by default (extra='allow') because request
    descriptors carry transport-specific options; tighten it at runtime by
    setting an env var before import:
      export CHASSIS_REQUEST_EXTRA=forbid   # or allow/ignore
    """

    model_config = ConfigDict(
        extra=SETTINGS.request_extra,  # 'allow' | 'forbid' | 'ignore'
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )


__all__ = ["WireModel"]
