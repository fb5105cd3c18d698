"""Public exports for chassis wire models."""

from __future__ import annotations

from .request import SyncRequest

__all__ = ["SyncRequest"]
