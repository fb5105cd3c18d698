"""
Runtime configuration for chassis.

Values come from the environment and are read once at import time, the same
way the request model picks its ``extra`` mode. Override them by exporting the
variables before importing chassis:

  export CHASSIS_REQUEST_EXTRA=forbid   # allow|forbid|ignore
  export CHASSIS_HTTP_TIMEOUT=10        # seconds, HttpTransport default
  export CHASSIS_DEBUG=1                # verbose CLI logging
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_extra_mode(default: str = "allow") -> str:
    """
    Determine the extra-mode for request descriptors.

    CHASSIS_REQUEST_EXTRA: allow|forbid|ignore
    Convenience booleans: "true/1/on/strict" -> forbid, "false/0/off/lenient" -> allow
    """
    raw = (os.getenv("CHASSIS_REQUEST_EXTRA") or default).strip().lower()

    if raw in {"allow", "forbid", "ignore"}:
        return raw
    if raw in {"1", "true", "yes", "on", "strict"}:
        return "forbid"
    if raw in {"0", "false", "no", "off", "lenient"}:
        return "allow"

    LOGGER.warning("Unknown CHASSIS_REQUEST_EXTRA=%r, using %s", raw, default)
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    # Passthrough policy for unknown request descriptor keys
    request_extra: str = "allow"

    # HttpTransport request timeout in seconds; None disables it
    http_timeout: Optional[float] = 30.0

    # Verbose logging for the CLI
    debug: bool = False

    # dataType used by fetch/save when the caller gives none
    default_data_type: str = "json"


def load_settings() -> Settings:
    """Build a :class:`Settings` snapshot from the current environment."""
    timeout = _env_float("CHASSIS_HTTP_TIMEOUT", 30.0)
    return Settings(
        request_extra=_env_extra_mode(),
        http_timeout=timeout if timeout > 0 else None,
        debug=_env_flag("CHASSIS_DEBUG"),
    )


SETTINGS = load_settings()

__all__ = ["Settings", "SETTINGS", "load_settings", "_env_extra_mode"]
