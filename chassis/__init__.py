"""Public API for chassis: observable attribute models with pluggable sync."""

from .events import Events
from .factory import ModelType
from .model import Model
from .transport import (
    CallableTransport,
    ChassisError,
    ConfigurationError,
    HttpStatusError,
    HttpTransport,
    InvalidResponseError,
    QueueTransport,
    TransportError,
    set_default_transport,
)
from .utils import MISSING, clone, mixin, unique_id

__version__ = "0.1.0"

__all__ = [
    "Model",
    "ModelType",
    "Events",
    "HttpTransport",
    "QueueTransport",
    "CallableTransport",
    "set_default_transport",
    "ChassisError",
    "ConfigurationError",
    "TransportError",
    "HttpStatusError",
    "InvalidResponseError",
    "MISSING",
    "clone",
    "mixin",
    "unique_id",
]
