"""Common components shared across modules."""

from .exceptions import *
from .timing import TimeState

__all__ = [
    "CubeStudioError",
    "ValidationError",
    "ConfigurationError",
    "CodecError",
    "SceneError",
    "ParseError",
    "EmptySequenceError",
    "TransportError",
    "TimeState",
]
