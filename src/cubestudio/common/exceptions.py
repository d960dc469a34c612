"""Common exceptions for the Cube Studio system."""

from typing import Any, Optional


class CubeStudioError(Exception):
    """Base exception for all Cube Studio errors."""

    pass


class ValidationError(CubeStudioError):
    """Input validation error."""

    pass


class ConfigurationError(CubeStudioError):
    """Configuration error."""

    pass


class CodecError(CubeStudioError):
    """Payload encoding or decoding error."""

    pass


class SceneError(CubeStudioError):
    """Scene document import error."""

    pass


class ParseError(SceneError):
    """Scene document is not well formed."""

    pass


class EmptySequenceError(SceneError):
    """Scene document parsed but carries no frames.

    ``document`` holds the recovered scene with the default blank frame.
    """

    def __init__(self, message: str, document: Any = None):
        super().__init__(message)
        self.document = document


class TransportError(CubeStudioError):
    """Communication failure on a cube link."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Transport {operation} failed{detail}")
