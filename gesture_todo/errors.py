"""
Error types raised at the recognizer session boundary.
"""
from typing import Optional


class GestureRecognitionError(Exception):
    """Base class for gesture recognition failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class InitializationError(GestureRecognitionError):
    """The hand tracker could not be constructed or configured."""


class FrameProcessingError(GestureRecognitionError):
    """A single frame could not be processed."""


class GenericRecognitionError(GestureRecognitionError):
    """Unexpected failure while classifying or stabilizing a frame."""
