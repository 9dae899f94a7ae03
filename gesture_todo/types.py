"""
Type definitions for the gesture recognition pipeline.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Literal, Optional, Protocol, Sequence, Tuple, runtime_checkable


# (x, y, z) in normalized image coordinates, y grows downward
Landmark = Tuple[float, float, float]
HandPose = Sequence[Landmark]

ResultCallback = Callable[[List[HandPose]], None]


class GestureLabel(str, Enum):
    """Discrete gestures the classifier can produce."""
    THUMBS_UP = "thumbs_up"
    PEACE_SIGN = "peace_sign"
    FIST = "fist"
    POINT_UP = "point_up"
    TWO_FINGERS = "two_fingers"
    OPEN_PALM = "open_palm"
    NONE = "none"


class SessionState(Enum):
    """Lifecycle of a recognizer session."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class FingerStates:
    """Extension state of each digit for one pose."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def extended_count(self) -> int:
        return sum((self.thumb, self.index, self.middle, self.ring, self.pinky))


@dataclass(frozen=True)
class RecognizerStats:
    """Snapshot of the stabilizer state."""
    last_gesture: GestureLabel
    confidence: float
    frame_count: int
    history_length: int


@dataclass(frozen=True)
class ErrorStats:
    """Snapshot of the session's error counters."""
    max_retries: int
    consecutive_errors: int
    retry_count: int


@runtime_checkable
class GestureListener(Protocol):
    """Receives stabilized gesture events from a recognizer session."""

    def on_gesture_detected(self, gesture: GestureLabel) -> None:
        """Called at most once per debounce window, never with NONE."""
        ...


@runtime_checkable
class ErrorListener(Protocol):
    """Optional error sink for a recognizer session."""

    def on_error(self, error: Exception) -> None:
        ...


@runtime_checkable
class HandTrackerProto(Protocol):
    """Shape of the external hand-tracking model the session drives."""

    def configure(self, **options: Any) -> None:
        ...

    def on_result(self, callback: ResultCallback) -> None:
        ...

    def send(self, frame: Any) -> Optional[Any]:
        """Process one frame; may return an awaitable."""
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class TodoControllerProto(Protocol):
    """Abstract protocol for controllers that execute todo commands."""

    async def add_task(self) -> None:
        """Start adding a new task."""
        ...

    async def complete_selected(self) -> None:
        """Toggle completion of the selected task."""
        ...

    async def delete_selected(self) -> None:
        """Delete the selected task."""
        ...

    async def move_selection(self, direction: Literal["up", "down"]) -> None:
        """Move the task selection in the specified direction."""
        ...

    async def cancel(self) -> None:
        """Cancel the operation in progress."""
        ...
