"""
Gesture Todo

Hands-free todo list control: reads webcam frames, detects hand landmarks using
MediaPipe, classifies gestures and turns them into debounced todo commands.
"""

__version__ = "0.1.0"

from .types import GestureLabel, SessionState, RecognizerStats, ErrorStats, GestureListener, ErrorListener
from .config import load_config, Cfg, RecognizerConfig, ClassifierConfig, StabilizerConfig
from .errors import GestureRecognitionError, InitializationError, FrameProcessingError, GenericRecognitionError
from .gestures import classify_gesture, GestureStabilizer, GestureHistory
from .recognizer import RecognizerSession
from .commands import GESTURE_ACTIONS, GestureDispatcher
from .controller_mock import MockController

__all__ = [
    "GestureLabel",
    "SessionState",
    "RecognizerStats",
    "ErrorStats",
    "GestureListener",
    "ErrorListener",
    "load_config",
    "Cfg",
    "RecognizerConfig",
    "ClassifierConfig",
    "StabilizerConfig",
    "GestureRecognitionError",
    "InitializationError",
    "FrameProcessingError",
    "GenericRecognitionError",
    "classify_gesture",
    "GestureStabilizer",
    "GestureHistory",
    "RecognizerSession",
    "GESTURE_ACTIONS",
    "GestureDispatcher",
    "MockController",
]
