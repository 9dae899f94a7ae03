"""
Configuration management for the gesture todo application.
"""
import yaml
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field


# Frame interval assumed when converting a debounce time to frames (~30fps)
FRAME_INTERVAL_MS = 33


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass(frozen=True)
class TrackerConfig:
    """MediaPipe Hands configuration settings. The tracker always runs single-hand."""
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    tasks_model_path: str = "models/hand_landmarker.task"

    def __post_init__(self):
        if self.model_complexity not in (0, 1):
            raise ValueError(f"model_complexity must be 0 or 1, got {self.model_complexity}")
        for name in ("min_detection_confidence", "min_tracking_confidence"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


@dataclass(frozen=True)
class ClassifierConfig:
    """Gesture classifier configuration."""
    sensitivity: float = 1.0  # scales the open-palm spread threshold

    def __post_init__(self):
        if self.sensitivity <= 0:
            raise ValueError(f"sensitivity must be positive, got {self.sensitivity}")


@dataclass(frozen=True)
class StabilizerConfig:
    """Temporal stabilizer configuration."""
    confidence_threshold: float = 0.8
    debounce_frames: int = 8
    history_size: int = 10

    def __post_init__(self):
        if not 0.0 < self.confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence_threshold must be in (0, 1], got {self.confidence_threshold}"
            )
        for name in ("debounce_frames", "history_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.debounce_frames < 1:
            raise ValueError(f"debounce_frames must be positive, got {self.debounce_frames}")
        if self.history_size < self.debounce_frames:
            raise ValueError(
                f"history_size ({self.history_size}) must be >= debounce_frames ({self.debounce_frames})"
            )

    @classmethod
    def from_debounce_time(cls, debounce_time_ms: float, confidence_threshold: float = 0.8,
                           history_size: int = 10) -> "StabilizerConfig":
        """
        Build a config from a debounce time in milliseconds.

        Args:
            debounce_time_ms: Debounce interval in milliseconds
            confidence_threshold: Minimum confidence before a gesture is emitted
            history_size: Requested history size, raised to fit the window if needed

        Returns:
            Stabilizer configuration with the time converted to whole frames
        """
        debounce_frames = max(1, int(debounce_time_ms // FRAME_INTERVAL_MS))
        return cls(
            confidence_threshold=confidence_threshold,
            debounce_frames=debounce_frames,
            history_size=max(history_size, debounce_frames),
        )


@dataclass(frozen=True)
class RecoveryConfig:
    """Retry policy applied by the application loop."""
    max_retries: int = 3
    retry_delay_ms: int = 1000

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_delay_ms < 0:
            raise ValueError(f"retry_delay_ms must be >= 0, got {self.retry_delay_ms}")


@dataclass(frozen=True)
class RecognizerConfig:
    """Everything a recognizer session needs."""
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    recovery: RecoveryConfig = field(default_factory=RecoveryConfig)


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_preview: bool = True
    show_landmarks: bool = True
    window_name: str = "Gesture Todo"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    recognizer: RecognizerConfig = field(default_factory=RecognizerConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the bundled config.default.yaml

    Returns:
        Configuration object with all settings
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = _section(str(config_path), yaml.safe_load(f))

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """
    Convert dictionary to configuration object. Missing keys keep their defaults.

    Raises:
        ValueError: If a section is not a mapping or has unknown or invalid keys
    """
    camera = _build_section('camera', CameraConfig, data.get('camera'))

    recognizer_data = _section('recognizer', data.get('recognizer'))
    stabilizer_data = _section('recognizer.stabilizer', recognizer_data.get('stabilizer'))
    if 'debounce_time_ms' in stabilizer_data:
        stabilizer = _build_section('recognizer.stabilizer', StabilizerConfig.from_debounce_time,
                                    stabilizer_data)
    else:
        stabilizer = _build_section('recognizer.stabilizer', StabilizerConfig, stabilizer_data)

    recognizer = RecognizerConfig(
        tracker=_build_section('recognizer.tracker', TrackerConfig, recognizer_data.get('tracker')),
        classifier=_build_section('recognizer.classifier', ClassifierConfig,
                                  recognizer_data.get('classifier')),
        stabilizer=stabilizer,
        recovery=_build_section('recognizer.recovery', RecoveryConfig, recognizer_data.get('recovery')),
    )

    display = _build_section('display', DisplayConfig, data.get('display'))

    return Cfg(
        camera=camera,
        recognizer=recognizer,
        display=display
    )


def _section(name: str, value: Any) -> Dict[str, Any]:
    # An empty YAML section loads as None
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
    return dict(value)


def _build_section(name: str, factory: Callable[..., Any], value: Any) -> Any:
    try:
        return factory(**_section(name, value))
    except TypeError as e:
        raise ValueError(f"Invalid config section '{name}': {e}") from e
