"""
Test cases for configuration loading and validation.
"""
import tempfile
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_todo.config import (
    ClassifierConfig,
    RecoveryConfig,
    StabilizerConfig,
    TrackerConfig,
    load_config,
)


class TestLoadConfig(unittest.TestCase):
    """Test YAML configuration loading."""

    def _write_config(self, text: str) -> str:
        handle = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False)
        with handle:
            handle.write(text)
        self.addCleanup(Path(handle.name).unlink)
        return handle.name

    def test_default_config(self):
        cfg = load_config()

        self.assertEqual(cfg.camera.fps, 30)
        self.assertEqual(cfg.recognizer.stabilizer, StabilizerConfig())
        self.assertEqual(cfg.recognizer.classifier.sensitivity, 1.0)
        self.assertEqual(cfg.recognizer.recovery.max_retries, 3)
        self.assertEqual(cfg.recognizer.recovery.retry_delay_ms, 1000)
        self.assertEqual(cfg.recognizer.tracker.model_complexity, 1)

    def test_partial_config_keeps_defaults(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    confidence_threshold: 0.6\n"
            "    debounce_frames: 5\n"
            "  classifier:\n"
            "    sensitivity: 1.5\n"
        )
        cfg = load_config(path)

        self.assertEqual(cfg.recognizer.stabilizer.confidence_threshold, 0.6)
        self.assertEqual(cfg.recognizer.stabilizer.debounce_frames, 5)
        self.assertEqual(cfg.recognizer.stabilizer.history_size, 10)
        self.assertEqual(cfg.recognizer.classifier.sensitivity, 1.5)
        self.assertEqual(cfg.camera.width, 640)
        self.assertEqual(cfg.display.window_name, "Gesture Todo")

    def test_debounce_time_in_config(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    debounce_time_ms: 500\n"
        )
        cfg = load_config(path)

        self.assertEqual(cfg.recognizer.stabilizer.debounce_frames, 15)
        self.assertEqual(cfg.recognizer.stabilizer.history_size, 15)

    def test_empty_file_uses_defaults(self):
        cfg = load_config(self._write_config(""))
        self.assertEqual(cfg.recognizer.stabilizer.debounce_frames, 8)

    def test_empty_section_uses_defaults(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "display:\n"
        )
        cfg = load_config(path)

        self.assertEqual(cfg.recognizer.stabilizer, StabilizerConfig())
        self.assertTrue(cfg.display.show_preview)

    def test_unknown_key_rejected(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    debounce_frame: 5\n"
        )
        with self.assertRaisesRegex(ValueError, "recognizer.stabilizer"):
            load_config(path)

    def test_debounce_time_and_frames_conflict(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    debounce_time_ms: 500\n"
            "    debounce_frames: 8\n"
        )
        with self.assertRaises(ValueError):
            load_config(path)

    def test_section_must_be_mapping(self):
        path = self._write_config("camera: 0\n")
        with self.assertRaisesRegex(ValueError, "camera"):
            load_config(path)

    def test_float_debounce_frames_rejected(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    debounce_frames: 8.0\n"
        )
        with self.assertRaises(ValueError):
            load_config(path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_invalid_values_rejected(self):
        path = self._write_config(
            "recognizer:\n"
            "  stabilizer:\n"
            "    debounce_frames: 12\n"
            "    history_size: 10\n"
        )
        with self.assertRaises(ValueError):
            load_config(path)


class TestConfigValidation(unittest.TestCase):
    """Test value object validation."""

    def test_history_must_fit_window(self):
        with self.assertRaises(ValueError):
            StabilizerConfig(debounce_frames=8, history_size=5)
        StabilizerConfig(debounce_frames=8, history_size=8)

    def test_window_sizes_must_be_integers(self):
        for kwargs in ({"debounce_frames": 8.0}, {"history_size": 10.0}, {"debounce_frames": True}):
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    StabilizerConfig(**kwargs)

    def test_confidence_threshold_range(self):
        for threshold in (0.0, -0.1, 1.5):
            with self.assertRaises(ValueError):
                StabilizerConfig(confidence_threshold=threshold)
        StabilizerConfig(confidence_threshold=1.0)

    def test_debounce_frames_positive(self):
        with self.assertRaises(ValueError):
            StabilizerConfig(debounce_frames=0)

    def test_sensitivity_positive(self):
        with self.assertRaises(ValueError):
            ClassifierConfig(sensitivity=0)

    def test_tracker_options(self):
        with self.assertRaises(ValueError):
            TrackerConfig(model_complexity=2)
        with self.assertRaises(ValueError):
            TrackerConfig(min_detection_confidence=1.2)

    def test_recovery_options(self):
        with self.assertRaises(ValueError):
            RecoveryConfig(max_retries=-1)

    def test_from_debounce_time(self):
        config = StabilizerConfig.from_debounce_time(264)
        self.assertEqual(config.debounce_frames, 8)
        self.assertEqual(config.history_size, 10)

        self.assertEqual(StabilizerConfig.from_debounce_time(10).debounce_frames, 1)

    def test_configs_are_immutable(self):
        config = StabilizerConfig()
        with self.assertRaises(AttributeError):
            config.debounce_frames = 3


if __name__ == '__main__':
    unittest.main()
