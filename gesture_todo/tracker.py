"""
Hand landmark tracking using MediaPipe.
"""
import logging
from typing import Any, List, Optional

import cv2
import numpy as np

from .landmarks import NUM_LANDMARKS, palm_center
from .model_assets import ensure_hand_landmarker_task
from .types import HandPose, ResultCallback


logger = logging.getLogger(__name__)

# Tasks VIDEO mode needs monotonically increasing timestamps
TASKS_FRAME_STEP_MS = 33

HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # index
    (5, 9), (9, 10), (10, 11), (11, 12),     # middle
    (9, 13), (13, 14), (14, 15), (15, 16),   # ring
    (13, 17), (17, 18), (18, 19), (19, 20),  # pinky
    (0, 17),                                 # palm base
]


def landmarks_to_pose(landmarks) -> HandPose:
    """Convert MediaPipe landmark objects to (x, y, z) tuples."""
    return [(float(lm.x), float(lm.y), float(getattr(lm, "z", 0.0))) for lm in landmarks]


def _create_tasks_landmarker(model_path: str, max_num_hands: int,
                             min_detection_confidence: float, min_tracking_confidence: float):
    """
    Fallback for MediaPipe distributions that do not include `mp.solutions`.

    Uses the Tasks HandLandmarker API, which requires a `.task` model asset on disk.
    """
    from mediapipe.tasks.python import BaseOptions  # type: ignore
    from mediapipe.tasks.python.vision import HandLandmarker, HandLandmarkerOptions, RunningMode  # type: ignore

    options = HandLandmarkerOptions(
        base_options=BaseOptions(model_asset_path=ensure_hand_landmarker_task(model_path)),
        running_mode=RunningMode.VIDEO,
        num_hands=max_num_hands,
        min_hand_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    return HandLandmarker.create_from_options(options)


class MediaPipeHandTracker:
    """
    Hand landmark tracker using MediaPipe Hands.

    Input frames are expected as BGR images (OpenCV default). Results are
    delivered synchronously to the registered callback from within `send`.
    """

    def __init__(self, tasks_model_path: str = "models/hand_landmarker.task"):
        self.tasks_model_path = tasks_model_path
        self.max_num_hands = 1
        self._mp: Optional[Any] = None
        self._hands: Optional[Any] = None
        self._landmarker: Optional[Any] = None
        self._timestamp_ms = 0
        self._callback: Optional[ResultCallback] = None

    @property
    def is_configured(self) -> bool:
        return self._hands is not None or self._landmarker is not None

    def configure(self, max_num_hands: int = 1, model_complexity: int = 1,
                  min_detection_confidence: float = 0.5, min_tracking_confidence: float = 0.5) -> None:
        """
        Build the MediaPipe backend.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: Landmark model complexity (0 or 1)
            min_detection_confidence: Minimum confidence for hand detection
            min_tracking_confidence: Minimum confidence for hand tracking
        """
        import mediapipe as mp  # type: ignore

        self.close()
        self._mp = mp
        self.max_num_hands = max_num_hands

        if hasattr(mp, "solutions"):
            self._hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                max_num_hands=max_num_hands,
                model_complexity=model_complexity,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
            logger.info("MediaPipe Hands (solutions) backend ready")
        else:
            self._landmarker = _create_tasks_landmarker(
                self.tasks_model_path,
                max_num_hands,
                min_detection_confidence,
                min_tracking_confidence,
            )
            self._timestamp_ms = 0
            logger.info("MediaPipe HandLandmarker (tasks) backend ready")

    def on_result(self, callback: ResultCallback) -> None:
        self._callback = callback

    def send(self, frame_bgr: np.ndarray) -> None:
        """
        Process a frame and deliver the detected hand poses to the callback.

        Args:
            frame_bgr: Input frame in BGR format
        """
        if not self.is_configured:
            raise RuntimeError("Hand tracker is not configured")
        if not isinstance(frame_bgr, np.ndarray) or frame_bgr.ndim != 3 or frame_bgr.shape[2] != 3:
            raise ValueError("Expected a BGR frame of shape (height, width, 3)")

        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        poses = [
            pose for pose in (landmarks_to_pose(hand) for hand in self._detect(frame_rgb))
            if len(pose) == NUM_LANDMARKS
        ]

        if self._callback is not None:
            self._callback(poses[:self.max_num_hands])

    def _detect(self, frame_rgb: np.ndarray) -> List[Any]:
        if self._hands is not None:
            results = self._hands.process(frame_rgb)
            return [hand.landmark for hand in (results.multi_hand_landmarks or [])]

        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=frame_rgb)
        self._timestamp_ms += TASKS_FRAME_STEP_MS
        result = self._landmarker.detect_for_video(mp_image, self._timestamp_ms)
        return list(getattr(result, "hand_landmarks", None) or [])

    def close(self) -> None:
        if self._hands is not None:
            self._hands.close()
            self._hands = None
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None

    def __enter__(self) -> "MediaPipeHandTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def draw_landmarks(self, frame: np.ndarray, landmarks: HandPose) -> np.ndarray:
        """
        Draw hand landmarks on the frame.

        Args:
            frame: Input frame
            landmarks: List of (x, y, z) coordinates in [0..1] range

        Returns:
            Frame with landmarks drawn
        """
        height, width = frame.shape[:2]
        points = [(int(x * width), int(y * height)) for x, y, *_ in landmarks]

        for a, b in HAND_CONNECTIONS:
            if a < len(points) and b < len(points):
                cv2.line(frame, points[a], points[b], (0, 255, 255), 2, cv2.LINE_AA)
        for px, py in points:
            cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)

        if len(landmarks) == NUM_LANDMARKS:
            cx, cy = palm_center(landmarks)
            cv2.circle(frame, (int(cx * width), int(cy * height)), 8, (0, 0, 255), -1)

        return frame
