"""
Gesture classification and temporal stabilization.

The classifier maps a single frame's landmarks to a label; the stabilizer turns
the noisy per-frame label stream into debounced gesture events.
"""
from typing import List, Optional

from .config import ClassifierConfig, StabilizerConfig
from .landmarks import (
    NUM_LANDMARKS,
    WRIST,
    are_fingers_spread,
    finger_states,
    finger_tips,
    is_finger_pointing_up,
    is_palm_open,
    is_thumb_pointing_up,
)
from .types import GestureLabel, HandPose, RecognizerStats


CONFIDENCE_STEP = 0.1


def classify_gesture(landmarks: Optional[HandPose],
                     config: ClassifierConfig = ClassifierConfig()) -> GestureLabel:
    """
    Classify one frame's hand pose.

    Exact finger-subset matches (thumbs up, peace sign, point up, two fingers)
    are checked before the count-based fist and open palm rules.

    Args:
        landmarks: 21 hand landmarks, or None if no hand was detected
        config: Classifier configuration

    Returns:
        The gesture label; NONE for missing or partial input
    """
    if landmarks is None or len(landmarks) < NUM_LANDMARKS:
        return GestureLabel.NONE

    fingers = finger_states(landmarks)
    tips = finger_tips(landmarks)
    others_folded = not (fingers.middle or fingers.ring or fingers.pinky)
    index_middle_only = (
        not fingers.thumb and fingers.index and fingers.middle
        and not fingers.ring and not fingers.pinky
    )

    if fingers.thumb and not fingers.index and others_folded:
        if is_thumb_pointing_up(landmarks):
            return GestureLabel.THUMBS_UP

    if index_middle_only and are_fingers_spread(tips['index'], tips['middle']):
        return GestureLabel.PEACE_SIGN

    if not fingers.thumb and fingers.index and others_folded:
        if is_finger_pointing_up(tips['index'], landmarks[WRIST]):
            return GestureLabel.POINT_UP

    if index_middle_only and not are_fingers_spread(tips['index'], tips['middle']):
        return GestureLabel.TWO_FINGERS

    if fingers.extended_count <= 1:
        return GestureLabel.FIST

    if fingers.extended_count >= 4 and is_palm_open(landmarks, config.sensitivity):
        return GestureLabel.OPEN_PALM

    return GestureLabel.NONE


class GestureHistory:
    """
    Fixed-capacity ring buffer of per-frame labels.

    Slots are allocated once; pushing past capacity overwrites the oldest entry.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._slots: List[GestureLabel] = [GestureLabel.NONE] * capacity
        self._start = 0
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._length

    def push(self, label: GestureLabel) -> None:
        """Append a label, evicting the oldest one when full."""
        capacity = len(self._slots)
        if self._length < capacity:
            self._slots[(self._start + self._length) % capacity] = label
            self._length += 1
        else:
            self._slots[self._start] = label
            self._start = (self._start + 1) % capacity

    def recent(self, n: int) -> List[GestureLabel]:
        """The most recent n labels (fewer if the history is shorter), oldest first."""
        n = max(0, min(n, self._length))
        capacity = len(self._slots)
        first = self._start + self._length - n
        return [self._slots[(first + i) % capacity] for i in range(n)]

    def count_recent(self, label: GestureLabel, n: int) -> int:
        """How many of the most recent n labels equal the given label."""
        return sum(1 for entry in self.recent(n) if entry == label)

    def clear(self) -> None:
        self._start = 0
        self._length = 0


class GestureStabilizer:
    """
    Converts per-frame labels into debounced gesture events.

    Features:
    - Rolling window voting over the last debounce_frames labels
    - Confidence that grows by a fixed step but never exceeds window agreement
    - Emission at most once per debounce window, never for NONE
    - Confidence reset after each emission so held gestures must re-stabilize
    """

    def __init__(self, config: StabilizerConfig = StabilizerConfig()):
        """Initialize stabilizer with configuration."""
        self.config = config
        self.history = GestureHistory(config.history_size)
        self.last_gesture = GestureLabel.NONE
        self.confidence = 0.0
        self.frame_count = 0

    def observe(self, label: GestureLabel) -> Optional[GestureLabel]:
        """
        Record one frame's label and decide whether to emit.

        Must be called once per processed frame, including NONE frames.

        Args:
            label: Classifier output for the frame

        Returns:
            The emitted gesture, or None if this frame produced no event
        """
        self.frame_count += 1
        self.history.push(label)

        window_size = min(self.config.debounce_frames, len(self.history))
        window_confidence = self.history.count_recent(label, window_size) / window_size

        if label == self.last_gesture:
            self.confidence = min(self.confidence + CONFIDENCE_STEP, window_confidence)
        else:
            self.confidence = window_confidence
            self.last_gesture = label

        if (self.confidence >= self.config.confidence_threshold
                and self.frame_count % self.config.debounce_frames == 0
                and label != GestureLabel.NONE):
            self.confidence = 0.0
            return label

        return None

    def reset(self) -> None:
        """Restore the initial state."""
        self.history.clear()
        self.last_gesture = GestureLabel.NONE
        self.confidence = 0.0
        self.frame_count = 0

    def stats(self) -> RecognizerStats:
        return RecognizerStats(
            last_gesture=self.last_gesture,
            confidence=self.confidence,
            frame_count=self.frame_count,
            history_length=len(self.history),
        )
