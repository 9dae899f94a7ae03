"""
Hand landmark geometry used by the gesture classifier.

All coordinates are normalized to the frame ([0..1], y grows downward), so the
thresholds below are in normalized units rather than pixels.
"""
import math
from typing import Dict, Sequence, Tuple

from .types import FingerStates, HandPose


NUM_LANDMARKS = 21

WRIST = 0
THUMB_MCP = 2
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_MCP = 13
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20

THUMB_EXTENSION_RATIO = 1.2
THUMB_UP_MARGIN = 0.05
FINGER_UP_MARGIN = 0.1
FINGER_SPREAD_MIN = 0.05
PALM_OPEN_MIN = 0.15


def distance_2d(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two landmarks, ignoring z."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def finger_tips(landmarks: HandPose) -> Dict[str, Sequence[float]]:
    """Fingertip landmarks keyed by digit name."""
    return {
        'thumb': landmarks[THUMB_TIP],
        'index': landmarks[INDEX_TIP],
        'middle': landmarks[MIDDLE_TIP],
        'ring': landmarks[RING_TIP],
        'pinky': landmarks[PINKY_TIP],
    }


def finger_mcps(landmarks: HandPose) -> Dict[str, Sequence[float]]:
    """Knuckle (MCP) landmarks keyed by digit name."""
    return {
        'thumb': landmarks[THUMB_MCP],
        'index': landmarks[INDEX_MCP],
        'middle': landmarks[MIDDLE_MCP],
        'ring': landmarks[RING_MCP],
        'pinky': landmarks[PINKY_MCP],
    }


def is_finger_extended(tip: Sequence[float], mcp: Sequence[float]) -> bool:
    """
    Check if a non-thumb finger is extended.

    Args:
        tip: Fingertip landmark
        mcp: Knuckle landmark of the same finger

    Returns:
        True if the tip is higher on screen than the knuckle
    """
    return tip[1] < mcp[1]  # inverted y-axis


def is_thumb_extended(landmarks: HandPose) -> bool:
    """
    Check if the thumb is extended.

    The thumb extends sideways, so instead of comparing heights this compares
    how far the tip and the MCP joint are from the wrist.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        True if the tip is more than 1.2x as far from the wrist as the MCP
    """
    wrist = landmarks[WRIST]
    tip_distance = distance_2d(landmarks[THUMB_TIP], wrist)
    mcp_distance = distance_2d(landmarks[THUMB_MCP], wrist)
    return tip_distance > mcp_distance * THUMB_EXTENSION_RATIO


def is_thumb_pointing_up(landmarks: HandPose) -> bool:
    """True if the thumb tip sits clearly above the thumb MCP."""
    return landmarks[THUMB_TIP][1] < landmarks[THUMB_MCP][1] - THUMB_UP_MARGIN


def is_finger_pointing_up(tip: Sequence[float], wrist: Sequence[float]) -> bool:
    """True if the fingertip sits clearly above the wrist."""
    return tip[1] < wrist[1] - FINGER_UP_MARGIN


def are_fingers_spread(tip_a: Sequence[float], tip_b: Sequence[float]) -> bool:
    """True if two fingertips are far enough apart to count as spread."""
    return distance_2d(tip_a, tip_b) > FINGER_SPREAD_MIN


def is_palm_open(landmarks: HandPose, sensitivity: float = 1.0) -> bool:
    """
    Check if the palm is open.

    Args:
        landmarks: List of 21 hand landmarks
        sensitivity: Multiplier applied to the spread threshold

    Returns:
        True if the four fingertips are, on average, far enough from the wrist
    """
    wrist = landmarks[WRIST]
    tips = (landmarks[INDEX_TIP], landmarks[MIDDLE_TIP], landmarks[RING_TIP], landmarks[PINKY_TIP])
    avg_distance = sum(distance_2d(tip, wrist) for tip in tips) / len(tips)
    return avg_distance > PALM_OPEN_MIN * sensitivity


def finger_states(landmarks: HandPose) -> FingerStates:
    """
    Compute the extension state of all five digits.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        FingerStates with one flag per digit
    """
    tips = finger_tips(landmarks)
    mcps = finger_mcps(landmarks)
    return FingerStates(
        thumb=is_thumb_extended(landmarks),
        index=is_finger_extended(tips['index'], mcps['index']),
        middle=is_finger_extended(tips['middle'], mcps['middle']),
        ring=is_finger_extended(tips['ring'], mcps['ring']),
        pinky=is_finger_extended(tips['pinky'], mcps['pinky']),
    )


def palm_center(landmarks: HandPose) -> Tuple[float, float]:
    """
    Calculate the center of the palm.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        (x, y) coordinates of palm center in [0..1] range
    """
    # wrist plus the four finger knuckles
    palm_indices = [WRIST, INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP]

    x_sum = sum(landmarks[i][0] for i in palm_indices)
    y_sum = sum(landmarks[i][1] for i in palm_indices)

    return (x_sum / len(palm_indices), y_sum / len(palm_indices))
