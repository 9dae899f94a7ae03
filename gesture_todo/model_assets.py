"""
Model asset management for the MediaPipe Tasks hand landmarker.
"""
import logging
import os

import requests


logger = logging.getLogger(__name__)

HAND_LANDMARKER_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)


def ensure_hand_landmarker_task(model_path: str, url: str = HAND_LANDMARKER_TASK_URL,
                                timeout_s: int = 30) -> str:
    """
    Ensure `hand_landmarker.task` exists at `model_path`, downloading it if missing.

    Args:
        model_path: Where the model file should live
        url: Download location of the model
        timeout_s: HTTP timeout in seconds

    Returns:
        The model path
    """
    if os.path.exists(model_path):
        return model_path

    os.makedirs(os.path.dirname(model_path) or ".", exist_ok=True)
    logger.info(f"📥 Downloading hand landmarker model to {model_path}")

    try:
        response = requests.get(url, timeout=timeout_s)
        response.raise_for_status()
        with open(model_path, "wb") as f:
            f.write(response.content)
    except (requests.RequestException, OSError) as e:
        # Partial downloads would be picked up as a valid model next time
        if os.path.exists(model_path):
            os.remove(model_path)
        raise RuntimeError(
            "Missing MediaPipe Tasks model file and auto-download failed.\n"
            f"Expected model at: {model_path}\n"
            f"URL: {url}\n"
            "Download it manually:\n"
            f'  curl -L -o "{model_path}" "{url}"'
        ) from e

    return model_path
