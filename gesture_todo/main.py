"""
Main application for hands-free todo control.
"""
import asyncio
import logging
import os
import sys
from typing import List, Optional

import cv2
from dotenv import load_dotenv

from .commands import GESTURE_ACTIONS, GestureDispatcher
from .config import load_config
from .controller_mock import MockController
from .errors import FrameProcessingError, GestureRecognitionError, InitializationError
from .recognizer import RecognizerSession
from .tracker import MediaPipeHandTracker
from .types import GestureLabel, TodoControllerProto


logger = logging.getLogger(__name__)


class GestureTodoApp:
    """Main application class: camera loop, gesture session and command dispatch."""

    def __init__(self, config_path: Optional[str] = None,
                 controller: Optional[TodoControllerProto] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.dispatcher = GestureDispatcher(controller or MockController())
        self.pending_gestures: List[GestureLabel] = []
        self.last_error: Optional[GestureRecognitionError] = None
        self.enabled = True
        self.manual_mode = False

        self.tracker = MediaPipeHandTracker(
            tasks_model_path=self.config.recognizer.tracker.tasks_model_path
        )
        self.session = RecognizerSession(
            self,
            self.config.recognizer,
            tracker_factory=lambda: self.tracker,
        )

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def on_gesture_detected(self, gesture: GestureLabel) -> None:
        self.pending_gestures.append(gesture)

    def on_error(self, error: Exception) -> None:
        self.last_error = error

    def fall_back_to_manual(self, reason: str) -> None:
        """Stop gesture processing; the user continues with mouse and keyboard."""
        self.manual_mode = True
        self.enabled = False
        self.dispatcher.enabled = False
        self.session.dispose()
        logger.warning(f"⚠️  Gesture control disabled ({reason}). Use mouse/keyboard instead.")

    async def run(self):
        """Run the main application loop."""
        print(f"Starting {self.config.display.window_name}")
        print("🎯 Gestures:")
        for gesture, action in GESTURE_ACTIONS.items():
            if action is not None:
                print(f"  {action.icon}  {gesture.value} = {action.description}")
        print("Press 'q' to quit")

        try:
            await self.session.initialize(self.cap)
        except InitializationError as e:
            self.fall_back_to_manual(f"initialization failed: {e}")
            self.close()
            return

        recovery = self.config.recognizer.recovery
        try:
            while self.enabled:
                ret, frame = self.cap.read()
                if not ret:
                    print("Failed to read frame from camera")
                    break

                try:
                    await self.session.process_frame(frame)
                except FrameProcessingError as e:
                    errors = self.session.consecutive_errors
                    if errors >= recovery.max_retries:
                        self.fall_back_to_manual(f"{errors} consecutive frame errors")
                        break
                    logger.warning(f"Frame processing failed, retrying ({errors}/{recovery.max_retries}): {e}")
                    await asyncio.sleep(recovery.retry_delay_ms / 1000.0)
                    continue

                while self.pending_gestures:
                    await self.dispatcher.dispatch(self.pending_gestures.pop(0))

                if not self.session.is_healthy():
                    self.fall_back_to_manual("recognizer unhealthy")
                    break

                if self.config.display.show_preview:
                    cv2.imshow(self.config.display.window_name, self._draw_status(frame))
                    # Check for quit key
                    if cv2.waitKey(1) & 0xFF == ord('q'):
                        break

                # Let other tasks run between frames
                await asyncio.sleep(0)
        finally:
            self.close()

    def _draw_status(self, frame):
        pose = self.session.last_pose
        if pose is not None and self.config.display.show_landmarks:
            frame = self.tracker.draw_landmarks(frame, pose)

        stats = self.session.get_stats()
        status_text = "No hand detected" if pose is None else f"Gesture: {stats.last_gesture.value}"
        confidence_text = f"Confidence: {stats.confidence:.2f}"
        action = self.dispatcher.last_action
        action_text = f"Last action: {action.description}" if action else ""

        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, confidence_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, action_text, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
        cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        return frame

    def close(self):
        """Cleanup resources."""
        self.session.dispose()
        if self.cap.isOpened():
            self.cap.release()
        if self.config.display.show_preview:
            cv2.destroyAllWindows()


def _config_path_from_args(argv: List[str]) -> Optional[str]:
    if "--config" in argv:
        i = argv.index("--config")
        if i + 1 < len(argv):
            return argv[i + 1]
    return os.getenv("GESTURE_TODO_CONFIG")


async def main(argv: Optional[List[str]] = None):
    """Entry point for the application."""
    argv = sys.argv[1:] if argv is None else argv
    app = None
    try:
        app = GestureTodoApp(config_path=_config_path_from_args(argv))
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
        if app is not None:
            app.close()
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        logger.error(f"❌ {e}")


def run():
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())


if __name__ == "__main__":
    run()
