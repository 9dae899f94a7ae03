"""
Recognizer session: drives the hand tracker and turns its results into gesture events.
"""
import inspect
import logging
from typing import Any, Callable, List, Optional

from .config import RecognizerConfig
from .errors import (
    FrameProcessingError,
    GenericRecognitionError,
    GestureRecognitionError,
    InitializationError,
)
from .gestures import GestureStabilizer, classify_gesture
from .types import (
    ErrorListener,
    ErrorStats,
    GestureListener,
    HandPose,
    HandTrackerProto,
    RecognizerStats,
    SessionState,
)


logger = logging.getLogger(__name__)

TrackerFactory = Callable[[], HandTrackerProto]


class RecognizerSession:
    """
    Owns one hand tracker and feeds its per-frame results through the
    classifier and stabilizer.

    Lifecycle: UNINITIALIZED -> INITIALIZING -> READY -> DISPOSED. A disposed
    session cannot be reused; construct a new one instead.
    """

    def __init__(self, listener: GestureListener, config: RecognizerConfig = RecognizerConfig(),
                 tracker_factory: Optional[TrackerFactory] = None):
        """
        Initialize the session.

        Args:
            listener: Receives emitted gestures; errors too if it implements on_error
            config: Recognizer configuration
            tracker_factory: Builds the hand tracker. Defaults to MediaPipe Hands
        """
        self.listener = listener
        self.config = config
        self.stabilizer = GestureStabilizer(config.stabilizer)
        self._tracker_factory = tracker_factory or self._default_tracker_factory
        self._tracker: Optional[HandTrackerProto] = None
        self._video_source: Optional[Any] = None
        self._state = SessionState.UNINITIALIZED

        self.consecutive_errors = 0
        self.retry_count = 0
        self._frame_failed = False

        # First hand of the most recent frame, for overlays
        self.last_pose: Optional[HandPose] = None

    def _default_tracker_factory(self) -> HandTrackerProto:
        from .tracker import MediaPipeHandTracker

        return MediaPipeHandTracker(tasks_model_path=self.config.tracker.tasks_model_path)

    @property
    def state(self) -> SessionState:
        return self._state

    async def initialize(self, video_source: Optional[Any] = None) -> None:
        """
        Create and configure the hand tracker.

        Args:
            video_source: Optional frame source with a `read()` method, used when
                process_frame is called without a frame
        """
        if self._state is not SessionState.UNINITIALIZED:
            raise self._report(InitializationError(
                f"Cannot initialize a session in state '{self._state.value}'"
            ))

        self._state = SessionState.INITIALIZING
        tracker: Optional[HandTrackerProto] = None
        try:
            tracker = self._tracker_factory()
            tracker.configure(
                max_num_hands=1,
                model_complexity=self.config.tracker.model_complexity,
                min_detection_confidence=self.config.tracker.min_detection_confidence,
                min_tracking_confidence=self.config.tracker.min_tracking_confidence,
            )
            tracker.on_result(self._on_results)
        except Exception as e:
            self._state = SessionState.UNINITIALIZED
            if tracker is not None:
                self._close_tracker(tracker)
            logger.error(f"Failed to initialize GestureRecognizer: {e}")
            raise self._report(InitializationError(f"Failed to initialize hand tracker: {e}", e)) from e

        self._tracker = tracker
        self._video_source = video_source
        self._state = SessionState.READY
        logger.info("GestureRecognizer initialized successfully")

    async def process_frame(self, frame: Optional[Any] = None) -> None:
        """
        Send one frame to the hand tracker.

        Args:
            frame: The frame to process. If None, a frame is read from the video source

        Raises:
            FrameProcessingError: If the session is not ready or the tracker fails
        """
        if self.consecutive_errors > 0:
            self.retry_count += 1

        if self._state is not SessionState.READY:
            self.consecutive_errors += 1
            raise self._report(FrameProcessingError("GestureRecognizer not initialized"))

        self._frame_failed = False
        try:
            if frame is None:
                frame = self._read_frame()
            pending = self._tracker.send(frame)
            if inspect.isawaitable(pending):
                await pending
        except Exception as e:
            self.consecutive_errors += 1
            logger.error(f"Error processing frame: {e}")
            raise self._report(FrameProcessingError(f"Error processing frame: {e}", e)) from e

        if not self._frame_failed:
            self.consecutive_errors = 0

    def _read_frame(self) -> Any:
        source = self._video_source
        if source is None or not hasattr(source, "read"):
            raise ValueError("No frame given and no readable video source")
        ok, frame = source.read()
        if not ok:
            raise RuntimeError("Failed to read frame from video source")
        return frame

    def _on_results(self, poses: List[HandPose]) -> None:
        """
        Classify the first hand and feed the label to the stabilizer.

        A failure here counts as a consecutive error. If it happens in the
        listener, the frame has already been observed and stays in the history.
        """
        # A frame still in flight when the session was disposed
        if self._state is not SessionState.READY:
            logger.debug("Ignoring tracker result for an inactive session")
            return

        try:
            pose = poses[0] if poses else None
            self.last_pose = pose
            label = classify_gesture(pose, self.config.classifier)
            gesture = self.stabilizer.observe(label)
            if gesture is not None:
                logger.info(f"Gesture detected: {gesture.value}")
                self.listener.on_gesture_detected(gesture)
        except Exception as e:
            self._frame_failed = True
            self.consecutive_errors += 1
            logger.error(f"Gesture recognition failed: {e}")
            self._report(GenericRecognitionError(f"Gesture recognition failed: {e}", e))

    def _report(self, error: GestureRecognitionError) -> GestureRecognitionError:
        """Forward an error to the listener if it accepts errors, and return it."""
        if isinstance(self.listener, ErrorListener):
            try:
                self.listener.on_error(error)
            except Exception as e:
                logger.warning(f"Error listener raised: {e}")
        return error

    def dispose(self) -> None:
        """Release the tracker and reset the stabilizer. Safe to call more than once."""
        if self._state is SessionState.DISPOSED:
            return

        tracker, self._tracker = self._tracker, None
        self._video_source = None
        self.last_pose = None
        self._state = SessionState.DISPOSED
        self.stabilizer.reset()
        if tracker is not None:
            self._close_tracker(tracker)
        logger.info("GestureRecognizer disposed")

    @staticmethod
    def _close_tracker(tracker: HandTrackerProto) -> None:
        try:
            tracker.close()
        except Exception as e:
            logger.warning(f"Error closing hand tracker: {e}")

    async def __aenter__(self) -> "RecognizerSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def is_healthy(self) -> bool:
        return (self._state is SessionState.READY
                and self.consecutive_errors < self.config.recovery.max_retries)

    def get_stats(self) -> RecognizerStats:
        return self.stabilizer.stats()

    def get_error_stats(self) -> ErrorStats:
        return ErrorStats(
            max_retries=self.config.recovery.max_retries,
            consecutive_errors=self.consecutive_errors,
            retry_count=self.retry_count,
        )
