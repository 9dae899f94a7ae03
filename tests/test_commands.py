"""
Test cases for gesture to todo-command dispatch.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_todo.commands import GESTURE_ACTIONS, GestureDispatcher
from gesture_todo.controller_mock import MockController
from gesture_todo.types import GestureLabel, TodoControllerProto


class FailingController(MockController):
    async def delete_selected(self) -> None:
        raise RuntimeError("store unavailable")


class TestGestureActions(unittest.TestCase):
    """Test the gesture action table."""

    def test_every_label_has_an_entry(self):
        self.assertEqual(set(GESTURE_ACTIONS), set(GestureLabel))
        self.assertIsNone(GESTURE_ACTIONS[GestureLabel.NONE])

    def test_action_types(self):
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.THUMBS_UP].type, "add")
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.PEACE_SIGN].type, "complete")
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.FIST].type, "delete")
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.POINT_UP].type, "navigate")
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.TWO_FINGERS].type, "navigate")
        self.assertEqual(GESTURE_ACTIONS[GestureLabel.OPEN_PALM].type, "cancel")


class TestGestureDispatcher(unittest.IsolatedAsyncioTestCase):
    """Test that gestures reach the right controller calls."""

    def setUp(self):
        self.controller = MockController()
        self.dispatcher = GestureDispatcher(self.controller)

    def test_mock_controller_implements_protocol(self):
        self.assertIsInstance(self.controller, TodoControllerProto)

    async def test_dispatch_each_gesture(self):
        await self.dispatcher.dispatch(GestureLabel.THUMBS_UP)
        await self.dispatcher.dispatch(GestureLabel.PEACE_SIGN)
        await self.dispatcher.dispatch(GestureLabel.FIST)
        await self.dispatcher.dispatch(GestureLabel.POINT_UP)
        await self.dispatcher.dispatch(GestureLabel.TWO_FINGERS)
        await self.dispatcher.dispatch(GestureLabel.OPEN_PALM)

        self.assertEqual(self.controller.add_count, 1)
        self.assertEqual(self.controller.complete_count, 1)
        self.assertEqual(self.controller.delete_count, 1)
        self.assertEqual(self.controller.moves, ["up", "down"])
        self.assertEqual(self.controller.cancel_count, 1)
        self.assertEqual(self.dispatcher.last_action, GESTURE_ACTIONS[GestureLabel.OPEN_PALM])

    async def test_none_does_nothing(self):
        self.assertIsNone(await self.dispatcher.dispatch(GestureLabel.NONE))
        self.assertIsNone(self.dispatcher.last_action)

    async def test_disabled_dispatcher_ignores_gestures(self):
        self.dispatcher.enabled = False
        self.assertIsNone(await self.dispatcher.dispatch(GestureLabel.THUMBS_UP))
        self.assertEqual(self.controller.add_count, 0)

    async def test_busy_dispatcher_ignores_gestures(self):
        self.dispatcher.is_processing = True
        self.assertIsNone(await self.dispatcher.dispatch(GestureLabel.FIST))
        self.assertEqual(self.controller.delete_count, 0)

    async def test_controller_failure_is_logged(self):
        dispatcher = GestureDispatcher(FailingController())

        with self.assertLogs("gesture_todo.commands", level="ERROR"):
            result = await dispatcher.dispatch(GestureLabel.FIST)

        self.assertIsNone(result)
        self.assertFalse(dispatcher.is_processing)

    async def test_reset_counters(self):
        await self.dispatcher.dispatch(GestureLabel.POINT_UP)
        self.controller.reset_counters()
        self.assertEqual(self.controller.moves, [])


if __name__ == '__main__':
    unittest.main()
