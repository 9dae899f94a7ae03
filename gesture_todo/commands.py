"""
Gesture to todo-command dispatch.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Literal, Optional

from .types import GestureLabel, TodoControllerProto


logger = logging.getLogger(__name__)

ActionType = Literal["add", "complete", "delete", "navigate", "cancel"]


@dataclass(frozen=True)
class GestureAction:
    """A todo command bound to a gesture."""
    type: ActionType
    description: str
    icon: str


GESTURE_ACTIONS: Dict[GestureLabel, Optional[GestureAction]] = {
    GestureLabel.THUMBS_UP: GestureAction("add", "Add a new task", "👍"),
    GestureLabel.PEACE_SIGN: GestureAction("complete", "Complete the selected task", "✌️"),
    GestureLabel.FIST: GestureAction("delete", "Delete the selected task", "✊"),
    GestureLabel.POINT_UP: GestureAction("navigate", "Move selection up", "☝️"),
    GestureLabel.TWO_FINGERS: GestureAction("navigate", "Move selection down", "✌️"),
    GestureLabel.OPEN_PALM: GestureAction("cancel", "Cancel the current operation", "✋"),
    GestureLabel.NONE: None,
}


class GestureDispatcher:
    """
    Executes the todo command bound to each emitted gesture.

    Gestures that arrive while a previous command is still running, or while
    the dispatcher is disabled, are dropped.
    """

    def __init__(self, controller: TodoControllerProto):
        self.controller = controller
        self.enabled = True
        self.is_processing = False
        self.last_action: Optional[GestureAction] = None

    async def dispatch(self, gesture: GestureLabel) -> Optional[GestureAction]:
        """
        Run the command for a gesture.

        Args:
            gesture: The emitted gesture

        Returns:
            The action that was executed, or None if nothing ran
        """
        if not self.enabled or self.is_processing:
            return None

        action = GESTURE_ACTIONS.get(gesture)
        if action is None:
            return None

        self.is_processing = True
        try:
            if action.type == "add":
                await self.controller.add_task()
            elif action.type == "complete":
                await self.controller.complete_selected()
            elif action.type == "delete":
                await self.controller.delete_selected()
            elif action.type == "navigate":
                direction = "up" if gesture == GestureLabel.POINT_UP else "down"
                await self.controller.move_selection(direction)
            elif action.type == "cancel":
                await self.controller.cancel()
        except Exception as e:
            logger.error(f"Gesture action '{action.type}' failed: {e}")
            return None
        finally:
            self.is_processing = False

        self.last_action = action
        logger.info(f"{action.icon} {action.description}")
        return action
