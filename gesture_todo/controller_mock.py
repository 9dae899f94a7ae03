"""
Mock controller implementation for testing gesture commands.
"""
from typing import Literal


class MockController:
    """Mock controller that prints todo actions instead of executing them."""

    def __init__(self):
        """Initialize the mock controller."""
        self.add_count = 0
        self.complete_count = 0
        self.delete_count = 0
        self.cancel_count = 0
        self.moves = []

    async def add_task(self) -> None:
        self.add_count += 1
        print(f"[MockController] Add task (call #{self.add_count})")

    async def complete_selected(self) -> None:
        self.complete_count += 1
        print(f"[MockController] Complete selected task (call #{self.complete_count})")

    async def delete_selected(self) -> None:
        self.delete_count += 1
        print(f"[MockController] Delete selected task (call #{self.delete_count})")

    async def move_selection(self, direction: Literal["up", "down"]) -> None:
        self.moves.append(direction)
        print(f"[MockController] Move selection: direction={direction} (call #{len(self.moves)})")

    async def cancel(self) -> None:
        self.cancel_count += 1
        print(f"[MockController] Cancel (call #{self.cancel_count})")

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.add_count = 0
        self.complete_count = 0
        self.delete_count = 0
        self.cancel_count = 0
        self.moves = []
