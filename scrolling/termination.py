"""
ScrollHarvest Termination Policy
Decides after every round whether the scroll loop keeps going.
"""

from enum import Enum
from typing import Optional


class PolicyState(Enum):
    RUNNING = "running"
    DONE = "done"


class StopReason(Enum):
    TARGET_REACHED = "target_reached"
    MAX_ROUNDS = "max_rounds"
    STALLED = "stalled"


class TerminationPolicy:
    """
    Round/stall/count state machine.

    The loop stops when the item count reaches the target, when the scroll
    extent fails to grow for `stall_rounds` consecutive rounds, or when
    `max_rounds` rounds have run. DONE is terminal.
    """

    def __init__(self, target_count: int = 30, max_rounds: int = 50, stall_rounds: int = 3):
        if stall_rounds < 1:
            raise ValueError("stall_rounds must be at least 1")
        self.target_count = target_count
        self.max_rounds = max_rounds
        self.stall_rounds = stall_rounds

        self.state = PolicyState.RUNNING
        self.stop_reason: Optional[StopReason] = None
        self.rounds_completed = 0
        self.stall_count = 0
        self.last_extent = 0

    @property
    def done(self) -> bool:
        return self.state is PolicyState.DONE

    def begin(self, initial_extent: int):
        """Record the extent measured before the first round."""
        self.last_extent = initial_extent
        if self.max_rounds <= 0:
            self._finish(StopReason.MAX_ROUNDS)

    def observe(self, item_count: Optional[int], extent: Optional[int]) -> PolicyState:
        """
        Evaluate one finished round.

        Args:
            item_count: Accumulated (or visible) item count, None if unknown
            extent: Scrollable content height of the root, None if unreadable

        Returns:
            State after this round
        """
        if self.done:
            return self.state

        self.rounds_completed += 1

        if item_count is not None and item_count >= self.target_count:
            self._finish(StopReason.TARGET_REACHED)
            return self.state

        if extent is None or extent <= self.last_extent:
            self.stall_count += 1
            if self.stall_count >= self.stall_rounds:
                self._finish(StopReason.STALLED)
                return self.state
        else:
            self.stall_count = 0
            self.last_extent = extent

        if self.rounds_completed >= self.max_rounds:
            self._finish(StopReason.MAX_ROUNDS)

        return self.state

    def _finish(self, reason: StopReason):
        self.state = PolicyState.DONE
        self.stop_reason = reason
