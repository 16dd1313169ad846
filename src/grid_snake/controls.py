"""Input buffering: keyboard directions, swipe gestures and reversal guard."""

from __future__ import annotations

import enum
import logging

from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


class TouchPhase(enum.Enum):
    """Phase of a touch sample delivered by the input collaborator."""

    BEGAN = "began"
    MOVED = "moved"
    ENDED = "ended"


class DirectionBuffer:
    """Holds the most recent input candidate until the next tick.

    Only the last input before a tick counts. A candidate that would reverse
    the snake onto itself is dropped when the tick resolves it against the
    direction the snake is currently moving in.
    """

    def __init__(self) -> None:
        self._candidate: Direction | None = None

    @property
    def pending(self) -> Direction | None:
        return self._candidate

    def set_input_direction(self, direction: Direction) -> None:
        """Record a candidate direction, overwriting any earlier one."""
        if not isinstance(direction, Direction):
            logger.debug("Ignoring invalid direction input %r.", direction)
            return
        self._candidate = direction

    def resolve(self, current: Direction) -> Direction:
        """Return the direction for this tick and clear the candidate."""
        candidate = self._candidate
        self._candidate = None

        if candidate is None or candidate is current.opposite:
            return current
        return candidate


class SwipeTracker:
    """Turns touch/drag samples into a direction candidate.

    A drag counts on an axis once its displacement exceeds *threshold*. The
    horizontal axis is evaluated first, so a drag past the threshold on both
    axes yields the vertical direction.
    """

    def __init__(self, threshold: float = 100.0) -> None:
        if threshold <= 0:
            raise ValueError("Swipe threshold must be positive.")
        self.threshold = threshold
        self.start: tuple[float, float] = (0.0, 0.0)
        self.end: tuple[float, float] = (0.0, 0.0)

    def touch(self, phase: TouchPhase, position: tuple[float, float]) -> None:
        """Record one touch sample."""
        pos = (float(position[0]), float(position[1]))
        if phase is TouchPhase.BEGAN:
            self.start = pos
            self.end = pos
        else:
            self.end = pos

    def candidate(self) -> Direction | None:
        """Return the direction signalled by the current drag, if any."""
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        direction: Direction | None = None

        if abs(dx) > self.threshold:
            direction = Direction.LEFT if dx < 0 else Direction.RIGHT
        if abs(dy) > self.threshold:
            direction = Direction.DOWN if dy < 0 else Direction.UP
        return direction

    def rebase(self) -> None:
        """Restart the drag from its current end point.

        Called after every movement tick so a held finger can keep steering
        without lifting.
        """
        self.start = self.end
