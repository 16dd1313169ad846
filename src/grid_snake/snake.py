"""Movement directions and the follow-the-leader body chain."""

from __future__ import annotations

import enum

from grid_snake.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values; y grows upward."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    DOWN = (0, -1)
    UP = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def apply(self, cell: Cell) -> Cell:
        """Return the neighbouring cell one unit in this direction."""
        dx, dy = self.value
        return cell[0] + dx, cell[1] + dy


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class BodyChain:
    """Ordered cells occupied by the snake.

    The head is ``cells[0]``; the tail is ``cells[-1]``. Segments never move
    on their own: each advance hands every segment the cell its predecessor
    held before the move.
    """

    def __init__(self, head: Cell = (0, 0)) -> None:
        self.cells: list[Cell] = [head]

    @classmethod
    def from_cells(cls, cells: list[Cell]) -> BodyChain:
        """Build a chain from explicit cells, head first."""
        if not cells:
            raise ValueError("A body chain needs at least a head cell.")
        chain = cls(cells[0])
        chain.cells.extend(cells[1:])
        return chain

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def head(self) -> Cell:
        """Return the head coordinate."""
        return self.cells[0]

    @property
    def tail(self) -> Cell:
        return self.cells[-1]

    @property
    def segments(self) -> list[Cell]:
        """Cells behind the head."""
        return self.cells[1:]

    def advance(self, new_head: Cell) -> None:
        """Shift every segment onto its predecessor, then place the head."""
        for i in range(len(self.cells) - 1, 0, -1):
            self.cells[i] = self.cells[i - 1]
        self.cells[0] = new_head

    def grow(self) -> Cell:
        """Append a segment under the current tail and return its cell."""
        tail = self.cells[-1]
        self.cells.append(tail)
        return tail

    def occupies(self, cell: Cell) -> bool:
        """Check whether the chain occupies a given cell."""
        return cell in self.cells

    def self_collision(self) -> bool:
        """Check whether the head overlaps any other segment."""
        head = self.head
        return any(seg == head for seg in self.cells[1:])

    def to_dict(self) -> dict:
        """Serialize chain state to a dictionary."""
        return {
            "head": list(self.head),
            "segments": [list(seg) for seg in self.segments],
            "length": len(self.cells),
        }
