"""Notifications sent from the simulation to a render/placement host."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from grid_snake.grid import Cell


class EntityKind(enum.Enum):
    """Kinds of placed entity a renderer has to manage."""

    HEAD = "head"
    TAIL = "tail"
    FOOD = "food"


class GameOverReason(enum.Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    SELF_COLLISION = "self_collision"


class RenderListener(Protocol):
    def on_spawn(self, kind: EntityKind, cell: Cell) -> None: ...
    def on_remove(self, kind: EntityKind, cell: Cell) -> None: ...
    def on_game_over(self, reason: GameOverReason) -> None: ...


class NullListener:
    """Listener that ignores every event."""

    def on_spawn(self, kind: EntityKind, cell: Cell) -> None:
        pass

    def on_remove(self, kind: EntityKind, cell: Cell) -> None:
        pass

    def on_game_over(self, reason: GameOverReason) -> None:
        pass
