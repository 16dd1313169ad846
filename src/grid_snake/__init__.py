"""Grid Snake — frame-driven snake simulation core."""

from grid_snake.config import GameConfig
from grid_snake.controls import DirectionBuffer, SwipeTracker, TouchPhase
from grid_snake.engine import GameEngine, RoundState, SimulationState
from grid_snake.events import EntityKind, GameOverReason, NullListener, RenderListener
from grid_snake.food import FoodSpawner
from grid_snake.grid import Bounds, Viewport
from grid_snake.scheduler import TickScheduler
from grid_snake.snake import BodyChain, Direction

__all__ = [
    "BodyChain",
    "Bounds",
    "Direction",
    "DirectionBuffer",
    "EntityKind",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameOverReason",
    "NullListener",
    "RenderListener",
    "RoundState",
    "SimulationState",
    "SwipeTracker",
    "TickScheduler",
    "TouchPhase",
    "Viewport",
]
