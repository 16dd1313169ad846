"""Frame-driven game engine composing bounds, body chain, input and food logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.controls import DirectionBuffer, SwipeTracker, TouchPhase
from grid_snake.events import EntityKind, GameOverReason, NullListener, RenderListener
from grid_snake.food import FoodSpawner
from grid_snake.grid import Bounds, Cell, Viewport
from grid_snake.scheduler import TickScheduler
from grid_snake.snake import BodyChain, Direction

logger = logging.getLogger(__name__)

# Where the head sits when a round starts.
_START_CELL: Cell = (0, 0)


class RoundState(enum.Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class SimulationState:
    """Everything that changes during one round."""

    bounds: Bounds
    chain: BodyChain
    direction: Direction = Direction.UP
    food: Cell | None = None
    round_state: RoundState = RoundState.RUNNING
    reason: GameOverReason | None = None
    score: int = 0
    tick: int = 0

    @property
    def running(self) -> bool:
        return self.round_state is RoundState.RUNNING


class GameEngine:
    """Single-snake engine for one round.

    Constructing the engine starts the round: bounds are read from the
    viewport once, the starting tail is laid under the head and the first
    food is placed. The host then calls :meth:`update` once per frame with
    the elapsed time. Every frame applies touch input and checks the head
    against the current viewport bounds; every ``movement_interval`` seconds
    a movement tick (:meth:`step`) moves the snake and checks self-collision
    and food.

    After game over no further ticks run. Once ``restart_delay`` seconds of
    frames have passed, ``on_restart`` is called so the host can build a
    fresh engine.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        viewport: Viewport | None = None,
        listener: RenderListener | None = None,
        on_restart: Callable[[], None] | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.viewport = viewport if viewport is not None else Viewport()
        self.listener = listener if listener is not None else NullListener()
        self.on_restart = on_restart

        self.rng = np.random.default_rng(self.config.seed)
        self.food_spawner = FoodSpawner(rng=self.rng)
        self.buffer = DirectionBuffer()
        self.swipe = SwipeTracker(self.config.swipe_threshold)
        self.movement = TickScheduler(self.config.movement_interval)
        self.restart_timer = TickScheduler(self.config.restart_delay)

        bounds = Bounds.from_viewport(self.viewport, self.config.screen_zoom)
        self.state = SimulationState(
            bounds=bounds,
            chain=BodyChain(_START_CELL),
            direction=Direction.UP,
        )
        self._frame_bounds = bounds

        self.listener.on_spawn(EntityKind.HEAD, self.state.chain.head)
        for _ in range(self.config.starting_tail_length):
            cell = self.state.chain.grow()
            self.listener.on_spawn(EntityKind.TAIL, cell)
        self._spawn_food()

        self.movement.start()
        logger.debug(
            "Round started with bounds %dx%d and %d tail segment(s).",
            bounds.half_width, bounds.half_height,
            self.config.starting_tail_length,
        )

    @property
    def game_over(self) -> bool:
        return not self.state.running

    # --- input ---

    def press_direction(self, direction: Direction) -> None:
        """Buffer a key-press direction for the next movement tick."""
        self.buffer.set_input_direction(direction)

    def touch(self, phase: TouchPhase, position: tuple[float, float]) -> None:
        """Record a touch/drag sample."""
        self.swipe.touch(phase, position)

    # --- cadences ---

    def update(self, delta_time: float, viewport: Viewport | None = None) -> bool:
        """Run one frame. Returns True if a movement tick ran during it.

        A new *viewport* must still give bounds of at least one cell each way
        at the configured zoom; otherwise ``ValueError`` is raised before the
        frame runs and the previous viewport stays in effect.
        """
        if viewport is not None and viewport != self.viewport:
            self._frame_bounds = Bounds.from_viewport(
                viewport, self.config.screen_zoom,
            )
            self.viewport = viewport

        if not self.state.running:
            if self.restart_timer.tick(delta_time):
                self._request_restart()
            return False

        swiped = self.swipe.candidate()
        if swiped is not None:
            self.buffer.set_input_direction(swiped)

        stepped = False
        if self.movement.tick(delta_time):
            self.step()
            stepped = True

        self._check_bounds()
        return stepped

    def step(self) -> dict:
        """Advance the snake by one movement tick.

        Returns the full game state as a serializable dict.
        """
        state = self.state
        if not state.running:
            return self.get_state()

        state.direction = self.buffer.resolve(state.direction)
        new_head = state.direction.apply(state.chain.head)
        state.chain.advance(new_head)
        self.swipe.rebase()
        state.tick += 1

        if state.chain.self_collision():
            self.end_round(GameOverReason.SELF_COLLISION)
            return self.get_state()

        if state.food is not None and new_head == state.food:
            self._eat_food()

        self.movement.start()
        return self.get_state()

    # --- transitions ---

    def end_round(self, reason: GameOverReason) -> None:
        """Move to game over. Later calls have no effect."""
        state = self.state
        if not state.running:
            return
        state.round_state = RoundState.GAME_OVER
        state.reason = reason
        self.movement.cancel()
        self.restart_timer.start()
        self.listener.on_game_over(reason)
        logger.info(
            "Round over (%s) at tick %d with score %d.",
            reason.value, state.tick, state.score,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        state = self.state
        return {
            "tick": state.tick,
            "score": state.score,
            "state": state.round_state.value,
            "reason": state.reason.value if state.reason is not None else None,
            "direction": state.direction.name.lower(),
            "bounds": state.bounds.to_dict(),
            "snake": state.chain.to_dict(),
            "food": list(state.food) if state.food is not None else None,
        }

    def _check_bounds(self) -> None:
        if not self._frame_bounds.contains(self.state.chain.head):
            self.end_round(GameOverReason.OUT_OF_BOUNDS)

    def _eat_food(self) -> None:
        state = self.state
        eaten = state.food
        state.food = None
        self.listener.on_remove(EntityKind.FOOD, eaten)

        cell = state.chain.grow()
        self.listener.on_spawn(EntityKind.TAIL, cell)
        state.score += 1
        self._spawn_food()

    def _spawn_food(self) -> None:
        state = self.state
        state.food = self.food_spawner.spawn(state.bounds, state.chain.cells)
        if state.food is not None:
            self.listener.on_spawn(EntityKind.FOOD, state.food)

    def _request_restart(self) -> None:
        logger.info("Restart delay elapsed; requesting a new round.")
        if self.on_restart is not None:
            self.on_restart()
