"""Headless frame driver and throughput benchmark."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine
from grid_snake.grid import Viewport
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class RunResult:
    """Outcome of one headless round."""

    frames: int
    ticks: int
    score: int
    length: int
    game_over: bool
    reason: str | None
    state: dict


def run_round(
    engine: GameEngine,
    *,
    max_frames: int = 10_000,
    frame_time: float = 1 / 60,
    policy: str = "random",
    turn_probability: float = 0.1,
    rng: np.random.Generator | None = None,
) -> RunResult:
    """Drive *engine* frame by frame until game over or *max_frames*.

    The ``random`` policy presses a random direction on a fraction of
    frames; ``straight`` never presses anything.
    """
    if policy not in ("random", "straight"):
        raise ValueError(f"Unknown policy: {policy}")
    rng = rng if rng is not None else np.random.default_rng()

    frames = 0
    while frames < max_frames and not engine.game_over:
        if policy == "random" and rng.random() < turn_probability:
            engine.press_direction(_DIRECTIONS[int(rng.integers(len(_DIRECTIONS)))])
        engine.update(frame_time)
        frames += 1

    state = engine.get_state()
    return RunResult(
        frames=frames,
        ticks=state["tick"],
        score=state["score"],
        length=state["snake"]["length"],
        game_over=engine.game_over,
        reason=state["reason"],
        state=state,
    )


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_rounds: int
    total_frames: int
    total_ticks: int
    wall_time_seconds: float
    frames_per_second: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_rounds} rounds, "
            f"{self.total_frames} frames, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.frames_per_second:.1f} frames/s, "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def benchmark_throughput(
    *,
    num_rounds: int = 100,
    max_frames: int = 2_000,
    frame_time: float = 1 / 60,
    config: GameConfig | None = None,
    viewport: Viewport | None = None,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure raw simulation throughput.

    Plays *num_rounds* rounds with the random policy and reports frames
    and movement ticks per second.
    """
    config = config if config is not None else GameConfig()
    rng = np.random.default_rng(seed)

    total_frames = 0
    total_ticks = 0
    start = time.perf_counter()

    for _ in range(num_rounds):
        engine = GameEngine(
            config.with_overrides(seed=int(rng.integers(2**31))),
            viewport=viewport,
        )
        result = run_round(
            engine, max_frames=max_frames, frame_time=frame_time, rng=rng,
        )
        total_frames += result.frames
        total_ticks += result.ticks

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        total_rounds=num_rounds,
        total_frames=total_frames,
        total_ticks=total_ticks,
        wall_time_seconds=elapsed,
        frames_per_second=total_frames / max(elapsed, 1e-9),
        ticks_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
