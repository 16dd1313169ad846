"""Food placement by rejection sampling."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from grid_snake.grid import Bounds, Cell

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Picks food cells uniformly from the inset region of the bounds.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Sampling draws cells until one is free; the loop has no draw cap, so a
    board with a single free cell can take many draws. A board with no free
    inset cell is detected up front and yields no food.
    """

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()

    def spawn(self, bounds: Bounds, occupied: Collection[Cell]) -> Cell | None:
        """Return a random inset cell not in *occupied*, or ``None`` if full."""
        occupied = set(occupied)
        taken = sum(1 for cell in occupied if bounds.in_inset(cell))
        if taken >= bounds.inset_area:
            logger.warning("No free cells available for food spawning.")
            return None

        lo_x, hi_x = bounds.inset_x
        lo_y, hi_y = bounds.inset_y
        draws = 0
        while True:
            draws += 1
            x = int(self.rng.integers(lo_x, hi_x + 1))
            y = int(self.rng.integers(lo_y, hi_y + 1))
            if (x, y) not in occupied:
                logger.debug("Food placed at (%d, %d) after %d draw(s).", x, y, draws)
                return x, y
