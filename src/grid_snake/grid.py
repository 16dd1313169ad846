"""Playable bounds derived from the viewport."""

from __future__ import annotations

import math
from dataclasses import dataclass

# (x, y) with y growing upward.
Cell = tuple[int, int]


@dataclass(frozen=True)
class Viewport:
    """Camera extents supplied by the host.

    ``orthographic_size`` is the camera half-height in grid units and
    ``aspect`` the width / height ratio.
    """

    orthographic_size: float = 10.0
    aspect: float = 16 / 9

    def __post_init__(self) -> None:
        if self.orthographic_size <= 0:
            raise ValueError("orthographic_size must be positive.")
        if self.aspect <= 0:
            raise ValueError("aspect must be positive.")


@dataclass(frozen=True)
class Bounds:
    """Inclusive rectangle ``[-half_width, half_width] × [-half_height, half_height]``.

    Food is placed in the *inset* region, one unit in from every edge.
    """

    half_width: int
    half_height: int

    def __post_init__(self) -> None:
        if self.half_width < 1 or self.half_height < 1:
            raise ValueError("Bounds half extents must be at least 1.")

    @classmethod
    def from_viewport(cls, viewport: Viewport, zoom: float = 1.0) -> Bounds:
        """Derive bounds from a viewport zoomed in by *zoom*."""
        if zoom <= 0:
            raise ValueError("zoom must be positive.")
        half_height = math.floor(viewport.orthographic_size / zoom)
        half_width = math.floor(viewport.aspect * half_height)
        return cls(half_width=half_width, half_height=half_height)

    def contains(self, cell: Cell) -> bool:
        """Check whether a cell lies inside the playable rectangle."""
        x, y = cell
        return abs(x) <= self.half_width and abs(y) <= self.half_height

    @property
    def inset_x(self) -> tuple[int, int]:
        return -self.half_width + 1, self.half_width - 1

    @property
    def inset_y(self) -> tuple[int, int]:
        return -self.half_height + 1, self.half_height - 1

    @property
    def inset_area(self) -> int:
        """Number of cells in the inset region."""
        return (2 * self.half_width - 1) * (2 * self.half_height - 1)

    def in_inset(self, cell: Cell) -> bool:
        """Check whether a cell lies inside the inset region."""
        x, y = cell
        return abs(x) < self.half_width and abs(y) < self.half_height

    def to_dict(self) -> dict:
        return {"half_width": self.half_width, "half_height": self.half_height}
