"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Tunable options for one simulation.

    Supports JSON serialization for reproducibility.
    """

    # Seconds per movement tick
    movement_interval: float = 0.1
    starting_tail_length: int = 3
    # Minimum drag distance, in input units, that counts as a swipe
    swipe_threshold: float = 100.0
    # Zooms the viewport in; only affects derived bounds
    screen_zoom: float = 1.0
    # Seconds between game over and the restart callback
    restart_delay: float = 3.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.movement_interval <= 0:
            raise ValueError("movement_interval must be positive.")
        if self.starting_tail_length < 0:
            raise ValueError("starting_tail_length must be non-negative.")
        if self.swipe_threshold <= 0:
            raise ValueError("swipe_threshold must be positive.")
        if self.screen_zoom <= 0:
            raise ValueError("screen_zoom must be positive.")
        if self.restart_delay < 0:
            raise ValueError("restart_delay must be non-negative.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def with_overrides(self, **overrides) -> GameConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
