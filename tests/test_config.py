"""Tests for the game configuration dataclass."""

import json

import pytest

from grid_snake.config import GameConfig


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.movement_interval == 0.1
        assert cfg.starting_tail_length == 3
        assert cfg.swipe_threshold == 100.0
        assert cfg.screen_zoom == 1.0
        assert cfg.restart_delay == 3.0
        assert cfg.seed is None

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("movement_interval", 0.0),
            ("starting_tail_length", -1),
            ("swipe_threshold", 0.0),
            ("screen_zoom", -2.0),
            ("restart_delay", -1.0),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError, match=field):
            GameConfig(**{field: value})

    def test_zero_tail_allowed(self):
        assert GameConfig(starting_tail_length=0).starting_tail_length == 0

    def test_with_overrides(self):
        cfg = GameConfig().with_overrides(seed=7, screen_zoom=2.0)
        assert cfg.seed == 7
        assert cfg.screen_zoom == 2.0
        assert cfg.movement_interval == 0.1

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(movement_interval=0.25, starting_tail_length=5, seed=3)
        path = tmp_path / "nested" / "config.json"
        cfg.save(path)
        assert path.exists()

        loaded = GameConfig.load(path)
        assert loaded == cfg

    def test_to_dict_serializable(self):
        serialized = json.dumps(GameConfig().to_dict())
        assert isinstance(serialized, str)
