"""Tests for the grid-snake CLI."""

import json

from grid_snake.cli import _build_parser, _load_config, main
from grid_snake.config import GameConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_run_defaults(self):
        args = _build_parser().parse_args(["run"])
        assert args.command == "run"
        assert args.policy == "random"
        assert args.config is None
        assert args.seed is None
        assert args.json is False

    def test_run_with_flags(self):
        args = _build_parser().parse_args([
            "run",
            "--policy", "straight",
            "--movement-interval", "0.2",
            "--tail-length", "5",
            "--zoom", "2",
            "--seed", "9",
        ])
        assert args.policy == "straight"
        assert args.movement_interval == 0.2
        assert args.tail_length == 5
        assert args.zoom == 2.0
        assert args.seed == 9

    def test_benchmark_defaults(self):
        args = _build_parser().parse_args(["benchmark"])
        assert args.command == "benchmark"
        assert args.rounds == 100
        assert args.max_frames == 2_000


class TestCLIConfig:
    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        GameConfig(movement_interval=0.3, starting_tail_length=1).save(path)
        args = _build_parser().parse_args([
            "run", "--config", str(path), "--tail-length", "4",
        ])
        config = _load_config(args)
        assert config.movement_interval == 0.3
        assert config.starting_tail_length == 4

    def test_swipe_and_restart_flags(self):
        args = _build_parser().parse_args([
            "benchmark", "--swipe-threshold", "40", "--restart-delay", "0.5",
        ])
        config = _load_config(args)
        assert config.swipe_threshold == 40.0
        assert config.restart_delay == 0.5

    def test_unset_flags_keep_config_file_values(self, tmp_path):
        path = tmp_path / "cfg.json"
        GameConfig(swipe_threshold=75.0, restart_delay=1.0).save(path)
        config = _load_config(_build_parser().parse_args(["run", "--config", str(path)]))
        assert config.swipe_threshold == 75.0
        assert config.restart_delay == 1.0


class TestCLIRun:
    def test_run_json(self, capsys):
        code = main([
            "run", "--policy", "straight", "--seed", "1",
            "--orthographic-size", "5", "--aspect", "1", "--json",
        ])
        assert code == 0
        state = json.loads(capsys.readouterr().out)
        assert state["state"] == "game_over"
        assert state["reason"] == "out_of_bounds"

    def test_run_summary(self, capsys):
        code = main(["run", "--seed", "1", "--max-frames", "50"])
        assert code == 0
        assert "Round:" in capsys.readouterr().out

    def test_invalid_config_returns_2(self):
        assert main(["run", "--movement-interval", "0"]) == 2

    def test_benchmark(self, capsys):
        code = main([
            "benchmark", "--rounds", "2", "--max-frames", "50",
            "--orthographic-size", "5", "--aspect", "1",
        ])
        assert code == 0
        assert "Benchmark:" in capsys.readouterr().out
