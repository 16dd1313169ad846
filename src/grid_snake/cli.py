"""Command-line tools for running the simulation headless."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _add_game_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file; flags below override it.",
    )
    parser.add_argument("--movement-interval", type=float, default=None)
    parser.add_argument("--tail-length", type=int, default=None)
    parser.add_argument("--swipe-threshold", type=float, default=None)
    parser.add_argument("--zoom", type=float, default=None)
    parser.add_argument("--restart-delay", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--orthographic-size", type=float, default=10.0)
    parser.add_argument("--aspect", type=float, default=16 / 9)
    parser.add_argument("--frame-rate", type=int, default=60)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Headless grid snake simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- run ---
    run_p = sub.add_parser("run", help="Play one round with a scripted policy.")
    _add_game_flags(run_p)
    run_p.add_argument(
        "--policy", type=str, default="random", choices=["random", "straight"],
    )
    run_p.add_argument("--max-frames", type=int, default=10_000)
    run_p.add_argument(
        "--json", action="store_true",
        help="Print the final state as JSON instead of a summary.",
    )

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure simulation throughput.",
    )
    _add_game_flags(bench_p)
    bench_p.add_argument("--rounds", type=int, default=100)
    bench_p.add_argument("--max-frames", type=int, default=2_000)

    return parser


def _load_config(args: argparse.Namespace):
    from grid_snake.config import GameConfig

    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    flag_map = {
        "movement_interval": "movement_interval",
        "tail_length": "starting_tail_length",
        "swipe_threshold": "swipe_threshold",
        "zoom": "screen_zoom",
        "restart_delay": "restart_delay",
        "seed": "seed",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def _run_round(args: argparse.Namespace) -> int:
    import numpy as np

    from grid_snake.benchmark import run_round
    from grid_snake.engine import GameEngine
    from grid_snake.grid import Viewport

    config = _load_config(args)
    viewport = Viewport(orthographic_size=args.orthographic_size, aspect=args.aspect)
    engine = GameEngine(config, viewport=viewport)
    result = run_round(
        engine,
        max_frames=args.max_frames,
        frame_time=1 / args.frame_rate,
        policy=args.policy,
        rng=np.random.default_rng(config.seed),
    )

    if args.json:
        print(json.dumps(result.state))  # noqa: T201
    else:
        outcome = result.reason if result.game_over else "still running"
        print(  # noqa: T201
            f"Round: {result.frames} frames, {result.ticks} ticks, "
            f"score {result.score}, length {result.length} ({outcome})"
        )
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from grid_snake.benchmark import benchmark_throughput
    from grid_snake.grid import Viewport

    result = benchmark_throughput(
        num_rounds=args.rounds,
        max_frames=args.max_frames,
        frame_time=1 / args.frame_rate,
        config=_load_config(args),
        viewport=Viewport(orthographic_size=args.orthographic_size, aspect=args.aspect),
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "run": _run_round,
        "benchmark": _run_benchmark,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
