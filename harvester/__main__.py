"""Module entry point for `python -m harvester`."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from harvester.app import DEFAULT_TICKS, resolve_log_level, run_simulation
from harvester.logging_setup import setup_logging
from harvester.render.replay_player import play_run_folder
from harvester.render.viewer import render_summary

DEFAULT_REPLAY_DIR = Path("replay")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the harvester colony simulation.")
    parser.add_argument(
        "--ticks",
        type=int,
        default=DEFAULT_TICKS,
        help="Number of ticks to run. Use 0 to run until interrupted.",
    )
    parser.add_argument(
        "--seed",
        type=lambda value: int(value, 0),
        default=None,
        help="Seed for the goal policy's random generator (env HARVESTER_SEED).",
    )
    parser.add_argument(
        "--world",
        type=Path,
        default=None,
        help="Room definition JSON file (env HARVESTER_WORLD).",
    )
    parser.add_argument(
        "--replay-dir",
        type=Path,
        default=DEFAULT_REPLAY_DIR,
        help="Base replay directory for new runs.",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay a saved run folder through the viewer.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Render each tick live while the simulation runs.",
    )
    parser.add_argument(
        "--tick-delay",
        type=float,
        default=0.2,
        help="Seconds between rendered ticks (live and replay views).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="DEBUG, INFO, WARNING or ERROR (env HARVESTER_LOG_LEVEL).",
    )
    args = parser.parse_args(argv)

    try:
        setup_logging(resolve_log_level(args.log_level))
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    console = Console()
    if args.replay is not None:
        payloads = play_run_folder(
            args.replay, console=console, tick_delay=args.tick_delay
        )
        console.print(render_summary(payloads))
        return

    try:
        run_dir, payloads = run_simulation(
            args.replay_dir,
            ticks=args.ticks or None,
            seed=args.seed,
            world_path=args.world,
            live=args.show,
            tick_delay=args.tick_delay,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc
    except KeyboardInterrupt:
        console.print("Interrupted.")
        return
    console.print(render_summary(payloads))
    print(f"Run saved to {run_dir}")


if __name__ == "__main__":
    main()
