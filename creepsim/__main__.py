"""Entry point for ``python -m creepsim``.

Loads a room export and the YAML config, builds a world with one creep,
and either opens a Pygame window to watch it or runs headless for a
fixed number of ticks.
"""

from __future__ import annotations

import argparse
import json
import pathlib
import sys

from loguru import logger

from creepsim.room.room import load_room
from creepsim.sim.world import WorldState
from creepsim.simulation.config import SimulationConfig
from creepsim.simulation.driver import SimulationDriver

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def _configure_logging(level: str) -> None:
    """Send log records at or above ``level`` to stderr."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, build the world, then render or run headless."""
    parser = argparse.ArgumentParser(
        prog="creepsim",
        description="creepsim - creep pathing simulator for a single room",
    )
    parser.add_argument(
        "room",
        type=pathlib.Path,
        help="Path to the room export JSON file",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--headless",
        type=int,
        metavar="TICKS",
        default=None,
        help="Run TICKS ticks without a window and print the last snapshot",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=12,
        help="Pixel size per grid cell (default: 12)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Simulation ticks per second (default: from config)",
    )
    args = parser.parse_args(argv)
    if args.speed is not None and args.speed <= 0:
        parser.error(f"--speed must be > 0, got {args.speed}")

    config = SimulationConfig.from_yaml(args.config)
    _configure_logging(config.log_level)

    room = load_room(args.room)
    world = WorldState.from_room(room, spawn=config.spawn, creep_id=config.creep_id)
    speed = args.speed if args.speed is not None else config.ticks_per_second
    driver = SimulationDriver(
        world,
        tick_interval=1.0 / speed,
        snap_every_ticks=config.snap_every_ticks,
    )

    if args.headless is not None:
        for _ in range(args.headless):
            driver.tick()
        snap = world.snapshot()
        logger.info("Finished {} ticks", snap.tick)
        print(json.dumps(snap.to_dict(), indent=2))
        return

    from creepsim.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        driver=driver,
        cell_size=args.cell_size,
        ticks_per_second=speed,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
