"""Entry point for ``python -m biotope``.

Loads a YAML config, builds a world, runs it headless for a number of
ticks, and writes sampled population counts to a CSV file.
"""

from __future__ import annotations

import argparse
import csv
import logging
import pathlib
import time
from dataclasses import replace

from biotope.simulation.config import SchedulingMode, SimulationConfig
from biotope.simulation.engine import World
from biotope.simulation.stats import StatsHistory

logger = logging.getLogger("biotope")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, run the world, save stats."""
    parser = argparse.ArgumentParser(
        prog="biotope",
        description="Biotope - headless tile ecosystem simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=50_000,
        help="Ticks to simulate (default: 50000)",
    )
    parser.add_argument(
        "--log-interval",
        type=int,
        default=24,
        help="Ticks between stats samples (default: 24, one day)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SchedulingMode],
        default=None,
        help="Override the scheduling mode from the config",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=pathlib.Path,
        default=pathlib.Path("simulation_stats.csv"),
        help="CSV file for sampled stats (default: simulation_stats.csv)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.mode is not None:
        config = replace(config, mode=SchedulingMode(args.mode))

    world = World(config=config)
    logger.info(
        "World initialised: %dx%d, seed %d",
        world.grid.width,
        world.grid.height,
        config.seed,
    )

    interval = max(1, args.log_interval)
    history = StatsHistory(max_history=args.ticks // interval + 1)
    started = time.perf_counter()
    for i in range(args.ticks):
        world.tick()
        if i % interval == 0:
            history.record(world.time, world.get_stats())
        if i > 0 and i % config.ticks_per_year == 0:
            stats = world.get_stats()
            logger.info(
                "Year %.1f: rabbits=%d wolves=%d",
                i / config.ticks_per_year,
                stats.rabbit,
                stats.wolf,
            )
    elapsed = time.perf_counter() - started

    logger.info("Simulated %d ticks in %.2fs", args.ticks, elapsed)
    if elapsed > 0:
        logger.info("Ticks per second: %.0f", args.ticks / elapsed)
    logger.info("Final stats: %s", world.get_stats().as_dict())

    with args.output.open("w", newline="") as f:
        csv.writer(f).writerows(history.to_csv_rows())
    logger.info("Stats saved to %s", args.output)


if __name__ == "__main__":
    main()
