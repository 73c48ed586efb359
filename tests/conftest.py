"""Shared fixtures for the Biotope test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pytest

from biotope.core.random import SeededRandom
from biotope.simulation.config import SchedulingMode, SimulationConfig
from biotope.simulation.engine import World
from biotope.world.grid import Grid


@dataclass
class ScriptedRandom(SeededRandom):
    """A stream that replays fixed values, cycling when exhausted."""

    values: Sequence[float] = (0.5,)
    _index: int = field(init=False, default=0, repr=False)

    def next(self) -> float:
        value = self.values[self._index % len(self.values)]
        self._index += 1
        return value


@pytest.fixture
def rng() -> SeededRandom:
    """A deterministic random stream for reproducible tests."""
    return SeededRandom(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """A small 8x8 all-land grid."""
    return Grid(width=8, height=8)


@pytest.fixture
def small_config() -> SimulationConfig:
    """A small generated world that ticks quickly."""
    return SimulationConfig(
        seed=777,
        world_size=24,
        river_count=2,
        rabbit_count=30,
        wolf_count=4,
    )


@pytest.fixture
def land_world() -> Callable[..., World]:
    """Factory for worlds on a hand-built grid of well-watered land.

    Every cell is land at distance 1 from (imaginary) water, and the world
    starts empty so tests can place occupants exactly.
    """

    def build(
        size: int = 10,
        *,
        mode: SchedulingMode = SchedulingMode.FULL,
        seed: int = 1,
    ) -> World:
        grid = Grid(width=size, height=size)
        for cell in grid.iter_cells():
            cell.height = 0.5
            cell.distance_to_water = 1
        config = SimulationConfig(
            seed=seed,
            world_size=size,
            mode=mode,
            track_ground_cover=False,
        )
        return World.from_grid(config, grid)

    return build
