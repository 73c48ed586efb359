"""Terrain generation — heights, rivers, coastline smoothing, moisture.

Runs once when a world is built.  Each stage is a plain function over a
``Grid`` so it can be exercised on hand-built height fields:

1. Two-octave value noise assigns heights.
2. Tiles below the water level become water.
3. Rivers follow steepest descent from random land tiles.
4. Majority-neighbour passes remove single-tile specks of land and water.
5. A multi-source breadth-first pass records each tile's distance to water.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from biotope.core.random import ValueNoise
from biotope.world.cell import UNREACHABLE, Cell, Terrain

if TYPE_CHECKING:
    from biotope.core.random import SeededRandom
    from biotope.simulation.config import SimulationConfig
    from biotope.world.grid import Grid

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

_DETAIL_FREQUENCY = 5.0
_DETAIL_WEIGHT = 0.15
_DETAIL_OFFSET = 100.0
_WATER_MARGIN = 0.05  # how far re-classified tiles sit from the water level
_MIN_WATER_NEIGHBOURS = 3  # fewer than this and a water tile dries up
_MAX_WATER_NEIGHBOURS = 5  # more than this and a land tile floods


def assign_heights(grid: Grid, noise: ValueNoise, scale: float = 0.02) -> None:
    """Fill every cell's ``height`` from two octaves of value noise.

    Args:
        grid: Grid to write into.
        noise: Sampler providing the base and detail octaves.
        scale: Frequency of the base octave.
    """
    detail = scale * _DETAIL_FREQUENCY
    for cell in grid.iter_cells():
        h = noise.sample(cell.x * scale, cell.y * scale)
        h += (
            noise.sample(
                cell.x * detail + _DETAIL_OFFSET,
                cell.y * detail + _DETAIL_OFFSET,
            )
            * _DETAIL_WEIGHT
        )
        cell.height = h / (1.0 + _DETAIL_WEIGHT)


def classify_terrain(grid: Grid, water_level: float) -> None:
    """Mark tiles below ``water_level`` as water and the rest as land."""
    for cell in grid.iter_cells():
        if cell.height < water_level:
            cell.terrain = Terrain.WATER
            cell.distance_to_water = 0
        else:
            cell.terrain = Terrain.LAND


def create_river(grid: Grid, x: int, y: int, water_level: float) -> list[Cell]:
    """Carve a river downhill from ``(x, y)``.

    The walk repeatedly steps to the lowest neighbour, flooding each tile it
    visits.  It stops when no neighbour is strictly lower than the current
    tile's original height, or when the lowest neighbour is already water.

    Args:
        grid: Grid to carve into.
        x: Starting column.
        y: Starting row.
        water_level: Flooded tiles are pinned just below this height.

    Returns:
        The flooded cells in walk order (empty if the start was water).
    """
    current = grid.cell_at(x, y)
    if not current.is_land:
        return []

    carved: list[Cell] = []
    while True:
        original_height = current.height
        current.terrain = Terrain.WATER
        current.distance_to_water = 0
        current.height = water_level - _WATER_MARGIN
        carved.append(current)

        # The river's own tiles are skipped: they now sit below any land.
        lowest: Cell | None = None
        for n in grid.neighbours(current.x, current.y):
            if n in carved:
                continue
            if lowest is None or n.height < lowest.height:
                lowest = n
        if lowest is None or lowest.height >= original_height or not lowest.is_land:
            break
        current = lowest
    return carved


def carve_rivers(
    grid: Grid,
    rng: SeededRandom,
    count: int,
    water_level: float,
) -> int:
    """Start ``count`` rivers at random tiles; water starts are skipped.

    Returns:
        Number of tiles flooded in total.
    """
    flooded = 0
    for _ in range(count):
        sx = int(rng.range(0, grid.width))
        sy = int(rng.range(0, grid.height))
        flooded += len(create_river(grid, sx, sy, water_level))
    return flooded


def smooth_water(grid: Grid, water_level: float, passes: int = 3) -> None:
    """Remove isolated specks of water and land with majority passes.

    Updates happen in place in row-major order, so a tile flipped early in
    a pass is seen by later tiles of the same pass.

    Args:
        grid: Grid to smooth.
        water_level: Reference height for re-classified tiles.
        passes: Number of full sweeps.
    """
    for _ in range(passes):
        for cell in grid.iter_cells():
            water = sum(1 for n in grid.neighbours(cell.x, cell.y) if not n.is_land)
            if not cell.is_land and water < _MIN_WATER_NEIGHBOURS:
                cell.terrain = Terrain.LAND
                cell.height = water_level + _WATER_MARGIN
            elif cell.is_land and water > _MAX_WATER_NEIGHBOURS:
                cell.terrain = Terrain.WATER
                cell.height = water_level - _WATER_MARGIN


def compute_moisture(grid: Grid) -> None:
    """Set ``distance_to_water`` on every tile by multi-source BFS.

    All water tiles start at distance 0 and the frontier expands one
    8-connected step at a time, so each land tile receives its exact
    Chebyshev step distance to the nearest water.  Land that cannot reach
    any water keeps ``UNREACHABLE``.
    """
    queue: deque[Cell] = deque()
    for cell in grid.iter_cells():
        if cell.is_land:
            cell.distance_to_water = UNREACHABLE
        else:
            cell.distance_to_water = 0
            queue.append(cell)

    reached: set[Cell] = set(queue)
    while queue:
        current = queue.popleft()
        for n in grid.neighbours(current.x, current.y):
            if n not in reached:
                reached.add(n)
                n.distance_to_water = current.distance_to_water + 1
                queue.append(n)


def generate_terrain(grid: Grid, rng: SeededRandom, config: SimulationConfig) -> None:
    """Run the full terrain pipeline on ``grid``.

    Args:
        grid: Freshly constructed grid.
        rng: World stream; consumed in a fixed order.
        config: Supplies water level, river count and smoothing passes.
    """
    noise = ValueNoise(rng)
    assign_heights(grid, noise, config.terrain_scale)
    classify_terrain(grid, config.water_level)
    flooded = carve_rivers(grid, rng, config.river_count, config.water_level)
    smooth_water(grid, config.water_level, config.smoothing_passes)
    compute_moisture(grid)

    water = sum(1 for c in grid.iter_cells() if not c.is_land)
    logger.debug(
        "Terrain %dx%d: %d water tiles (%d from rivers), %d land tiles",
        grid.width,
        grid.height,
        water,
        flooded,
        grid.width * grid.height - water,
    )
