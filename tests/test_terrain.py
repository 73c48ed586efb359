"""Tests for biotope.world.terrain — heights, rivers, smoothing, moisture."""

import pytest

from biotope.core.random import SeededRandom
from biotope.simulation.config import SimulationConfig
from biotope.world.cell import UNREACHABLE, Terrain
from biotope.world.grid import Grid
from biotope.world.terrain import (
    classify_terrain,
    compute_moisture,
    create_river,
    generate_terrain,
    smooth_water,
)

WATER_LEVEL = 0.39


def _slope(x: int, y: int) -> float:
    return 0.4 + 0.02 * (x + y)


def _sloped_grid() -> Grid:
    """A 10x10 field rising toward (9, 9) with a single pond at (0, 0)."""
    grid = Grid(width=10, height=10)
    for cell in grid.iter_cells():
        cell.height = _slope(cell.x, cell.y)
    grid.cell_at(0, 0).height = 0.1
    classify_terrain(grid, WATER_LEVEL)
    return grid


def _all(grid: Grid, terrain: Terrain) -> Grid:
    for cell in grid.iter_cells():
        cell.terrain = terrain
    return grid


class TestClassify:
    """Tests for water-level classification."""

    def test_below_water_level_is_water(self) -> None:
        grid = _sloped_grid()
        assert grid.cell_at(0, 0).terrain == Terrain.WATER
        assert grid.cell_at(0, 0).distance_to_water == 0
        assert grid.cell_at(1, 0).terrain == Terrain.LAND


class TestRiver:
    """Tests for steepest-descent river carving."""

    def test_river_descends_to_low_corner(self) -> None:
        grid = _sloped_grid()
        river = create_river(grid, 9, 9, WATER_LEVEL)

        assert len(river) > 1
        assert all(c.terrain == Terrain.WATER for c in river)
        assert all(c.height == pytest.approx(WATER_LEVEL - 0.05) for c in river)

        # Consecutive tiles are 8-connected and strictly downhill
        for a, b in zip(river, river[1:]):
            assert max(abs(a.x - b.x), abs(a.y - b.y)) == 1
            assert _slope(b.x, b.y) < _slope(a.x, a.y)

        end = river[-1]
        assert max(end.x, end.y) <= 1

    def test_river_from_water_is_skipped(self) -> None:
        grid = _sloped_grid()
        assert create_river(grid, 0, 0, WATER_LEVEL) == []

    def test_river_stops_in_local_minimum(self) -> None:
        grid = Grid(width=5, height=5)
        for cell in grid.iter_cells():
            cell.height = 0.8
        grid.cell_at(2, 2).height = 0.5
        river = create_river(grid, 2, 2, WATER_LEVEL)
        assert [(c.x, c.y) for c in river] == [(2, 2)]


class TestSmoothing:
    """Tests for the majority-neighbour coastline pass."""

    def test_isolated_water_dries_up(self) -> None:
        grid = Grid(width=5, height=5)
        grid.cell_at(2, 2).terrain = Terrain.WATER
        smooth_water(grid, WATER_LEVEL, passes=1)
        assert grid.cell_at(2, 2).is_land
        assert grid.cell_at(2, 2).height == pytest.approx(WATER_LEVEL + 0.05)

    def test_isolated_land_floods(self) -> None:
        grid = _all(Grid(width=5, height=5), Terrain.WATER)
        grid.cell_at(2, 2).terrain = Terrain.LAND
        smooth_water(grid, WATER_LEVEL, passes=1)
        assert grid.cell_at(2, 2).terrain == Terrain.WATER
        assert grid.cell_at(2, 2).height == pytest.approx(WATER_LEVEL - 0.05)

    def test_large_bodies_unchanged(self) -> None:
        grid = Grid(width=6, height=6)
        for cell in grid.iter_cells():
            if cell.x < 3:
                cell.terrain = Terrain.WATER
        smooth_water(grid, WATER_LEVEL, passes=3)
        for cell in grid.iter_cells():
            assert cell.is_land == (cell.x >= 3)


class TestMoisture:
    """Tests for the multi-source BFS distance field."""

    def test_matches_brute_force(self) -> None:
        grid = Grid(width=9, height=7)
        water = [(0, 0), (8, 6), (4, 3)]
        for x, y in water:
            grid.cell_at(x, y).terrain = Terrain.WATER
        compute_moisture(grid)

        for cell in grid.iter_cells():
            expected = min(max(abs(cell.x - wx), abs(cell.y - wy)) for wx, wy in water)
            assert cell.distance_to_water == expected

    def test_water_is_zero(self) -> None:
        grid = Grid(width=4, height=4)
        grid.cell_at(1, 1).terrain = Terrain.WATER
        compute_moisture(grid)
        assert grid.cell_at(1, 1).distance_to_water == 0
        assert grid.cell_at(3, 3).distance_to_water == 2

    def test_no_water_is_unreachable(self) -> None:
        grid = Grid(width=4, height=4)
        compute_moisture(grid)
        assert all(c.distance_to_water == UNREACHABLE for c in grid.iter_cells())


class TestGenerateTerrain:
    """Tests for the full pipeline."""

    def test_deterministic_for_seed(self) -> None:
        config = SimulationConfig(world_size=20, river_count=3)
        a = Grid(width=20, height=20)
        b = Grid(width=20, height=20)
        generate_terrain(a, SeededRandom(seed=42), config)
        generate_terrain(b, SeededRandom(seed=42), config)
        for ca, cb in zip(a.iter_cells(), b.iter_cells()):
            assert ca.height == cb.height
            assert ca.terrain == cb.terrain
            assert ca.distance_to_water == cb.distance_to_water

    def test_distance_field_consistent(self) -> None:
        config = SimulationConfig(world_size=20, river_count=3)
        grid = Grid(width=20, height=20)
        generate_terrain(grid, SeededRandom(seed=9), config)
        for cell in grid.iter_cells():
            if cell.is_land:
                assert cell.distance_to_water >= 1
            else:
                assert cell.distance_to_water == 0
