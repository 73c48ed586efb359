"""Tests for biotope.world.cell and biotope.world.grid."""

import pytest

from biotope.core.random import SeededRandom
from biotope.life.plant import Plant, PlantType
from biotope.world.cell import Cell, GroundCover, Terrain
from biotope.world.grid import Grid, manhattan


def _grass() -> Plant:
    return Plant(
        plant_type=PlantType.GRASS,
        lifespan=100,
        maturity_age=10,
        reproduction_chance=0.1,
        water_range=5,
        max_energy=50.0,
        current_energy=50.0,
        regen_rate=1.0,
    )


class TestCell:
    """Tests for the Cell dataclass."""

    def test_default_values(self) -> None:
        cell = Cell(x=0, y=0)
        assert cell.terrain == Terrain.LAND
        assert cell.ground == GroundCover.DIRT
        assert cell.is_land
        assert cell.plant is None
        assert cell.animal is None

    def test_water_is_not_land(self) -> None:
        assert not Cell(x=0, y=0, terrain=Terrain.WATER).is_land

    def test_set_plant_twice_raises(self) -> None:
        cell = Cell(x=1, y=1)
        cell.set_plant(_grass())
        with pytest.raises(ValueError):
            cell.set_plant(_grass())

    def test_remove_plant_returns_occupant(self) -> None:
        cell = Cell(x=1, y=1)
        plant = _grass()
        cell.set_plant(plant)
        assert cell.remove_plant() is plant
        assert cell.plant is None
        assert cell.remove_plant() is None


class TestGrid:
    """Tests for the Grid and its spatial queries."""

    def test_dimensions(self, small_grid: Grid) -> None:
        assert small_grid.width == 8
        assert small_grid.height == 8
        assert len(small_grid.cells) == 8
        assert len(small_grid.cells[0]) == 8

    @pytest.mark.parametrize(("width", "height"), [(0, 5), (5, 0), (-1, 4)])
    def test_non_positive_dimensions_rejected(self, width: int, height: int) -> None:
        with pytest.raises(ValueError):
            Grid(width=width, height=height)

    def test_cell_at_valid(self, small_grid: Grid) -> None:
        cell = small_grid.cell_at(3, 5)
        assert cell.x == 3
        assert cell.y == 5

    def test_cell_at_out_of_bounds(self, small_grid: Grid) -> None:
        with pytest.raises(IndexError):
            small_grid.cell_at(8, 0)

    def test_iter_cells_row_major(self, small_grid: Grid) -> None:
        cells = list(small_grid.iter_cells())
        assert len(cells) == 64
        assert (cells[1].x, cells[1].y) == (1, 0)
        assert (cells[8].x, cells[8].y) == (0, 1)

    def test_neighbours_corner(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours(0, 0)) == 3

    def test_neighbours_center(self, small_grid: Grid) -> None:
        neighbours = small_grid.neighbours(3, 3)
        assert len(neighbours) == 8
        assert all(max(abs(c.x - 3), abs(c.y - 3)) == 1 for c in neighbours)

    def test_radius_excludes_centre(self, small_grid: Grid) -> None:
        cells = small_grid.neighbours_in_radius(4, 4, 2)
        assert len(cells) == 24
        assert small_grid.cell_at(4, 4) not in cells

    def test_radius_clipped_at_edge(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours_in_radius(0, 0, 2)) == 8

    def test_free_land_neighbours(self, small_grid: Grid) -> None:
        small_grid.cell_at(3, 2).terrain = Terrain.WATER
        free = small_grid.free_land_neighbours(2, 2)
        assert small_grid.cell_at(3, 2) not in free
        assert len(free) == 7

    def test_find_closest_prefers_manhattan_nearest(
        self,
        small_grid: Grid,
        rng: SeededRandom,
    ) -> None:
        targets = {(5, 5), (4, 7)}
        found = small_grid.find_closest(
            4,
            4,
            3,
            lambda c: (c.x, c.y) in targets,
            rng,
        )
        assert found is small_grid.cell_at(5, 5)

    def test_find_closest_none_when_no_match(
        self,
        small_grid: Grid,
        rng: SeededRandom,
    ) -> None:
        assert small_grid.find_closest(4, 4, 3, lambda c: False, rng) is None

    def test_find_closest_ignores_centre(
        self,
        small_grid: Grid,
        rng: SeededRandom,
    ) -> None:
        found = small_grid.find_closest(4, 4, 2, lambda c: c.x == 4 and c.y == 4, rng)
        assert found is None

    def test_find_closest_out_of_radius(
        self,
        small_grid: Grid,
        rng: SeededRandom,
    ) -> None:
        found = small_grid.find_closest(0, 0, 2, lambda c: c.x == 7, rng)
        assert found is None

    def test_find_closest_tie_break_is_random(self, small_grid: Grid) -> None:
        targets = {(2, 4), (6, 4)}
        chosen = set()
        for seed in range(50):
            cell = small_grid.find_closest(
                4,
                4,
                3,
                lambda c: (c.x, c.y) in targets,
                SeededRandom(seed=seed),
            )
            assert cell is not None
            chosen.add((cell.x, cell.y))
        assert chosen == targets

    def test_manhattan(self, small_grid: Grid) -> None:
        assert manhattan(small_grid.cell_at(1, 2), small_grid.cell_at(4, 0)) == 5
