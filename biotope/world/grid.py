"""Grid — the fixed-size spatial container for a world.

The Grid owns cells arranged in a 2D array and provides the spatial
queries (neighbours, radius scans, nearest-match search) used by plants,
animals, and terrain generation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from biotope.world.cell import Cell

if TYPE_CHECKING:
    from biotope.core.random import SeededRandom

# Fixed order keeps neighbour scans (and therefore RNG use) reproducible.
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (-1, -1),
    (1, -1),
    (-1, 1),
)


def manhattan(a: Cell, b: Cell) -> int:
    """Return the Manhattan distance between two cells."""
    return abs(a.x - b.x) + abs(a.y - b.y)


@dataclass
class Grid:
    """A 2D grid of cells.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        cells: 2D list of Cell objects indexed as ``cells[y][x]``.
    """

    width: int
    height: int
    cells: list[list[Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with default land cells.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if self.width <= 0 or self.height <= 0:
            msg = f"grid dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        self.cells = [
            [Cell(x=x, y=y) for x in range(self.width)] for y in range(self.height)
        ]

    def is_valid(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Return the cell at grid coordinates ``(x, y)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.is_valid(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return self.cells[y][x]

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every cell in row-major order."""
        for row in self.cells:
            yield from row

    def neighbours(self, x: int, y: int) -> list[Cell]:
        """Return the in-bounds 8-connected neighbours of ``(x, y)``."""
        result: list[Cell] = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(self.cells[ny][nx])
        return result

    def neighbours_in_radius(self, cx: int, cy: int, radius: int) -> list[Cell]:
        """Return every in-bounds cell in the square of ``radius`` around a centre.

        The centre cell itself is excluded.
        """
        result: list[Cell] = []
        for y in range(max(0, cy - radius), min(self.height, cy + radius + 1)):
            for x in range(max(0, cx - radius), min(self.width, cx + radius + 1)):
                if x == cx and y == cy:
                    continue
                result.append(self.cells[y][x])
        return result

    def free_land_neighbours(self, x: int, y: int) -> list[Cell]:
        """Return neighbours an animal could step onto."""
        return [c for c in self.neighbours(x, y) if c.is_land and c.animal is None]

    def find_closest(
        self,
        cx: int,
        cy: int,
        radius: int,
        predicate: Callable[[Cell], bool],
        rng: SeededRandom,
    ) -> Cell | None:
        """Find the nearest cell matching ``predicate`` within ``radius``.

        Distance is Manhattan, measured inside the square neighbourhood.
        When several matches share the minimum distance one is picked
        uniformly at random.

        Args:
            cx: Centre column.
            cy: Centre row.
            radius: Half-width of the square to scan.
            predicate: Test applied to each candidate cell.
            rng: Stream used to break ties.

        Returns:
            The chosen cell, or None if nothing matched.
        """
        best_dist = -1
        candidates: list[Cell] = []
        for cell in self.neighbours_in_radius(cx, cy, radius):
            if not predicate(cell):
                continue
            dist = abs(cell.x - cx) + abs(cell.y - cy)
            if best_dist < 0 or dist < best_dist:
                best_dist = dist
                candidates = [cell]
            elif dist == best_dist:
                candidates.append(cell)

        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        return rng.choice(candidates)
