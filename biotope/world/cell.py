"""Cell — a single tile in the world grid.

Each cell holds terrain properties and at most one plant and one animal.
Cells never move; occupants are transferred between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biotope.life.animal import Animal
    from biotope.life.plant import Plant

UNREACHABLE = 999


class Terrain(Enum):
    """Whether a tile can carry life."""

    LAND = "land"
    WATER = "water"


class GroundCover(Enum):
    """Cosmetic ground classification derived from nearby trees."""

    DIRT = "dirt"
    FOREST_FLOOR = "forest_floor"


@dataclass(eq=False)
class Cell:
    """A single tile in the world grid.

    Attributes:
        x: Column position.
        y: Row position.
        height: Elevation assigned by terrain generation.
        terrain: Land or water.
        ground: Ground cover shown on land tiles.
        distance_to_water: Grid steps to the nearest water tile.
        plant: Plant rooted here, if any.
        animal: Animal standing here, if any.
    """

    x: int
    y: int
    height: float = 0.0
    terrain: Terrain = Terrain.LAND
    ground: GroundCover = GroundCover.DIRT
    distance_to_water: int = UNREACHABLE
    plant: Plant | None = None
    animal: Animal | None = None

    @property
    def is_land(self) -> bool:
        """Return True if this tile is land."""
        return self.terrain is Terrain.LAND

    def set_plant(self, plant: Plant) -> None:
        """Root ``plant`` here.

        Raises:
            ValueError: If the cell already holds a plant.
        """
        if self.plant is not None:
            msg = f"cell ({self.x}, {self.y}) already holds a plant"
            raise ValueError(msg)
        self.plant = plant

    def remove_plant(self) -> Plant | None:
        """Clear the plant slot and return whatever was in it."""
        plant, self.plant = self.plant, None
        return plant

    def set_animal(self, animal: Animal) -> None:
        """Place ``animal`` here.

        Raises:
            ValueError: If the cell already holds an animal.
        """
        if self.animal is not None:
            msg = f"cell ({self.x}, {self.y}) already holds an animal"
            raise ValueError(msg)
        self.animal = animal

    def remove_animal(self) -> Animal | None:
        """Clear the animal slot and return whatever was in it."""
        animal, self.animal = self.animal, None
        return animal
