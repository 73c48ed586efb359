"""Initial population — vegetation and animals for a fresh world.

Runs once after terrain generation.  A second noise layer decides where
forests stand; grass fills the gaps near water and arid grass the dry
margins.  Animals are dropped on random free land.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from biotope.core.random import ValueNoise
from biotope.life.animal import AnimalType
from biotope.life.plant import Plant, PlantType
from biotope.world.cell import GroundCover

if TYPE_CHECKING:
    from biotope.simulation.engine import World
    from biotope.world.cell import Cell

# -- Constants ---------------------------------------------------------------

_FOREST_SCALE = 0.04
_FOREST_OFFSET = 5000
_DENSE_FOREST = 0.4
_LIGHT_FOREST = 0.0
_ARID_FALLBACK_CHANCE = 0.1
_ARID_SCATTER_CHANCE = 0.05
_DRY_MARGIN = 10  # land this far beyond arid range stays bare


def seed_vegetation(world: World) -> int:
    """Plant the initial vegetation across all land cells.

    Args:
        world: World whose terrain has already been generated.

    Returns:
        Number of plants placed.
    """
    forest = ValueNoise(world.rng)
    profiles = world.config.plants
    arid_range = profiles[PlantType.ARID_GRASS].water_range
    tree_density = world.config.tree_density
    grass_density = world.config.grass_density

    placed = 0
    for cell in world.grid.iter_cells():
        if not cell.is_land or cell.distance_to_water > arid_range + _DRY_MARGIN:
            continue

        density = forest.sample(
            (cell.x + _FOREST_OFFSET) * _FOREST_SCALE,
            (cell.y + _FOREST_OFFSET) * _FOREST_SCALE,
        )
        roll = world.rng.next()

        candidate: PlantType | None = None
        if density > _DENSE_FOREST:
            if roll < tree_density * 14:
                candidate = PlantType.OAK if roll < 0.5 else PlantType.PINE
            else:
                cell.ground = GroundCover.FOREST_FLOOR
        elif density > _LIGHT_FOREST:
            if roll < tree_density * 4:
                candidate = PlantType.OAK
            elif roll < tree_density * 4 + grass_density * 2:
                candidate = PlantType.GRASS
        elif roll < tree_density * 0.1:
            candidate = PlantType.OAK
        elif roll < grass_density:
            candidate = PlantType.GRASS

        chosen = _fit_to_moisture(world, cell, candidate, roll)
        if chosen is None:
            continue
        plant = Plant.create(chosen, profiles[chosen], world.rng)
        plant.age = int(world.rng.range(0, plant.lifespan))
        cell.set_plant(plant)
        placed += 1
    return placed


def _fit_to_moisture(
    world: World,
    cell: Cell,
    candidate: PlantType | None,
    roll: float,
) -> PlantType | None:
    """Downgrade a candidate species to one the cell's moisture supports."""
    profiles = world.config.plants
    distance = cell.distance_to_water
    arid_range = profiles[PlantType.ARID_GRASS].water_range
    grass_range = profiles[PlantType.GRASS].water_range

    if candidate is None:
        if grass_range < distance <= arid_range and roll < _ARID_SCATTER_CHANCE:
            return PlantType.ARID_GRASS
        return None
    if distance <= profiles[candidate].water_range:
        return candidate
    if distance > arid_range:
        return None
    if candidate is PlantType.GRASS or roll < _ARID_FALLBACK_CHANCE:
        return PlantType.ARID_GRASS
    return None


def seed_animals(world: World) -> int:
    """Drop the initial rabbits, then wolves, on random free land.

    Returns:
        Number of animals placed.
    """
    placed = 0
    for animal_type, count in (
        (AnimalType.RABBIT, world.config.rabbit_count),
        (AnimalType.WOLF, world.config.wolf_count),
    ):
        for _ in range(count):
            if world.spawn_animal(animal_type, random_age=True) is not None:
                placed += 1
    return placed
