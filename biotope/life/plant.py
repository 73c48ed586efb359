"""Plant — rooted vegetation with grazable energy.

Plants regenerate energy, die of drought or old age, and spread onto
nearby free land.  The species set is closed: grasses spread to direct
neighbours every tick, while trees evaluate coarsely and scatter seeds
over a wider radius.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biotope.core.random import SeededRandom
    from biotope.simulation.config import PlantProfile
    from biotope.simulation.engine import World
    from biotope.world.cell import Cell

# -- Constants ---------------------------------------------------------------

_BASE_DEATH_CHANCE = 0.0005
_OLD_AGE_CHANCE = 0.05  # grass: reprieve roll; tree: death roll
_GRASS_SPREAD_SCALE = 1.0 / 12.0  # profile chance is per 12 ticks
_GRASS_SPREAD_SLACK = 5  # water-range margin for same-species seedlings
_ARID_SPREAD_SLACK = 10  # margin within which grass seeds arid grass
_TREE_SEED_RADIUS = 6
_TREE_SEED_ATTEMPTS = 15
_TREE_SPREAD_SLACK = 10


class PlantType(Enum):
    """Plant species."""

    GRASS = "grass"
    ARID_GRASS = "arid_grass"
    OAK = "oak"
    PINE = "pine"

    @property
    def is_tree(self) -> bool:
        """Return True for the long-lived, coarse-updating species."""
        return self in (PlantType.OAK, PlantType.PINE)


@dataclass(eq=False)
class Plant:
    """A single plant rooted in one cell.

    Attributes:
        plant_type: Species.
        lifespan: Age past which the plant risks dying of old age.
        maturity_age: Minimum age for spreading.
        reproduction_chance: Base spread probability per evaluation.
        water_range: Tolerated distance to water.
        max_energy: Energy capacity (0 means not grazable).
        current_energy: Energy left to graze, in ``[0, max_energy]``.
        regen_rate: Energy regained per evaluation.
        update_frequency: Ticks between evaluations.
        offset: Phase shift so same-species plants evaluate on different ticks.
        age: Ticks since creation.
    """

    plant_type: PlantType
    lifespan: int
    maturity_age: int
    reproduction_chance: float
    water_range: int
    max_energy: float
    current_energy: float
    regen_rate: float
    update_frequency: int = 1
    offset: int = 0
    age: int = 0

    @classmethod
    def create(
        cls,
        plant_type: PlantType,
        profile: PlantProfile,
        rng: SeededRandom,
    ) -> Plant:
        """Create a full-energy plant with a random evaluation phase."""
        frequency = max(1, profile.update_frequency)
        return cls(
            plant_type=plant_type,
            lifespan=profile.lifespan,
            maturity_age=profile.maturity_age,
            reproduction_chance=profile.reproduction_chance,
            water_range=profile.water_range,
            max_energy=profile.max_energy,
            current_energy=profile.max_energy,
            regen_rate=profile.regen_rate,
            update_frequency=frequency,
            offset=int(rng.next() * frequency),
        )

    @property
    def is_grazable(self) -> bool:
        """Return True if animals can feed on this plant."""
        return self.max_energy > 0

    def consume(self, amount: float) -> float:
        """Remove up to ``amount`` energy and return how much was taken."""
        if self.current_energy <= 0 or amount <= 0:
            return 0.0
        actual = min(amount, self.current_energy)
        self.current_energy -= actual
        return actual

    def update(self, world: World, cell: Cell) -> None:
        """Run one tick of the plant lifecycle.

        Args:
            world: Owning world (time, RNG, config, grid).
            cell: The cell this plant is rooted in.
        """
        if (world.time + self.offset) % self.update_frequency != 0:
            return
        self.age += self.update_frequency

        if self.is_grazable and self.current_energy <= 0:
            cell.remove_plant()
            return
        if self.current_energy < self.max_energy:
            self.current_energy = min(
                self.max_energy,
                self.current_energy + self.regen_rate,
            )

        match self.plant_type:
            case PlantType.GRASS | PlantType.ARID_GRASS:
                self._update_grass(world, cell)
            case PlantType.OAK | PlantType.PINE:
                self._update_tree(world, cell)

    # -- Private lifecycle methods --

    def _drought_stress(self, cell: Cell) -> int:
        return max(0, cell.distance_to_water - self.water_range)

    def _survives_drought(self, world: World, cell: Cell) -> bool:
        death_chance = (
            _BASE_DEATH_CHANCE
            + self._drought_stress(cell) * world.config.drought_penalty
        )
        return world.rng.next() > death_chance

    def _update_grass(self, world: World, cell: Cell) -> None:
        """Grass: die unless reprieved, then maybe seed a neighbour."""
        survived = self._survives_drought(world, cell)
        if (self.age > self.lifespan or not survived) and (
            not survived or world.rng.next() > _OLD_AGE_CHANCE
        ):
            cell.remove_plant()
            return

        if self.current_energy < self.max_energy * 0.5:
            return
        chance = (
            self.reproduction_chance * _GRASS_SPREAD_SCALE
            - self._drought_stress(cell) * world.config.drought_penalty
        )
        if self.age < self.maturity_age or world.rng.next() >= chance:
            return

        neighbours = world.grid.neighbours(cell.x, cell.y)
        if not neighbours:
            return
        target = world.rng.choice(neighbours)
        if not target.is_land or target.plant is not None:
            return

        child_type: PlantType | None = None
        if target.distance_to_water <= self.water_range + _GRASS_SPREAD_SLACK:
            child_type = self.plant_type
        elif (
            self.plant_type is PlantType.GRASS
            and target.distance_to_water <= self.water_range + _ARID_SPREAD_SLACK
        ):
            child_type = PlantType.ARID_GRASS
        if child_type is not None:
            profile = world.config.plants[child_type]
            target.set_plant(Plant.create(child_type, profile, world.rng))

    def _update_tree(self, world: World, cell: Cell) -> None:
        """Tree: drought always kills, old age only occasionally."""
        survived = self._survives_drought(world, cell)
        if not survived or (
            self.age > self.lifespan and world.rng.next() < _OLD_AGE_CHANCE
        ):
            cell.remove_plant()
            return

        chance = (
            self.reproduction_chance
            - self._drought_stress(cell) * world.config.drought_penalty
        )
        if self.age > self.maturity_age and world.rng.next() < chance:
            self._scatter_seed(world, cell)

    def _scatter_seed(self, world: World, cell: Cell) -> None:
        """Try a handful of random spots within the seed radius."""
        span = _TREE_SEED_RADIUS * 2 + 1
        for _ in range(_TREE_SEED_ATTEMPTS):
            tx = cell.x + int(world.rng.next() * span) - _TREE_SEED_RADIUS
            ty = cell.y + int(world.rng.next() * span) - _TREE_SEED_RADIUS
            if not world.grid.is_valid(tx, ty):
                continue
            target = world.grid.cells[ty][tx]
            if not target.is_land or target.plant is not None:
                continue
            if target.distance_to_water > self.water_range + _TREE_SPREAD_SLACK:
                continue
            profile = world.config.plants[self.plant_type]
            target.set_plant(Plant.create(self.plant_type, profile, world.rng))
            return
