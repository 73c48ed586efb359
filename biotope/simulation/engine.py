"""World — owns all simulation state and the tick loop.

Construction generates terrain, then seeds vegetation and animals, all
from one seeded stream.  Each ``tick``:

1. Advance the clock and clear last tick's events.
2. Hand the grid to the scheduling strategy picked at construction
   (full-fidelity or static), which updates plants, animals and ground
   cover in place.
"""

from __future__ import annotations

import logging
from dataclasses import InitVar, dataclass, field, replace

from biotope.core.random import SeededRandom
from biotope.life.animal import Animal, AnimalType
from biotope.life.plant import Plant, PlantType
from biotope.life.traits import AnimalTraits
from biotope.simulation.config import SchedulingMode, SimulationConfig
from biotope.simulation.events import EventKind, SimulationEvent
from biotope.simulation.scheduler import Scheduler, make_scheduler
from biotope.simulation.seeding import seed_animals, seed_vegetation
from biotope.simulation.stats import PopulationStats
from biotope.world.cell import Cell, GroundCover
from biotope.world.grid import Grid
from biotope.world.terrain import generate_terrain

logger = logging.getLogger(__name__)

_SPAWN_ATTEMPTS = 50
_FOUNDER_AGE_FRACTION = 0.6
_FOREST_NEIGHBOURS = 2  # adjacent trees needed to turn ground into forest floor
_FOREST_DECAY_CHANCE = 0.05


@dataclass
class World:
    """A seeded ecosystem on a square grid.

    Attributes:
        config: Loaded simulation configuration (treated as read-only).
        grid: The spatial grid.
        rng: Master seeded random stream.
        scheduler: Strategy that advances occupants each tick.
        time: Number of ticks run so far.
        events: Notable occurrences from the most recent tick.
    """

    config: SimulationConfig
    prebuilt: InitVar[Grid | None] = None
    grid: Grid = field(init=False)
    rng: SeededRandom = field(init=False)
    scheduler: Scheduler = field(init=False, repr=False)
    time: int = 0
    events: list[SimulationEvent] = field(init=False, default_factory=list)
    _next_id: int = field(init=False, default=0, repr=False)
    _ready: bool = field(init=False, default=False, repr=False)

    def __post_init__(self, prebuilt: Grid | None) -> None:
        """Build terrain and initial populations, or adopt a prebuilt grid."""
        self.rng = SeededRandom(self.config.seed)
        self.scheduler = make_scheduler(self.config.mode)
        if prebuilt is not None:
            self.grid = prebuilt
        else:
            size = self.config.world_size
            self.grid = Grid(width=size, height=size)
            generate_terrain(self.grid, self.rng, self.config)
            plants = seed_vegetation(self)
            animals = seed_animals(self)
            logger.debug(
                "World seed=%d size=%d: %d plants, %d animals, %s mode",
                self.config.seed,
                size,
                plants,
                animals,
                self.config.mode.value,
            )
        self._ready = True

    @classmethod
    def create(
        cls,
        size: int,
        seed: int,
        config: SimulationConfig | None = None,
    ) -> World:
        """Build a world of ``size`` x ``size`` cells from ``seed``.

        Args:
            size: Side length of the grid.
            seed: RNG seed; the same pair always yields the same world.
            config: Base configuration (defaults if omitted).
        """
        base = config if config is not None else SimulationConfig()
        return cls(config=replace(base, world_size=size, seed=seed))

    @classmethod
    def from_grid(cls, config: SimulationConfig, grid: Grid) -> World:
        """Wrap a hand-built grid without generating terrain or life."""
        return cls(config=config, prebuilt=grid)

    # -- Tick loop --

    def tick(self) -> None:
        """Advance the simulation by one tick.

        Raises:
            RuntimeError: If the world has not finished construction.
        """
        if not self._ready:
            msg = "world is still under construction"
            raise RuntimeError(msg)
        self.time += 1
        self.events = []
        self.scheduler.run_tick(self)

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks."""
        for _ in range(ticks):
            self.tick()

    def get_stats(self) -> PopulationStats:
        """Return per-species counts from a read-only scan of the grid."""
        return PopulationStats.from_grid(self.grid)

    def record_kill(self, x: int, y: int) -> None:
        """Buffer a kill event at ``(x, y)`` for this tick."""
        self.events.append(SimulationEvent(kind=EventKind.KILL, x=x, y=y))

    def next_animal_id(self) -> int:
        """Allocate a fresh animal identifier."""
        animal_id = self._next_id
        self._next_id += 1
        return animal_id

    # -- Population management --

    def create_animal(self, animal_type: AnimalType) -> Animal:
        """Create a founder of ``animal_type`` with stock traits (not placed)."""
        traits = AnimalTraits.from_profile(self.config.animals[animal_type])
        return Animal.spawn(self.next_animal_id(), animal_type, traits, self.rng)

    def create_plant(self, cell: Cell, plant_type: PlantType) -> Plant:
        """Root a fresh plant of ``plant_type`` in ``cell`` and return it."""
        plant = Plant.create(plant_type, self.config.plants[plant_type], self.rng)
        cell.set_plant(plant)
        return plant

    def spawn_animal(
        self,
        animal_type: AnimalType,
        *,
        random_age: bool = False,
    ) -> Animal | None:
        """Create an animal and drop it on a random free land cell.

        Args:
            animal_type: Species to spawn.
            random_age: Give the animal a random age below 60% of its
                lifespan (used for the founding population).

        Returns:
            The placed animal, or None if no free land was found.
        """
        animal = self.create_animal(animal_type)
        for _ in range(_SPAWN_ATTEMPTS):
            x = int(self.rng.range(0, self.grid.width))
            y = int(self.rng.range(0, self.grid.height))
            cell = self.grid.cells[y][x]
            if cell.is_land and cell.animal is None:
                if random_age:
                    animal.age = int(
                        self.rng.range(
                            0,
                            animal.traits.lifespan * _FOUNDER_AGE_FRACTION,
                        ),
                    )
                animal.current_energy = animal.max_energy
                cell.set_animal(animal)
                return animal
        return None

    def respawn(self, animal_type: AnimalType) -> Animal | None:
        """Replace a dead animal with a newborn of the same species elsewhere."""
        animal = self.spawn_animal(animal_type)
        if animal is None:
            logger.info("No free land to respawn a %s", animal_type.value)
        return animal

    def find_animal(self, animal_id: int) -> Cell | None:
        """Return the cell holding the animal with ``animal_id``, if any."""
        for cell in self.grid.iter_cells():
            if cell.animal is not None and cell.animal.animal_id == animal_id:
                return cell
        return None

    def kill_animal(self, animal_id: int) -> bool:
        """Remove one animal by id.

        In static mode the population is held steady by respawning a
        same-species replacement elsewhere.

        Returns:
            True if an animal was removed.
        """
        cell = self.find_animal(animal_id)
        if cell is None:
            return False
        animal = cell.remove_animal()
        if animal is not None and self.config.mode is SchedulingMode.STATIC:
            self.respawn(animal.animal_type)
        return True

    def kill_all_animals(self) -> int:
        """Remove every animal without respawning any.

        Returns:
            Number of animals removed.
        """
        removed = 0
        for cell in self.grid.iter_cells():
            if cell.remove_animal() is not None:
                removed += 1
        return removed

    def update_ground_cover(self, cell: Cell) -> None:
        """Re-derive forest floor from the trees on and around ``cell``."""
        if cell.plant is not None and cell.plant.plant_type.is_tree:
            cell.ground = GroundCover.FOREST_FLOOR
            return

        trees = sum(
            1
            for n in self.grid.neighbours(cell.x, cell.y)
            if n.plant is not None and n.plant.plant_type.is_tree
        )
        if trees >= _FOREST_NEIGHBOURS:
            cell.ground = GroundCover.FOREST_FLOOR
        elif (
            cell.ground is GroundCover.FOREST_FLOOR
            and self.rng.next() < _FOREST_DECAY_CHANCE
        ):
            cell.ground = GroundCover.DIRT
