"""Animal — mobile agents that age, feed, breed and die.

Each Animal occupies exactly one cell and is advanced by the world's
scheduler.  Two behaviour sets exist:

- **Full fidelity** (``update``): metabolism, grazing or hunting,
  reproduction with trait mutation, and targeted movement.  Rabbits graze
  and seek the nearest grass; wolves strike prey within range, chase prey
  they can see, and otherwise wander away from other wolves.
- **Static** (``move_static``): cached-velocity motion only.  Rabbits hop
  in short bursts on a fixed phase; wolves glide continuously.  Both
  reflect off anything they cannot enter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biotope.core.random import SeededRandom
    from biotope.life.traits import AnimalTraits
    from biotope.simulation.engine import World
    from biotope.world.cell import Cell
    from biotope.world.grid import Grid

# -- Constants ---------------------------------------------------------------

REPRODUCTION_ENERGY_KEPT = 0.6  # a litter costs 40% of current energy
UPDATE_SLOTS = 10
_MIN_FORAGE_ENERGY = 5.0  # grass poorer than this is not worth walking to

_HOP_PERIOD = 25
_HOP_WINDOW = 3
_HOP_ID_STRIDE = 7
_HOP_TURN_CHANCE = 0.2
_REFLECT_JITTER = 0.3
_HEADING_DRIFT = 0.1


class AnimalType(Enum):
    """Animal species."""

    RABBIT = "rabbit"
    WOLF = "wolf"


@dataclass(eq=False)
class Animal:
    """A single animal agent.

    Attributes:
        animal_id: World-unique identifier.
        animal_type: Species.
        traits: Heritable biology.
        age: Ticks since birth.
        current_energy: Energy reserve, in ``[0, max_energy]``.
        last_reproduction_time: World tick of the last litter.
        has_moved: Set once the animal has acted this tick.
        vx: Static-mode heading, x component.
        vy: Static-mode heading, y component.
        update_slot: Static-mode decision slot (``tick % 10``).
        drift_x: Static-mode sub-cell progress, x component.
        drift_y: Static-mode sub-cell progress, y component.
    """

    animal_id: int
    animal_type: AnimalType
    traits: AnimalTraits
    age: int = 0
    current_energy: float = 0.0
    last_reproduction_time: int = 0
    has_moved: bool = False
    vx: float = 0.0
    vy: float = 0.0
    update_slot: int = 0
    drift_x: float = 0.0
    drift_y: float = 0.0

    @classmethod
    def spawn(
        cls,
        animal_id: int,
        animal_type: AnimalType,
        traits: AnimalTraits,
        rng: SeededRandom,
    ) -> Animal:
        """Create a newborn at full energy with a random cooldown phase and heading.

        Args:
            animal_id: Identifier allocated by the world.
            animal_type: Species.
            traits: Founder or inherited traits.
            rng: World stream.

        Returns:
            The new Animal, not yet placed on the grid.
        """
        animal = cls(
            animal_id=animal_id,
            animal_type=animal_type,
            traits=traits,
            last_reproduction_time=-int(rng.next() * traits.repro_cooldown),
            update_slot=int(rng.next() * UPDATE_SLOTS),
        )
        animal.current_energy = animal.max_energy
        animal.randomise_heading(rng)
        return animal

    @property
    def is_adult(self) -> bool:
        """Return True once juvenile multipliers no longer apply."""
        return self.age >= self.traits.maturity_age

    @property
    def max_energy(self) -> float:
        """Return the age-dependent energy capacity."""
        if self.is_adult:
            return self.traits.base_energy
        return self.traits.base_energy * self.traits.baby_energy_mult

    @property
    def metabolic_cost(self) -> float:
        """Return the energy spent per tick at the current age."""
        if self.is_adult:
            return self.traits.base_metabolism
        return self.traits.base_metabolism * self.traits.baby_metabolism_mult

    @property
    def is_hungry(self) -> bool:
        """Return True while energy is below the satiety threshold."""
        return self.current_energy < self.max_energy * self.traits.satiety_threshold

    # -- Full-fidelity behaviour --

    def update(self, world: World, cell: Cell) -> None:
        """Run one full-fidelity tick for this animal.

        Args:
            world: Owning world (grid, RNG, time, event buffer).
            cell: The cell this animal currently occupies.
        """
        if not self._metabolise(cell):
            return

        match self.animal_type:
            case AnimalType.RABBIT:
                self._update_herbivore(world, cell)
            case AnimalType.WOLF:
                self._update_predator(world, cell)

    def _metabolise(self, cell: Cell) -> bool:
        """Age, pay upkeep, and die if exhausted or old.

        Returns:
            False if the animal died and was removed from ``cell``.
        """
        self.age += 1
        self.current_energy -= self.metabolic_cost
        if self.current_energy <= 0 or self.age > self.traits.lifespan:
            cell.remove_animal()
            return False
        self.current_energy = min(self.current_energy, self.max_energy)
        return True

    def _update_herbivore(self, world: World, cell: Cell) -> None:
        """Graze, maybe breed, then move unless still feeding here."""
        plant = cell.plant
        if plant is not None and plant.is_grazable and self.is_hungry:
            wanted = min(self.max_energy - self.current_energy, self.traits.eat_speed)
            self.current_energy += plant.consume(wanted)
            if plant.current_energy <= 0:
                cell.remove_plant()

        self._maybe_reproduce(world, cell)

        plant = cell.plant
        if plant is not None and plant.current_energy > 0 and self.is_hungry:
            return

        moves = world.grid.free_land_neighbours(cell.x, cell.y)
        if not moves:
            return

        target: Cell | None = None
        if self.is_hungry:
            food = world.grid.find_closest(
                cell.x,
                cell.y,
                self.traits.vision,
                _has_forage,
                world.rng,
            )
            if food is not None:
                target = _step_toward(moves, food, world.rng)
        if target is None:
            target = world.rng.choice(moves)
        self._move(cell, target)

    def _update_predator(self, world: World, cell: Cell) -> None:
        """Strike or chase visible prey when hungry, otherwise disperse."""
        if self.is_hungry:
            prey = world.grid.find_closest(
                cell.x,
                cell.y,
                self.traits.vision,
                _has_prey,
                world.rng,
            )
            if prey is not None:
                distance = abs(prey.x - cell.x) + abs(prey.y - cell.y)
                if distance <= math.floor(self.traits.speed):
                    prey.remove_animal()
                    self.current_energy = min(
                        self.max_energy,
                        self.current_energy + self.traits.gain,
                    )
                    world.record_kill(prey.x, prey.y)
                    self._move(cell, prey)
                    self._maybe_reproduce(world, prey)
                    return

                moves = world.grid.free_land_neighbours(cell.x, cell.y)
                if moves:
                    step = _step_toward(moves, prey, world.rng)
                    self._move(cell, step)
                    self._maybe_reproduce(world, step)
                    return

        moves = world.grid.free_land_neighbours(cell.x, cell.y)
        if not moves:
            return
        uncrowded = [m for m in moves if not self._near_pack(world.grid, m)]
        target = world.rng.choice(uncrowded or moves)
        self._move(cell, target)
        self._maybe_reproduce(world, target)

    def _near_pack(self, grid: Grid, cell: Cell) -> bool:
        """Return True if another animal of this species is adjacent to ``cell``."""
        for n in grid.neighbours(cell.x, cell.y):
            other = n.animal
            if (
                other is not None
                and other is not self
                and other.animal_type is self.animal_type
            ):
                return True
        return False

    def _maybe_reproduce(self, world: World, cell: Cell) -> None:
        """Breed if adult, well fed, off cooldown, and the chance roll passes."""
        if not self.is_adult:
            return
        if self.current_energy < self.max_energy * self.traits.reproduction_threshold:
            return
        if world.time - self.last_reproduction_time <= self.traits.repro_cooldown:
            return
        if world.rng.next() < self.traits.reproduction_chance:
            self.reproduce(world, cell)

    def reproduce(self, world: World, cell: Cell) -> list[Animal]:
        """Pay the litter cost and place offspring on free land around ``cell``.

        Args:
            world: Owning world.
            cell: The parent's cell.

        Returns:
            The offspring actually placed (possibly fewer than the litter
            size when space is short).
        """
        self.current_energy *= REPRODUCTION_ENERGY_KEPT
        self.last_reproduction_time = world.time

        litter = world.rng.integer(self.traits.litter_min, self.traits.litter_max)
        offspring: list[Animal] = []
        for spot in world.grid.free_land_neighbours(cell.x, cell.y):
            if len(offspring) >= litter:
                break
            baby = Animal.spawn(
                world.next_animal_id(),
                self.animal_type,
                self.traits.mutated(world.rng),
                world.rng,
            )
            baby.has_moved = True
            spot.set_animal(baby)
            offspring.append(baby)
        return offspring

    def _move(self, source: Cell, target: Cell) -> None:
        source.remove_animal()
        target.set_animal(self)
        self.has_moved = True

    # -- Static-mode behaviour --

    def randomise_heading(self, rng: SeededRandom, speed: float = 1.0) -> None:
        """Point the cached velocity in a uniformly random direction."""
        angle = rng.range(0.0, 2.0 * math.pi)
        self.vx = math.cos(angle) * speed
        self.vy = math.sin(angle) * speed

    def hops_on(self, tick: int) -> bool:
        """Return True if ``tick`` falls inside this rabbit's hop window."""
        return (tick + self.animal_id * _HOP_ID_STRIDE) % _HOP_PERIOD < _HOP_WINDOW

    def move_static(self, world: World, cell: Cell) -> Cell:
        """Advance along the cached velocity without any foraging logic.

        Returns:
            The cell the animal occupies afterwards.
        """
        match self.animal_type:
            case AnimalType.RABBIT:
                return self._hop(world, cell)
            case AnimalType.WOLF:
                return self._glide(world, cell)
        return cell

    def _hop(self, world: World, cell: Cell) -> Cell:
        """Jump 1-2 cells along the heading during the hop window."""
        if not self.hops_on(world.time):
            return cell
        distance = 1 + int(world.rng.next() * 2)
        tx = cell.x + round(self.vx * distance)
        ty = cell.y + round(self.vy * distance)
        if not _is_open(world.grid, tx, ty):
            self._reflect(world.rng, 1.0)
            return cell

        target = world.grid.cells[ty][tx]
        self._move(cell, target)
        if world.rng.next() < _HOP_TURN_CHANCE:
            self.randomise_heading(world.rng)
        return target

    def _glide(self, world: World, cell: Cell) -> Cell:
        """Drift the heading slightly and advance by sub-cell steps."""
        speed = world.config.static_predator_speed
        self.vx += world.rng.uniform(_HEADING_DRIFT)
        self.vy += world.rng.uniform(_HEADING_DRIFT)
        self._renormalise(world.rng, speed)

        self.drift_x += self.vx
        self.drift_y += self.vy
        dx = int(self.drift_x)
        dy = int(self.drift_y)
        if dx == 0 and dy == 0:
            return cell

        tx, ty = cell.x + dx, cell.y + dy
        if not _is_open(world.grid, tx, ty):
            self._reflect(world.rng, speed)
            self.drift_x = self.drift_y = 0.0
            return cell

        target = world.grid.cells[ty][tx]
        self._move(cell, target)
        self.drift_x -= dx
        self.drift_y -= dy
        return target

    def _reflect(self, rng: SeededRandom, speed: float) -> None:
        """Bounce back off an obstacle with a little random scatter."""
        self.vx = -self.vx + rng.uniform(_REFLECT_JITTER)
        self.vy = -self.vy + rng.uniform(_REFLECT_JITTER)
        self._renormalise(rng, speed)

    def _renormalise(self, rng: SeededRandom, speed: float) -> None:
        norm = math.hypot(self.vx, self.vy)
        if norm == 0:
            self.randomise_heading(rng, speed)
            return
        self.vx = self.vx / norm * speed
        self.vy = self.vy / norm * speed


def _has_forage(cell: Cell) -> bool:
    plant = cell.plant
    return (
        plant is not None
        and plant.is_grazable
        and plant.current_energy > _MIN_FORAGE_ENERGY
        and cell.animal is None
    )


def _has_prey(cell: Cell) -> bool:
    return cell.animal is not None and cell.animal.animal_type is AnimalType.RABBIT


def _is_open(grid: Grid, x: int, y: int) -> bool:
    if not grid.is_valid(x, y):
        return False
    target = grid.cells[y][x]
    return target.is_land and target.animal is None


def _step_toward(moves: list[Cell], target: Cell, rng: SeededRandom) -> Cell:
    """Pick the move closest to ``target`` (Manhattan), ties uniformly."""
    best_dist = min(abs(m.x - target.x) + abs(m.y - target.y) for m in moves)
    best = [m for m in moves if abs(m.x - target.x) + abs(m.y - target.y) == best_dist]
    return best[0] if len(best) == 1 else rng.choice(best)
