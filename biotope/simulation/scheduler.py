"""Schedulers — the two strategies for advancing a world by one tick.

Both walk the same grid.  The strategy is picked once, when the world is
built, from ``SimulationConfig.mode``.

- ``FullFidelityScheduler`` runs every plant and animal's complete
  decision logic every tick.
- ``StaticScheduler`` keeps plants on their normal lifecycle but reduces
  animals to cached-velocity motion, with a rotating tenth of them making
  a "decision" (ageing, old-age death and respawn) each tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from biotope.life.animal import UPDATE_SLOTS
from biotope.simulation.config import SchedulingMode

if TYPE_CHECKING:
    from biotope.simulation.engine import World


class Scheduler(Protocol):
    """Advances every occupant of a world by one tick."""

    def run_tick(self, world: World) -> None:
        """Apply one tick of updates to ``world``."""


def _update_plants(world: World) -> None:
    track_ground = world.config.track_ground_cover
    for cell in world.grid.iter_cells():
        if cell.plant is not None:
            cell.plant.update(world, cell)
        if track_ground and cell.is_land:
            world.update_ground_cover(cell)


@dataclass
class FullFidelityScheduler:
    """Every entity runs its full behaviour in one row-major pass."""

    def run_tick(self, world: World) -> None:
        """Reset move flags, then update each cell's plant and animal."""
        for cell in world.grid.iter_cells():
            if cell.animal is not None:
                cell.animal.has_moved = False

        track_ground = world.config.track_ground_cover
        for cell in world.grid.iter_cells():
            if cell.plant is not None:
                cell.plant.update(world, cell)
            animal = cell.animal
            if animal is not None and not animal.has_moved:
                animal.update(world, cell)
            if track_ground and cell.is_land:
                world.update_ground_cover(cell)


@dataclass
class StaticScheduler:
    """Time-sliced, velocity-driven animal motion for large populations."""

    def run_tick(self, world: World) -> None:
        """Update plants, then move every animal once along its heading."""
        _update_plants(world)

        occupied = [
            (cell, cell.animal)
            for cell in world.grid.iter_cells()
            if cell.animal is not None
        ]
        for _, animal in occupied:
            animal.has_moved = False

        slot = world.time % UPDATE_SLOTS
        for cell, animal in occupied:
            if cell.animal is not animal or animal.has_moved:
                continue
            if animal.update_slot == slot:
                animal.age += UPDATE_SLOTS
                if animal.age > animal.traits.lifespan:
                    cell.remove_animal()
                    world.respawn(animal.animal_type)
                    continue
            animal.move_static(world, cell)


def make_scheduler(mode: SchedulingMode) -> Scheduler:
    """Return the scheduling strategy for ``mode``."""
    match mode:
        case SchedulingMode.FULL:
            return FullFidelityScheduler()
        case SchedulingMode.STATIC:
            return StaticScheduler()
    msg = f"unsupported scheduling mode {mode!r}"
    raise ValueError(msg)
