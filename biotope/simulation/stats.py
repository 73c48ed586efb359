"""Population statistics — per-species counts and a rolling history."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

from biotope.life.animal import AnimalType
from biotope.life.plant import PlantType

if TYPE_CHECKING:
    from biotope.world.grid import Grid

CSV_HEADER = ("time", "oak", "pine", "grass", "arid", "rabbit", "wolf")


@dataclass(frozen=True)
class PopulationStats:
    """Counts of every plant and animal species on the grid."""

    oak: int = 0
    pine: int = 0
    grass: int = 0
    arid: int = 0
    rabbit: int = 0
    wolf: int = 0

    @classmethod
    def from_grid(cls, grid: Grid) -> PopulationStats:
        """Count occupants with a single read-only scan of ``grid``."""
        plants = dict.fromkeys(PlantType, 0)
        animals = dict.fromkeys(AnimalType, 0)
        for cell in grid.iter_cells():
            if cell.plant is not None:
                plants[cell.plant.plant_type] += 1
            if cell.animal is not None:
                animals[cell.animal.animal_type] += 1
        return cls(
            oak=plants[PlantType.OAK],
            pine=plants[PlantType.PINE],
            grass=plants[PlantType.GRASS],
            arid=plants[PlantType.ARID_GRASS],
            rabbit=animals[AnimalType.RABBIT],
            wolf=animals[AnimalType.WOLF],
        )

    def as_dict(self) -> dict[str, int]:
        """Return the counts keyed by short species name."""
        return asdict(self)


@dataclass
class StatsHistory:
    """Bounded record of population counts over time.

    Attributes:
        max_history: Oldest records are dropped beyond this many.
        records: ``(time, stats)`` pairs, oldest first.
    """

    max_history: int = 300
    records: list[tuple[int, PopulationStats]] = field(default_factory=list)

    def record(self, time: int, stats: PopulationStats) -> None:
        """Append a sample, evicting the oldest if the history is full."""
        self.records.append((time, stats))
        if len(self.records) > self.max_history:
            del self.records[0]

    def to_csv_rows(self) -> list[list[str]]:
        """Return the history as CSV rows, header first."""
        rows = [list(CSV_HEADER)]
        for time, stats in self.records:
            counts = stats.as_dict()
            rows.append([str(time), *(str(counts[k]) for k in CSV_HEADER[1:])])
        return rows
