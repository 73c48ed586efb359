"""Config — load simulation parameters from YAML files.

All tunable constants (world size, terrain generation, species biology,
scheduling mode) live in YAML and are parsed into typed dataclasses here.
The core treats a loaded config as immutable input.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from biotope.life.animal import AnimalType
from biotope.life.plant import PlantType


class SchedulingMode(Enum):
    """How the world advances animals each tick."""

    FULL = "full"
    STATIC = "static"


@dataclass(frozen=True)
class PlantProfile:
    """Biological constants for one plant species.

    Attributes:
        update_frequency: Ticks between logic evaluations.
        lifespan: Age after which the plant is at risk of dying of old age.
        maturity_age: Age before which the plant does not spread.
        reproduction_chance: Base spread probability per evaluation.
        water_range: Tolerated distance to water before drought stress.
        max_energy: Grazable energy capacity.
        regen_rate: Energy regained per evaluation.
    """

    update_frequency: int
    lifespan: int
    maturity_age: int
    reproduction_chance: float
    water_range: int
    max_energy: float
    regen_rate: float


@dataclass(frozen=True)
class AnimalProfile:
    """Founding biological constants for one animal species.

    Offspring inherit mutated copies of these values through
    ``AnimalTraits``; the profile itself never changes.
    """

    lifespan: int
    maturity_age: int
    repro_cooldown: int
    litter_min: int
    litter_max: int
    energy: float
    metabolism: float
    baby_energy_mult: float
    baby_metabolism_mult: float
    gain: float
    eat_speed: float
    satiety_threshold: float
    reproduction_threshold: float
    reproduction_chance: float
    vision: int
    speed: float


def default_plant_profiles() -> dict[PlantType, PlantProfile]:
    """Return the stock plant species table (1 tick = 1 hour)."""
    return {
        PlantType.OAK: PlantProfile(
            update_frequency=24,
            lifespan=1_752_000,
            maturity_age=131_400,
            reproduction_chance=0.005,
            water_range=30,
            max_energy=2000.0,
            regen_rate=0.5,
        ),
        PlantType.PINE: PlantProfile(
            update_frequency=24,
            lifespan=1_314_000,
            maturity_age=131_400,
            reproduction_chance=0.008,
            water_range=20,
            max_energy=2000.0,
            regen_rate=0.5,
        ),
        PlantType.GRASS: PlantProfile(
            update_frequency=1,
            lifespan=8760,
            maturity_age=24,
            reproduction_chance=0.15,
            water_range=80,
            max_energy=50.0,
            regen_rate=1.5,
        ),
        PlantType.ARID_GRASS: PlantProfile(
            update_frequency=1,
            lifespan=17_520,
            maturity_age=48,
            reproduction_chance=0.1,
            water_range=120,
            max_energy=40.0,
            regen_rate=0.8,
        ),
    }


def default_animal_profiles() -> dict[AnimalType, AnimalProfile]:
    """Return the stock animal species table."""
    return {
        AnimalType.RABBIT: AnimalProfile(
            lifespan=43_800,
            maturity_age=1000,
            repro_cooldown=500,
            litter_min=3,
            litter_max=6,
            energy=100.0,
            metabolism=1.0,
            baby_energy_mult=0.33,
            baby_metabolism_mult=0.5,
            gain=30.0,
            eat_speed=5.0,
            satiety_threshold=0.8,
            reproduction_threshold=0.8,
            reproduction_chance=0.05,
            vision=5,
            speed=1.0,
        ),
        AnimalType.WOLF: AnimalProfile(
            lifespan=105_120,
            maturity_age=8000,
            repro_cooldown=4000,
            litter_min=2,
            litter_max=5,
            energy=250.0,
            metabolism=0.8,
            baby_energy_mult=0.4,
            baby_metabolism_mult=0.6,
            gain=80.0,
            eat_speed=0.0,
            satiety_threshold=0.8,
            reproduction_threshold=0.9,
            reproduction_chance=0.01,
            vision=10,
            speed=2.0,
        ),
    }


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_size: Side length of the square world grid.
        water_level: Height below which a tile is water.
        river_count: Number of steepest-descent rivers to carve.
        smoothing_passes: Majority-neighbour passes over the coastline.
        terrain_scale: Base frequency of the height noise.
        tree_density: Relative density of trees at seeding.
        grass_density: Relative density of grass at seeding.
        rabbit_count: Initial herbivore population.
        wolf_count: Initial predator population.
        drought_penalty: Per-step-beyond-range drought stress weight.
        mode: Full-fidelity or time-sliced scheduling.
        static_predator_speed: Cells per tick predators glide in static mode.
        track_ground_cover: Re-derive forest floor each tick.
        ticks_per_day: Ticks in one simulated day.
        days_per_year: Days in one simulated year.
        plants: Per-species plant constants.
        animals: Per-species animal constants.
    """

    seed: int = 12347
    world_size: int = 300
    water_level: float = 0.39
    river_count: int = 20
    smoothing_passes: int = 3
    terrain_scale: float = 0.02
    tree_density: float = 0.05
    grass_density: float = 0.1
    rabbit_count: int = 800
    wolf_count: int = 20
    drought_penalty: float = 0.01
    mode: SchedulingMode = SchedulingMode.FULL
    static_predator_speed: float = 0.5
    track_ground_cover: bool = True
    ticks_per_day: int = 24
    days_per_year: int = 365

    plants: dict[PlantType, PlantProfile] = field(
        default_factory=default_plant_profiles,
    )
    animals: dict[AnimalType, AnimalProfile] = field(
        default_factory=default_animal_profiles,
    )

    @property
    def ticks_per_year(self) -> int:
        """Return the number of ticks in one simulated year."""
        return self.ticks_per_day * self.days_per_year

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a mode or species name is not recognised.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Build a config from an already-parsed mapping.

        Raises:
            ValueError: If a mode or species name is not recognised.
        """
        plants = default_plant_profiles()
        for name, overrides in (data.get("plants") or {}).items():
            ptype = _lookup(PlantType, name)
            plants[ptype] = replace(plants[ptype], **overrides)

        animals = default_animal_profiles()
        for name, overrides in (data.get("animals") or {}).items():
            atype = _lookup(AnimalType, name)
            animals[atype] = replace(animals[atype], **overrides)

        return cls(
            seed=data.get("seed", cls.seed),
            world_size=data.get("world_size", cls.world_size),
            water_level=data.get("water_level", cls.water_level),
            river_count=data.get("river_count", cls.river_count),
            smoothing_passes=data.get("smoothing_passes", cls.smoothing_passes),
            terrain_scale=data.get("terrain_scale", cls.terrain_scale),
            tree_density=data.get("tree_density", cls.tree_density),
            grass_density=data.get("grass_density", cls.grass_density),
            rabbit_count=data.get("rabbit_count", cls.rabbit_count),
            wolf_count=data.get("wolf_count", cls.wolf_count),
            drought_penalty=data.get("drought_penalty", cls.drought_penalty),
            mode=_lookup(SchedulingMode, data.get("mode", cls.mode.value)),
            static_predator_speed=data.get(
                "static_predator_speed",
                cls.static_predator_speed,
            ),
            track_ground_cover=data.get(
                "track_ground_cover",
                cls.track_ground_cover,
            ),
            ticks_per_day=data.get("ticks_per_day", cls.ticks_per_day),
            days_per_year=data.get("days_per_year", cls.days_per_year),
            plants=plants,
            animals=animals,
        )


def _lookup(enum_cls: type[Enum], name: str) -> Any:
    """Resolve a case-insensitive member name or value of ``enum_cls``."""
    key = str(name).lower()
    for member in enum_cls:
        if member.name.lower() == key or str(member.value).lower() == key:
            return member
    msg = f"unknown {enum_cls.__name__} {name!r}"
    raise ValueError(msg)
