"""Traits — heritable biological parameters for one animal.

Founders take their traits straight from the species profile.  Each
offspring receives an independently mutated copy of its parent's traits,
so lineages drift over generations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biotope.core.random import SeededRandom
    from biotope.simulation.config import AnimalProfile

DEFAULT_VARIANCE = 0.1
_SATIETY_VARIANCE = 0.05
_SATIETY_BOUNDS = (0.5, 1.0)
_MIN_VISION = 1
_MIN_SPEED = 0.1


def mutate(value: float, rng: SeededRandom, variance: float = DEFAULT_VARIANCE) -> float:
    """Scale ``value`` by a random factor in ``[1 - variance, 1 + variance)``."""
    return value * (1.0 + rng.uniform(variance))


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


@dataclass(frozen=True)
class AnimalTraits:
    """Per-individual biology.

    Attributes:
        lifespan: Age at which the animal dies of old age.
        maturity_age: Age at which juvenile multipliers stop applying.
        repro_cooldown: Minimum ticks between litters.
        litter_min: Smallest litter size.
        litter_max: Largest litter size.
        base_energy: Adult energy capacity.
        base_metabolism: Adult energy cost per tick.
        baby_energy_mult: Juvenile fraction of ``base_energy``.
        baby_metabolism_mult: Juvenile fraction of ``base_metabolism``.
        gain: Energy gained from a kill.
        eat_speed: Maximum energy grazed per tick.
        satiety_threshold: Energy fraction below which the animal seeks food.
        reproduction_threshold: Energy fraction required to breed.
        reproduction_chance: Probability of breeding when eligible.
        vision: Search radius in cells.
        speed: Strike range for predators.
    """

    lifespan: int
    maturity_age: float
    repro_cooldown: float
    litter_min: int
    litter_max: int
    base_energy: float
    base_metabolism: float
    baby_energy_mult: float
    baby_metabolism_mult: float
    gain: float
    eat_speed: float
    satiety_threshold: float
    reproduction_threshold: float
    reproduction_chance: float
    vision: int
    speed: float

    @classmethod
    def from_profile(cls, profile: AnimalProfile) -> AnimalTraits:
        """Return founder traits equal to the species profile."""
        return cls(
            lifespan=profile.lifespan,
            maturity_age=profile.maturity_age,
            repro_cooldown=profile.repro_cooldown,
            litter_min=profile.litter_min,
            litter_max=profile.litter_max,
            base_energy=profile.energy,
            base_metabolism=profile.metabolism,
            baby_energy_mult=profile.baby_energy_mult,
            baby_metabolism_mult=profile.baby_metabolism_mult,
            gain=profile.gain,
            eat_speed=profile.eat_speed,
            satiety_threshold=profile.satiety_threshold,
            reproduction_threshold=profile.reproduction_threshold,
            reproduction_chance=profile.reproduction_chance,
            vision=profile.vision,
            speed=profile.speed,
        )

    def mutated(
        self,
        rng: SeededRandom,
        variance: float = DEFAULT_VARIANCE,
    ) -> AnimalTraits:
        """Return an offspring copy with every continuous trait perturbed.

        Lifespan and litter bounds are inherited unchanged.  Satiety drifts
        more slowly and stays within ``[0.5, 1.0]``; fractions stay valid
        fractions; vision stays a whole number of cells.

        Args:
            rng: Stream the perturbations are drawn from.
            variance: Maximum relative change per trait.
        """
        return AnimalTraits(
            lifespan=self.lifespan,
            maturity_age=mutate(self.maturity_age, rng, variance),
            repro_cooldown=mutate(self.repro_cooldown, rng, variance),
            litter_min=self.litter_min,
            litter_max=self.litter_max,
            base_energy=mutate(self.base_energy, rng, variance),
            base_metabolism=mutate(self.base_metabolism, rng, variance),
            baby_energy_mult=_clamp(
                mutate(self.baby_energy_mult, rng, variance), 0.01, 1.0
            ),
            baby_metabolism_mult=_clamp(
                mutate(self.baby_metabolism_mult, rng, variance), 0.01, 1.0
            ),
            gain=mutate(self.gain, rng, variance),
            eat_speed=mutate(self.eat_speed, rng, variance),
            satiety_threshold=_clamp(
                mutate(self.satiety_threshold, rng, _SATIETY_VARIANCE),
                *_SATIETY_BOUNDS,
            ),
            reproduction_threshold=min(
                1.0, mutate(self.reproduction_threshold, rng, variance)
            ),
            reproduction_chance=_clamp(
                mutate(self.reproduction_chance, rng, variance), 0.0, 1.0
            ),
            vision=max(_MIN_VISION, round(mutate(self.vision, rng, variance))),
            speed=max(_MIN_SPEED, mutate(self.speed, rng, variance)),
        )
