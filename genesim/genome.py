"""Heritable trait set for organisms and the variation operators acting on it."""

import random
from dataclasses import dataclass, replace
from typing import Dict, Tuple

from deap import base

# Initial sampling ranges for a freshly seeded genome.
SPEED_RANGE = (0.5, 2.5)
SENSOR_RANGE = (50.0, 150.0)
SIZE_RANGE = (5.0, 15.0)
METABOLISM_RANGE = (0.2, 0.8)
REPRODUCTION_THRESHOLD_RANGE = (100.0, 200.0)

SCALAR_TRAITS = ("speed", "sensor_range", "size", "metabolism", "reproduction_threshold")

MUTATION_FACTOR_RANGE = (0.8, 1.2)
AGGRESSIVENESS_DELTA = 0.1
COLOR_DELTA = 25

# Multiplicative mutation never drives a scalar trait below this floor.
TRAIT_FLOOR = 1e-3


@dataclass(frozen=True)
class Genome:
    """Immutable trait bundle; mutation always returns a new instance."""

    speed: float
    sensor_range: float
    size: float
    metabolism: float
    color: Tuple[int, int, int]
    reproduction_threshold: float
    aggressiveness: float

    def toDict(self) -> Dict[str, object]:
        return {
            "speed": self.speed,
            "sensorRange": self.sensor_range,
            "size": self.size,
            "metabolism": self.metabolism,
            "color": list(self.color),
            "reproductionThreshold": self.reproduction_threshold,
            "aggressiveness": self.aggressiveness,
        }


def _clamp(value, lower, upper):
    return max(lower, min(upper, value))


def random_genome(rng=random) -> Genome:
    """Draw every trait uniformly from its seeding range."""
    return Genome(
        speed=rng.uniform(*SPEED_RANGE),
        sensor_range=rng.uniform(*SENSOR_RANGE),
        size=rng.uniform(*SIZE_RANGE),
        metabolism=rng.uniform(*METABOLISM_RANGE),
        color=(rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255)),
        reproduction_threshold=rng.uniform(*REPRODUCTION_THRESHOLD_RANGE),
        aggressiveness=rng.random(),
    )


def mutate(genome: Genome, mutation_rate: float, rng=random) -> Genome:
    """
    Return a mutated copy of ``genome``.

    Each trait is perturbed independently with probability ``mutation_rate``:
    scalar traits are scaled by a factor in [0.8, 1.2], aggressiveness drifts by
    at most 0.1 and the colour channels shift by at most 25 each. The input
    genome is never modified.
    """
    changes: Dict[str, object] = {}

    for trait in SCALAR_TRAITS:
        if rng.random() < mutation_rate:
            factor = rng.uniform(*MUTATION_FACTOR_RANGE)
            changes[trait] = max(TRAIT_FLOOR, getattr(genome, trait) * factor)

    if rng.random() < mutation_rate:
        delta = rng.uniform(-AGGRESSIVENESS_DELTA, AGGRESSIVENESS_DELTA)
        changes["aggressiveness"] = _clamp(genome.aggressiveness + delta, 0.0, 1.0)

    if rng.random() < mutation_rate:
        changes["color"] = tuple(
            _clamp(channel + rng.randint(-COLOR_DELTA, COLOR_DELTA), 0, 255)
            for channel in genome.color
        )

    return replace(genome, **changes)


def build_toolbox(mutation_rate: float, rng=random) -> base.Toolbox:
    """Register the genome factory and mutation operator bound to one random source."""
    toolbox = base.Toolbox()
    toolbox.register("genome", random_genome, rng=rng)
    toolbox.register("mutate", mutate, mutation_rate=mutation_rate, rng=rng)
    return toolbox
