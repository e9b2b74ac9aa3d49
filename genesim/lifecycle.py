"""Population lifecycle: seeding, reproduction and generation turnover."""

import logging
import math
from typing import Dict, List

from .environment import reset_food
from .organism import Organism, create_organism
from .spatial import clamp_position

logger = logging.getLogger(__name__)

CHILD_ENERGY_SHARE = 0.3
PARENT_ENERGY_SHARE = 0.7
CHILD_SCATTER = 10.0

# A generation ends once this share of the food is gone.
FOOD_EXHAUSTION_RATIO = 0.9


def create_initial_population(simulation, size: int) -> List[Organism]:
    """Seed ``size`` unrelated organisms with ids drawn from the simulation counter."""
    return [
        create_organism(
            simulation.environment,
            simulation.allocate_id(),
            simulation.toolbox.genome,
            rng=simulation.rng,
        )
        for _ in range(size)
    ]


def reproduce(parent: Organism, simulation) -> Organism:
    """Split the parent's energy with a mutated child appended to the population."""
    rng = simulation.rng
    child = Organism(
        simulation.allocate_id(),
        simulation.toolbox.mutate(parent.genome),
        parent.x + rng.uniform(-CHILD_SCATTER, CHILD_SCATTER),
        parent.y + rng.uniform(-CHILD_SCATTER, CHILD_SCATTER),
        rng.random() * 2 * math.pi,
        energy=parent.energy * CHILD_ENERGY_SHARE,
    )
    clamp_position(child, simulation.environment)
    child.markReproduced()

    parent.energy *= PARENT_ENERGY_SHARE
    parent.children += 1
    parent.markReproduced()

    simulation.population.append(child)
    return child


def generation_over(simulation) -> bool:
    return (
        not simulation.population
        or simulation.generation_age >= simulation.generation_max_age
        or simulation.environment.consumed_ratio() > FOOD_EXHAUSTION_RATIO
    )


def start_new_generation(simulation) -> Dict[str, object]:
    """
    Close the current generation and open the next one.

    An extinct population is replaced by fresh random organisms; otherwise the
    evolved survivors carry over into a restocked arena. Returns the result
    record of the generation that just ended.
    """
    statistics = simulation.statistics
    record = {
        "generation": simulation.generation,
        "bestFitness": statistics.best_fitness,
        "averageFitness": statistics.average_fitness,
        "populationSize": len(simulation.population),
    }

    simulation.generation += 1
    simulation.generation_age = 0
    statistics.reset_history()

    if not simulation.population:
        simulation.population = create_initial_population(simulation, simulation.config.population_size)
        logger.info("Generation %d created with a fresh population", simulation.generation)
    else:
        reset_food(simulation.environment, rng=simulation.rng)
        logger.info("Generation %d created from the evolved population", simulation.generation)

    return record
