"""Runtime logic for orchestrating the ecosystem simulation loop."""

import copy
import logging
import math
import random
from dataclasses import dataclass, fields, replace
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .environment import Environment, create_environment, regenerate_food
from .genome import build_toolbox
from .lifecycle import create_initial_population, generation_over, reproduce, start_new_generation
from .organism import Organism
from .spatial import find_nearest_food, move_organism, resolve_collisions, within_reach
from .statistics import Champion, FitnessTracker

logger = logging.getLogger(__name__)

GENERATION_MAX_AGE = 1000
AGING_RATE = 0.1

# Chance per tick that an organism with nothing in sight changes course.
WANDER_CHANCE = 0.05
WANDER_ANGLE = math.pi / 4

CONFIG_ALIASES = {
    "populationSize": "population_size",
    "mutationRate": "mutation_rate",
    "crossoverRate": "crossover_rate",
    "generationLimit": "generation_limit",
    "environmentWidth": "environment_width",
    "environmentHeight": "environment_height",
    "foodAmount": "food_amount",
    "obstacleAmount": "obstacle_amount",
}


@dataclass
class SimulationConfig:
    population_size: int = 20
    mutation_rate: float = 0.05
    crossover_rate: float = 0.7  # reserved, not used by the tick loop
    generation_limit: int = 100
    environment_width: float = 800.0
    environment_height: float = 600.0
    food_amount: int = 30
    obstacle_amount: int = 5
    seed: Optional[int] = None

    @classmethod
    def from_mapping(cls, options: Optional[Mapping] = None) -> "SimulationConfig":
        """Build a config from wire (camelCase) or snake_case keys; unknown keys are ignored."""
        known = {field.name: field for field in fields(cls)}
        values = {}
        for raw_key, raw_value in (options or {}).items():
            key = CONFIG_ALIASES.get(raw_key, raw_key)
            if key not in known or raw_value is None:
                continue
            values[key] = raw_value

        config = cls(**values)
        config.coerce()
        config.validate()
        return config

    def coerce(self) -> None:
        try:
            self.population_size = _as_int(self.population_size)
            self.generation_limit = _as_int(self.generation_limit)
            self.food_amount = _as_int(self.food_amount)
            self.obstacle_amount = _as_int(self.obstacle_amount)
            self.mutation_rate = float(self.mutation_rate)
            self.crossover_rate = float(self.crossover_rate)
            self.environment_width = float(self.environment_width)
            self.environment_height = float(self.environment_height)
            if self.seed is not None:
                self.seed = _as_int(self.seed)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid simulation configuration: {exc}") from exc

    def validate(self) -> None:
        if self.population_size <= 0:
            raise ValueError("populationSize must be greater than zero.")
        if self.generation_limit <= 0:
            raise ValueError("generationLimit must be greater than zero.")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("mutationRate must be between 0 and 1.")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ValueError("crossoverRate must be between 0 and 1.")
        for dimension in (self.environment_width, self.environment_height):
            if not math.isfinite(dimension) or dimension <= 0:
                raise ValueError("environment dimensions must be positive finite numbers.")
        if self.food_amount < 0:
            raise ValueError("foodAmount cannot be negative.")
        if self.obstacle_amount < 0:
            raise ValueError("obstacleAmount cannot be negative.")

    def toDict(self) -> Dict[str, object]:
        data = {
            wire_key: getattr(self, attribute)
            for wire_key, attribute in CONFIG_ALIASES.items()
        }
        if self.seed is not None:
            data["seed"] = self.seed
        return data


def _as_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class Snapshot:
    """Detached, read-only view of a simulation after a tick."""

    environment: Environment
    population: Tuple[Organism, ...]
    generation: int
    generation_age: float
    statistics: Mapping[str, float]
    current_best: Optional[Champion]
    all_time_best: Optional[Champion]
    is_finished: bool
    paused: bool
    speed: float

    def toDict(self) -> Dict[str, object]:
        return {
            "environment": self.environment.toDict(),
            "population": [organism.toDict() for organism in self.population],
            "generation": self.generation,
            "generationAge": self.generation_age,
            "statistics": dict(self.statistics),
            "currentBestOrganism": self.current_best.toDict() if self.current_best else None,
            "allTimeBestOrganism": self.all_time_best.toDict() if self.all_time_best else None,
            "isFinished": self.is_finished,
            "isPaused": self.paused,
            "speed": self.speed,
        }


class Simulation:
    """Aggregate root: one arena, its population and the controls that pace it."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.rng = random.Random(config.seed)
        self.toolbox = build_toolbox(config.mutation_rate, rng=self.rng)
        self.environment = create_environment(
            config.environment_width,
            config.environment_height,
            config.food_amount,
            config.obstacle_amount,
            rng=self.rng,
        )
        self.generation = 0
        self.generation_age = 0.0
        self.generation_max_age = GENERATION_MAX_AGE
        self.statistics = FitnessTracker()
        self.is_finished = False
        self.paused = False
        self.speed = 1.0
        self._next_id = 0
        self._listeners: List[Callable[[Dict[str, object]], None]] = []

        self.population: List[Organism] = create_initial_population(self, config.population_size)
        self.last_snapshot = self.snapshot()

    def allocate_id(self) -> str:
        """Hand out the next organism id; ids are never reused."""
        organism_id = f"organism-{self._next_id}"
        self._next_id += 1
        return organism_id

    @property
    def fitness_history(self):
        return self.statistics.history

    @property
    def logbook(self):
        return self.statistics.logbook

    def add_generation_listener(self, callback: Callable[[Dict[str, object]], None]) -> None:
        self._listeners.append(callback)

    def _notify_generation(self, record: Dict[str, object]) -> None:
        for callback in self._listeners:
            callback(record)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            environment=copy.deepcopy(self.environment),
            population=tuple(organism.clone() for organism in self.population),
            generation=self.generation,
            generation_age=self.generation_age,
            statistics=MappingProxyType(self.statistics.summary()),
            current_best=copy.deepcopy(self.statistics.current_best),
            all_time_best=copy.deepcopy(self.statistics.all_time_best),
            is_finished=self.is_finished,
            paused=self.paused,
            speed=self.speed,
        )


def create_simulation(config=None) -> Simulation:
    """Create a simulation from a SimulationConfig or a plain options mapping."""
    if not isinstance(config, SimulationConfig):
        config = SimulationConfig.from_mapping(config)
    return Simulation(config)


def _refresh_controls(simulation: Simulation) -> None:
    """Carry control changes into the latest snapshot without touching its tick data."""
    simulation.last_snapshot = replace(
        simulation.last_snapshot, paused=simulation.paused, speed=simulation.speed
    )


def toggle_pause(simulation: Simulation, paused: bool) -> None:
    simulation.paused = bool(paused)
    _refresh_controls(simulation)
    logger.debug("Simulation paused=%s", simulation.paused)


def set_speed(simulation: Simulation, speed: float) -> None:
    """Change the speed multiplier applied from the next tick onward."""
    try:
        multiplier = float(speed)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid speed multiplier: {speed!r}") from exc
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise ValueError("speed multiplier must be a positive number.")
    simulation.speed = multiplier
    _refresh_controls(simulation)
    logger.debug("Simulation speed set to %s", multiplier)


def _advance_organism(simulation: Simulation, organism: Organism, speed: float) -> None:
    """Run metabolism, foraging, movement, reproduction and scoring for one organism."""
    if not organism.isAlive():
        return

    genome = organism.genome
    organism.decayMarker(speed)
    organism.energy -= genome.metabolism * speed
    organism.age += AGING_RATE * speed

    if organism.energy <= 0:
        organism.kill()
        return

    environment = simulation.environment
    food, distance = find_nearest_food(organism, environment.food_sources)
    if food is not None and within_reach(organism, distance):
        organism.eat(food)
    else:
        if food is not None:
            organism.direction = math.atan2(food.y - organism.y, food.x - organism.x)
        elif simulation.rng.random() < WANDER_CHANCE:
            organism.direction += simulation.rng.uniform(-WANDER_ANGLE, WANDER_ANGLE)
        move_organism(organism, environment, speed, rng=simulation.rng)

    if organism.energy > genome.reproduction_threshold:
        reproduce(organism, simulation)

    organism.updateFitness()


def update_simulation(simulation: Simulation) -> Snapshot:
    """Advance the simulation one tick and return a detached snapshot of the result."""
    if simulation.paused or simulation.is_finished:
        return simulation.last_snapshot

    speed = simulation.speed
    simulation.generation_age += speed

    # Children born this tick join the population but are not processed until the next one.
    for organism in list(simulation.population):
        _advance_organism(simulation, organism, speed)

    regenerate_food(simulation.environment, speed, rng=simulation.rng)
    resolve_collisions(simulation.population, simulation.environment)
    simulation.population = [organism for organism in simulation.population if organism.isAlive()]

    if generation_over(simulation):
        record = start_new_generation(simulation)
        simulation.statistics.record_generation(record)
        simulation._notify_generation(record)

    simulation.statistics.update(simulation.population, simulation.generation, simulation.generation_age)

    if simulation.generation >= simulation.config.generation_limit:
        simulation.is_finished = True

    simulation.last_snapshot = simulation.snapshot()
    return simulation.last_snapshot
