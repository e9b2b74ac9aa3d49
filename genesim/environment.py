"""Bounded arena holding food sources and static obstacles."""

import random
from dataclasses import dataclass, field
from typing import List

FOOD_ENERGY = 50.0
OBSTACLE_SIDE_RANGE = (20.0, 80.0)

# Regeneration is attempted with this chance per tick (scaled by speed);
# each consumed source then respawns independently.
REGENERATION_CHANCE = 0.01
RESPAWN_CHANCE = 0.1


@dataclass
class FoodSource:
    id: str
    x: float
    y: float
    energy: float = FOOD_ENERGY
    consumed: bool = False

    def toDict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "energy": self.energy,
            "isConsumed": self.consumed,
        }


@dataclass(frozen=True)
class Obstacle:
    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self):
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def toDict(self):
        return {"id": self.id, "x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class Environment:
    width: float
    height: float
    food_sources: List[FoodSource] = field(default_factory=list)
    obstacles: List[Obstacle] = field(default_factory=list)

    def toDict(self):
        return {
            "width": self.width,
            "height": self.height,
            "foodSources": [food.toDict() for food in self.food_sources],
            "obstacles": [obstacle.toDict() for obstacle in self.obstacles],
        }

    def consumed_ratio(self) -> float:
        """Fraction of food sources eaten; an arena without food reports 0."""
        if not self.food_sources:
            return 0.0
        eaten = sum(1 for food in self.food_sources if food.consumed)
        return eaten / len(self.food_sources)


def create_environment(width, height, food_amount, obstacle_amount, rng=random) -> Environment:
    """Scatter food and obstacles uniformly over the arena."""
    food_sources = [
        FoodSource(f"food-{index}", rng.random() * width, rng.random() * height)
        for index in range(food_amount)
    ]
    obstacles = [
        Obstacle(
            f"obstacle-{index}",
            rng.random() * width,
            rng.random() * height,
            rng.uniform(*OBSTACLE_SIDE_RANGE),
            rng.uniform(*OBSTACLE_SIDE_RANGE),
        )
        for index in range(obstacle_amount)
    ]
    return Environment(width, height, food_sources, obstacles)


def _relocate(food: FoodSource, environment: Environment, rng) -> None:
    food.consumed = False
    food.x = rng.random() * environment.width
    food.y = rng.random() * environment.height


def regenerate_food(environment: Environment, speed: float, rng=random) -> int:
    """Occasionally respawn some consumed food; returns how many came back."""
    if rng.random() >= REGENERATION_CHANCE * speed:
        return 0

    restored = 0
    for food in environment.food_sources:
        if food.consumed and rng.random() < RESPAWN_CHANCE:
            _relocate(food, environment, rng)
            restored += 1
    return restored


def reset_food(environment: Environment, rng=random) -> None:
    """Restore every food source at a new random position."""
    for food in environment.food_sources:
        _relocate(food, environment, rng)
