"""Geometry of the arena: food search, walls, obstacles and organism contacts."""

import math
import random
from typing import List, Optional, Tuple

from .environment import Environment, FoodSource, Obstacle
from .organism import Organism

# Energy spent per unit of distance travelled.
MOVE_COST = 0.1
# How far beyond its own radius an organism reaches when eating.
EAT_REACH = 5.0
OBSTACLE_JITTER = math.pi / 8


def find_nearest_food(organism: Organism, food_sources: List[FoodSource]) -> Tuple[Optional[FoodSource], Optional[float]]:
    """Return the closest uneaten food inside the sensor radius, or (None, None)."""
    closest = None
    closest_distance = organism.genome.sensor_range

    for food in food_sources:
        if food.consumed:
            continue
        distance = math.hypot(food.x - organism.x, food.y - organism.y)
        if distance < closest_distance:
            closest = food
            closest_distance = distance

    if closest is None:
        return None, None
    return closest, closest_distance


def within_reach(organism: Organism, distance: float) -> bool:
    return distance < organism.genome.size + EAT_REACH


def _clamp_axis(value: float, radius: float, extent: float) -> Tuple[float, bool]:
    """Clamp a coordinate so the body stays inside [0, extent]; report whether it hit."""
    lower = radius
    upper = extent - radius
    if upper < lower:
        # Body wider than the arena: pin it to the middle.
        return extent / 2.0, True
    if value < lower:
        return lower, True
    if value > upper:
        return upper, True
    return value, False


def clamp_position(organism: Organism, environment: Environment) -> None:
    """Pull the organism back inside the arena without touching its heading."""
    radius = organism.getRadius()
    organism.x, _ = _clamp_axis(organism.x, radius, environment.width)
    organism.y, _ = _clamp_axis(organism.y, radius, environment.height)


def distance_to_rectangle(x: float, y: float, obstacle: Obstacle) -> float:
    dx = max(obstacle.x - x, 0.0, x - (obstacle.x + obstacle.width))
    dy = max(obstacle.y - y, 0.0, y - (obstacle.y + obstacle.height))
    return math.hypot(dx, dy)


def touches_obstacle(organism: Organism, obstacle: Obstacle) -> bool:
    radius = organism.getRadius()
    if distance_to_rectangle(organism.x, organism.y, obstacle) < radius:
        return True
    return (
        organism.x - radius < obstacle.x + obstacle.width
        and organism.x + radius > obstacle.x
        and organism.y - radius < obstacle.y + obstacle.height
        and organism.y + radius > obstacle.y
    )


def resolve_obstacles(organism: Organism, environment: Environment, rng=random) -> int:
    """
    Push the organism out of every obstacle it touches.

    Obstacles are checked one after another against the current position, so a
    push away from one can still be followed by a push from the next. The
    heading is turned along the push with a small random jitter.
    """
    pushes = 0
    for obstacle in environment.obstacles:
        if not touches_obstacle(organism, obstacle):
            continue
        center_x, center_y = obstacle.center
        angle = math.atan2(organism.y - center_y, organism.x - center_x)
        push = organism.getRadius() + 1
        organism.x += math.cos(angle) * push
        organism.y += math.sin(angle) * push
        organism.direction = angle + rng.uniform(-OBSTACLE_JITTER, OBSTACLE_JITTER)
        pushes += 1

    if pushes:
        clamp_position(organism, environment)
    return pushes


def move_organism(organism: Organism, environment: Environment, speed: float, rng=random) -> bool:
    """Advance along the current heading, bouncing off walls; True when a wall was hit."""
    step = organism.genome.speed * speed
    radius = organism.getRadius()
    new_x = organism.x + math.cos(organism.direction) * step
    new_y = organism.y + math.sin(organism.direction) * step

    organism.energy -= MOVE_COST * step

    reflected = False
    organism.x, hit_x = _clamp_axis(new_x, radius, environment.width)
    if hit_x:
        organism.direction = math.pi - organism.direction
        reflected = True

    organism.y, hit_y = _clamp_axis(new_y, radius, environment.height)
    if hit_y:
        organism.direction = -organism.direction
        reflected = True

    resolve_obstacles(organism, environment, rng)
    return reflected


def _separate(first: Organism, second: Organism, environment: Environment) -> None:
    dx = first.x - second.x
    dy = first.y - second.y
    distance = math.hypot(dx, dy)
    radius_sum = first.getRadius() + second.getRadius()
    assert radius_sum > 0, "colliding organisms must have a positive radius"

    overlap = radius_sum - distance
    angle = math.atan2(dy, dx)
    unit_x = math.cos(angle)
    unit_y = math.sin(angle)

    # The larger body gives way less.
    first_share = second.getRadius() / radius_sum
    second_share = first.getRadius() / radius_sum

    first.x += unit_x * overlap * first_share
    first.y += unit_y * overlap * first_share
    second.x -= unit_x * overlap * second_share
    second.y -= unit_y * overlap * second_share

    first.direction = angle
    second.direction = angle + math.pi

    clamp_position(first, environment)
    clamp_position(second, environment)


def resolve_collisions(population: List[Organism], environment: Environment) -> int:
    """Separate every overlapping pair of live organisms once; returns the number of contacts."""
    living = [organism for organism in population if organism.isAlive()]
    contacts = 0
    for index, first in enumerate(living):
        for second in living[index + 1:]:
            distance = math.hypot(first.x - second.x, first.y - second.y)
            if distance < first.getRadius() + second.getRadius():
                _separate(first, second, environment)
                contacts += 1
    return contacts
