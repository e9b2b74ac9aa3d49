import copy
import math
import random

from .genome import Genome

INITIAL_ENERGY = 100.0
REPRODUCTION_MARKER_TICKS = 50


class Organism:
    """Physical and energetic state of one creature in the arena."""

    def __init__(self, i, genome: Genome, x, y, direction, energy=INITIAL_ENERGY):
        self.id = i
        self.genome = genome
        self.x = x
        self.y = y
        self.direction = direction
        self.energy = energy
        self.age = 0.0
        self.food_eaten = 0
        self.children = 0
        self.alive = True
        self.fitness = 0.0
        self.reproduced_marker = 0.0  # ticks left on the "just reproduced" highlight

    def toDict(self):
        return {
            "id": self.id,
            "genome": self.genome.toDict(),
            "x": self.x,
            "y": self.y,
            "direction": self.direction,
            "energy": self.energy,
            "age": self.age,
            "foodEaten": self.food_eaten,
            "children": self.children,
            "isDead": not self.alive,
            "fitness": self.fitness,
            "justReproduced": self.reproduced_marker,
        }

    def getRadius(self):
        return self.genome.size

    def getPos(self):
        return (self.x, self.y)

    def setPos(self, pos):
        self.x = pos[0]
        self.y = pos[1]

    def isAlive(self):
        return self.alive

    def kill(self):
        self.alive = False

    def decayMarker(self, ticks):
        self.reproduced_marker = max(0.0, self.reproduced_marker - ticks)

    def markReproduced(self):
        self.reproduced_marker = REPRODUCTION_MARKER_TICKS

    def eat(self, food):
        """Take the food's energy; consumed sources are ignored."""
        if food.consumed:
            return False
        self.energy += food.energy
        self.food_eaten += 1
        food.consumed = True
        return True

    def updateFitness(self):
        self.fitness = calculate_fitness(self)
        return self.fitness

    def clone(self):
        return copy.deepcopy(self)


def calculate_fitness(organism: Organism) -> float:
    """Survival time, stored energy, foraging and offspring, floored at zero."""
    return max(
        0.0,
        organism.age
        + organism.energy * 0.5
        + organism.food_eaten * 20
        + organism.children * 30,
    )


def create_organism(environment, i, genome_factory, rng=random) -> Organism:
    """Place a freshly seeded organism at a random spot fully inside the arena."""
    genome = genome_factory()
    x = _uniform_inside(rng, environment.width, genome.size)
    y = _uniform_inside(rng, environment.height, genome.size)
    return Organism(i, genome, x, y, rng.random() * 2 * math.pi)


def _uniform_inside(rng, extent, radius):
    if extent <= 2 * radius:
        return extent / 2.0
    return rng.uniform(radius, extent - radius)
