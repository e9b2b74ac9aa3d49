"""Running fitness statistics, champion tracking and the per-generation log."""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from deap import tools

from .organism import Organism

HISTORY_CAPACITY = 1000
HISTORY_SAMPLE_INTERVAL = 10

CURRENT_BEST = "current-best"
ALL_TIME_BEST = "all-time-best"


def _mean(values):
    return sum(values) / len(values)


@dataclass
class Champion:
    """Frozen copy of a top organism, tagged with when and why it was captured."""

    organism: Organism
    generation: int
    kind: str

    @property
    def fitness(self) -> float:
        return self.organism.fitness

    def toDict(self) -> Dict[str, object]:
        data = self.organism.toDict()
        data["generation"] = self.generation
        data["isCurrentBest"] = self.kind == CURRENT_BEST
        data["isAllTimeBest"] = self.kind == ALL_TIME_BEST
        return data


class FitnessTracker:
    """Aggregates fitness over a sliding history window for one simulation."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.history = deque(maxlen=capacity)
        self.best_fitness = 0.0
        self.average_fitness = 0.0
        self.worst_fitness = 0.0
        self.current_best: Optional[Champion] = None
        self.all_time_best: Optional[Champion] = None

        self._stats = tools.Statistics()
        self._stats.register("max", max)
        self._stats.register("min", min)
        self._stats.register("mean", _mean)

        self.logbook = tools.Logbook()
        self.logbook.header = ("generation", "bestFitness", "averageFitness", "populationSize")

    def summary(self) -> Dict[str, float]:
        return {
            "bestFitness": self.best_fitness,
            "averageFitness": self.average_fitness,
            "worstFitness": self.worst_fitness,
        }

    def reset_history(self) -> None:
        self.history.clear()

    def record_generation(self, record: Dict[str, object]) -> None:
        self.logbook.record(**record)

    def update(self, population: List[Organism], generation: int, generation_age: float) -> None:
        """
        Refresh best/average/worst fitness and the champions.

        An empty population leaves every value untouched. Live fitness values
        are pushed into the history window whenever the generation age lands on
        a sampling boundary; the best and average then take that history into
        account while the worst only reflects organisms alive right now.
        """
        if not population:
            return

        live = [organism.fitness for organism in population]
        if generation_age % HISTORY_SAMPLE_INTERVAL == 0:
            self.history.extend(live)

        live_summary = self._stats.compile(live)
        history = list(self.history)
        history_best = max(history) if history else 0.0

        self.best_fitness = max(live_summary["max"], history_best)
        self.average_fitness = self._stats.compile(history + live)["mean"]
        self.worst_fitness = live_summary["min"]

        leader = max(population, key=lambda organism: organism.fitness)
        self.current_best = Champion(leader.clone(), generation, CURRENT_BEST)

        if self.all_time_best is None or leader.fitness > self.all_time_best.fitness:
            self.all_time_best = Champion(leader.clone(), generation, ALL_TIME_BEST)
