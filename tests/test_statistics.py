"""Fitness aggregation and champion tracking."""

import pytest

from genesim.organism import calculate_fitness
from genesim.statistics import ALL_TIME_BEST, CURRENT_BEST, HISTORY_CAPACITY, FitnessTracker


class TestFitness:
    def test_formula(self, make_organism):
        organism = make_organism(energy=40.0)
        organism.age = 12.0
        organism.food_eaten = 2
        organism.children = 1
        assert calculate_fitness(organism) == pytest.approx(12.0 + 20.0 + 40.0 + 30.0)

    def test_never_negative(self, make_organism):
        organism = make_organism(energy=-500.0)
        assert calculate_fitness(organism) == 0.0


class TestFitnessTracker:
    """Best/average/worst over live organisms and the sampled history."""

    def test_empty_population_keeps_previous_values(self, make_organism):
        tracker = FitnessTracker()
        tracker.update([make_organism(fitness=8.0)], generation=0, generation_age=0)
        tracker.update([], generation=0, generation_age=10)
        assert tracker.summary() == {"bestFitness": 8.0, "averageFitness": 8.0, "worstFitness": 8.0}

    def test_history_feeds_best_and_average_only(self, make_organism):
        tracker = FitnessTracker()
        tracker.update([make_organism(fitness=10.0), make_organism(fitness=20.0)], 0, 10)
        assert list(tracker.history) == [10.0, 20.0]
        assert tracker.best_fitness == 20.0
        assert tracker.average_fitness == pytest.approx(15.0)
        assert tracker.worst_fitness == 10.0

        tracker.update([make_organism(fitness=5.0)], 0, 11)
        assert list(tracker.history) == [10.0, 20.0]
        assert tracker.best_fitness == 20.0
        assert tracker.average_fitness == pytest.approx(35.0 / 3)
        assert tracker.worst_fitness == 5.0

    def test_history_window_is_bounded(self, make_organism):
        tracker = FitnessTracker()
        crowd = [make_organism(fitness=float(index)) for index in range(150)]
        for sample in range(10):
            tracker.update(crowd, 0, sample * 10)
        assert len(tracker.history) == HISTORY_CAPACITY

    def test_champions(self, make_organism):
        tracker = FitnessTracker()
        strong = make_organism(fitness=50.0)
        tracker.update([make_organism(fitness=10.0), strong], generation=2, generation_age=1)

        assert tracker.current_best.kind == CURRENT_BEST
        assert tracker.current_best.organism.id == strong.id
        assert tracker.all_time_best.kind == ALL_TIME_BEST
        assert tracker.all_time_best.generation == 2

        tracker.update([make_organism(fitness=30.0)], generation=3, generation_age=2)
        assert tracker.current_best.fitness == 30.0
        assert tracker.all_time_best.fitness == 50.0
        assert tracker.all_time_best.generation == 2

        tracker.update([make_organism(fitness=75.0)], generation=4, generation_age=3)
        assert tracker.all_time_best.fitness == 75.0
        assert tracker.all_time_best.generation == 4

    def test_champion_is_a_copy(self, make_organism):
        tracker = FitnessTracker()
        organism = make_organism(fitness=10.0)
        tracker.update([organism], 0, 1)
        organism.fitness = 999.0
        assert tracker.all_time_best.fitness == 10.0

    def test_champion_serialisation(self, make_organism):
        tracker = FitnessTracker()
        tracker.update([make_organism(fitness=10.0)], generation=6, generation_age=1)
        data = tracker.all_time_best.toDict()
        assert data["generation"] == 6
        assert data["isAllTimeBest"] is True
        assert data["isCurrentBest"] is False
        assert data["genome"]["size"] == 10.0
