"""Genome sampling and mutation."""

import random

import pytest

from genesim.genome import (
    TRAIT_FLOOR,
    build_toolbox,
    mutate,
    random_genome,
)

SCALARS = ("speed", "sensor_range", "size", "metabolism", "reproduction_threshold")


class TestRandomGenome:
    """Freshly seeded genomes respect their sampling ranges."""

    def test_traits_within_ranges(self):
        rng = random.Random(3)
        for _ in range(200):
            genome = random_genome(rng)
            assert 0.5 <= genome.speed <= 2.5
            assert 50 <= genome.sensor_range <= 150
            assert 5 <= genome.size <= 15
            assert 0.2 <= genome.metabolism <= 0.8
            assert 100 <= genome.reproduction_threshold <= 200
            assert 0 <= genome.aggressiveness <= 1
            assert all(0 <= channel <= 255 for channel in genome.color)
            assert all(isinstance(channel, int) for channel in genome.color)

    def test_serialises_with_wire_names(self, make_genome):
        data = make_genome().toDict()
        assert data["sensorRange"] == 100.0
        assert data["reproductionThreshold"] == 150.0
        assert data["color"] == [120, 60, 200]


class TestMutate:
    """Mutation produces a new genome and keeps traits in range."""

    def test_zero_rate_returns_equal_copy(self, make_genome):
        genome = make_genome()
        mutated = mutate(genome, 0.0, rng=random.Random(1))
        assert mutated == genome
        assert mutated is not genome

    def test_full_rate_perturbs_every_trait_within_bounds(self, make_genome):
        genome = make_genome(aggressiveness=0.95, color=(250, 3, 128))
        mutated = mutate(genome, 1.0, rng=random.Random(1234))

        for trait in SCALARS:
            ratio = getattr(mutated, trait) / getattr(genome, trait)
            assert 0.8 <= ratio <= 1.2
        assert 0.0 <= mutated.aggressiveness <= 1.0
        assert abs(mutated.aggressiveness - genome.aggressiveness) <= 0.1 + 1e-12
        for before, after in zip(genome.color, mutated.color):
            assert 0 <= after <= 255
            assert abs(after - before) <= 25

    def test_parent_genome_untouched(self, make_genome):
        genome = make_genome()
        snapshot = genome.toDict()
        mutate(genome, 1.0, rng=random.Random(5))
        assert genome.toDict() == snapshot

    def test_scalars_never_fall_below_floor(self, make_genome):
        genome = make_genome(speed=TRAIT_FLOOR, size=TRAIT_FLOOR)
        rng = random.Random(9)
        for _ in range(50):
            genome = mutate(genome, 1.0, rng=rng)
            assert genome.speed >= TRAIT_FLOOR
            assert genome.size >= TRAIT_FLOOR

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_colour_clamped_at_extremes(self, make_genome, seed):
        genome = make_genome(color=(0, 255, 0))
        mutated = mutate(genome, 1.0, rng=random.Random(seed))
        assert all(0 <= channel <= 255 for channel in mutated.color)


class TestToolbox:
    """The DEAP toolbox binds the mutation rate and random source."""

    def test_registered_operators(self, make_genome):
        toolbox = build_toolbox(0.0, rng=random.Random(2))
        genome = toolbox.genome()
        assert 5 <= genome.size <= 15
        assert toolbox.mutate(make_genome()) == make_genome()

    def test_same_seed_same_genomes(self):
        first = build_toolbox(0.5, rng=random.Random(11))
        second = build_toolbox(0.5, rng=random.Random(11))
        assert first.genome() == second.genome()
