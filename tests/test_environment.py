"""Arena construction and food regeneration."""

import random

from genesim.environment import (
    FOOD_ENERGY,
    Environment,
    FoodSource,
    create_environment,
    regenerate_food,
    reset_food,
)


class _FixedRandom:
    """Random source whose draws are all the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def _arena_with_eaten_food(count=10):
    foods = [FoodSource(f"food-{index}", 1.0, 1.0, consumed=True) for index in range(count)]
    return Environment(100.0, 50.0, foods)


class TestCreateEnvironment:
    def test_counts_and_bounds(self):
        environment = create_environment(300.0, 200.0, 12, 4, rng=random.Random(2))
        assert len(environment.food_sources) == 12
        assert len(environment.obstacles) == 4
        for food in environment.food_sources:
            assert 0 <= food.x <= 300.0 and 0 <= food.y <= 200.0
            assert food.energy == FOOD_ENERGY
            assert not food.consumed
        for obstacle in environment.obstacles:
            assert 20.0 <= obstacle.width <= 80.0
            assert 20.0 <= obstacle.height <= 80.0

    def test_ids_are_distinct(self):
        environment = create_environment(300.0, 200.0, 5, 5, rng=random.Random(2))
        assert len({food.id for food in environment.food_sources}) == 5
        assert len({obstacle.id for obstacle in environment.obstacles}) == 5

    def test_consumed_ratio(self):
        environment = _arena_with_eaten_food(4)
        environment.food_sources[0].consumed = False
        assert environment.consumed_ratio() == 0.75
        assert Environment(10.0, 10.0).consumed_ratio() == 0.0


class TestRegeneration:
    """Consumed food occasionally comes back somewhere new."""

    def test_no_attempt_when_roll_fails(self):
        environment = _arena_with_eaten_food()
        assert regenerate_food(environment, speed=1.0, rng=_FixedRandom(0.5)) == 0
        assert all(food.consumed for food in environment.food_sources)

    def test_successful_roll_restores_food(self):
        environment = _arena_with_eaten_food()
        restored = regenerate_food(environment, speed=1.0, rng=_FixedRandom(0.0))
        assert restored == 10
        assert not any(food.consumed for food in environment.food_sources)

    def test_speed_raises_the_chance(self):
        environment = _arena_with_eaten_food()
        # 0.05 misses at normal speed but hits at ten times the speed.
        assert regenerate_food(environment, speed=1.0, rng=_FixedRandom(0.05)) == 0
        assert regenerate_food(environment, speed=10.0, rng=_FixedRandom(0.05)) == 10

    def test_reset_restores_everything_in_bounds(self):
        environment = _arena_with_eaten_food()
        reset_food(environment, rng=random.Random(4))
        for food in environment.food_sources:
            assert not food.consumed
            assert 0 <= food.x <= 100.0 and 0 <= food.y <= 50.0
