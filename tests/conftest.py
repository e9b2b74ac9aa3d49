import itertools

import pytest

from genesim import create_app
from genesim.environment import Environment
from genesim.genome import Genome
from genesim.organism import Organism
from genesim.simulation import create_simulation

BASE_TRAITS = {
    "speed": 1.0,
    "sensor_range": 100.0,
    "size": 10.0,
    "metabolism": 0.5,
    "color": (120, 60, 200),
    "reproduction_threshold": 150.0,
    "aggressiveness": 0.5,
}


@pytest.fixture
def make_genome():
    def factory(**overrides):
        return Genome(**{**BASE_TRAITS, **overrides})

    return factory


@pytest.fixture
def make_organism(make_genome):
    counter = itertools.count()

    def factory(x=50.0, y=50.0, direction=0.0, energy=100.0, fitness=0.0, **traits):
        organism = Organism(f"test-{next(counter)}", make_genome(**traits), x, y, direction, energy=energy)
        organism.fitness = fitness
        return organism

    return factory


@pytest.fixture
def arena():
    return Environment(200.0, 100.0)


@pytest.fixture
def small_simulation():
    """A single organism alone in an empty 100x100 arena."""
    return create_simulation(
        {
            "populationSize": 1,
            "foodAmount": 0,
            "obstacleAmount": 0,
            "environmentWidth": 100,
            "environmentHeight": 100,
            "seed": 7,
        }
    )


@pytest.fixture
def busy_simulation():
    return create_simulation({"populationSize": 20, "seed": 42})


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "STORE_PATH": str(tmp_path / "runs.json"),
            "IDLE_TIMEOUT": 60.0,
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
