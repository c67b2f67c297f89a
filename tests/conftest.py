import copy

import matplotlib
import pytest

matplotlib.use("Agg")

from regression_to_mean.simulator import generate_population, simulate_period, select_top
from regression_to_mean.utils import load_config


STANDARD_NORMAL = {"distribution": "normal", "params": {"mean": 0.0, "std": 1.0}}
EFFECT = {"distribution": "normal", "params": {"mean": 0.4, "std": 0.2}}


@pytest.fixture
def standard_normal():
    return copy.deepcopy(STANDARD_NORMAL)


@pytest.fixture
def effect_params():
    return copy.deepcopy(EFFECT)


@pytest.fixture
def population(standard_normal):
    """1000 individuals, period 1 simulated."""
    pop = generate_population(1000, 1234, standard_normal)
    return simulate_period(pop, 1, 456, standard_normal)


@pytest.fixture
def two_period_population(population, standard_normal):
    return simulate_period(population, 2, 789, standard_normal)


@pytest.fixture
def cohort(two_period_population):
    """Top 10% on period 1: 100 individuals."""
    return select_top(two_period_population, 1, 0.1)


@pytest.fixture
def config():
    return load_config()
