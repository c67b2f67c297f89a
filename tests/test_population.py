import numpy as np
import pandas as pd
import pytest

from regression_to_mean.simulator import (
    InvalidConfiguration,
    Population,
    generate_population,
)
from regression_to_mean.simulator.components import PopulationGenerator


def test_ids_are_one_to_n(standard_normal):
    pop = generate_population(50, 1, standard_normal)

    assert isinstance(pop, Population)
    assert pop.size == 50
    np.testing.assert_array_equal(pop.data["id"].values, np.arange(1, 51))
    assert pop.periods == []


def test_same_seed_is_bit_identical(standard_normal):
    a = generate_population(1000, 1234, standard_normal)
    b = generate_population(1000, 1234, standard_normal)

    np.testing.assert_array_equal(a.data["propensity"].values, b.data["propensity"].values)


def test_propensity_is_the_seeded_stream_in_id_order(standard_normal):
    pop = generate_population(1000, 1234, standard_normal)
    expected = np.random.default_rng(1234).normal(0.0, 1.0, size=1000)

    np.testing.assert_array_equal(pop.data["propensity"].values, expected)


def test_different_seed_differs(standard_normal):
    a = generate_population(100, 1234, standard_normal)
    b = generate_population(100, 1235, standard_normal)

    assert not np.array_equal(a.data["propensity"].values, b.data["propensity"].values)


def test_propensity_recovers_standard_normal(standard_normal):
    pop = generate_population(1000, 1234, standard_normal)
    propensity = pop.data["propensity"]

    assert abs(propensity.mean()) < 0.1
    assert abs(propensity.std() - 1) < 0.15


def test_uniform_propensity_within_bounds():
    spec = {"distribution": "uniform", "params": {"min": -1.0, "max": 2.0}}
    pop = generate_population(500, 3, spec)

    assert pop.data["propensity"].between(-1.0, 2.0).all()


@pytest.mark.parametrize("n", [0, -5, 2.5, True])
def test_rejects_invalid_size(n, standard_normal):
    with pytest.raises(InvalidConfiguration):
        generate_population(n, 1, standard_normal)


def test_rejects_negative_std():
    with pytest.raises(InvalidConfiguration):
        PopulationGenerator({"distribution": "normal", "params": {"mean": 0.0, "std": -1.0}})


def test_rejects_unknown_distribution():
    with pytest.raises(InvalidConfiguration):
        generate_population(10, 1, {"distribution": "cauchy", "params": {}})


def test_rejects_missing_seed(standard_normal):
    with pytest.raises(InvalidConfiguration):
        generate_population(10, None, standard_normal)


def test_population_table_is_validated():
    with pytest.raises(InvalidConfiguration, match="required columns"):
        Population(data=pd.DataFrame({"id": [1, 2]}))
    with pytest.raises(InvalidConfiguration, match="unique"):
        Population(data=pd.DataFrame({"id": [1, 1], "propensity": [0.0, 0.1]}))


def test_summary_reports_periods(population):
    summary = population.summary()

    assert summary["n_individuals"] == 1000
    assert summary["periods"] == [1]
    assert "need_1_mean" in summary
