import numpy as np
import pytest

from regression_to_mean.simulator import (
    InvalidConfiguration,
    OrderingViolation,
    generate_population,
    simulate_period,
)


def test_need_is_propensity_plus_luck(two_period_population):
    df = two_period_population.data

    for period_id in (1, 2):
        np.testing.assert_array_equal(
            df[f"need_{period_id}"].values,
            df["propensity"].values + df[f"luck_{period_id}"].values,
        )


def test_luck_recovers_standard_normal(population):
    luck = population.data["luck_1"]

    assert abs(luck.mean()) < 0.1
    assert abs(luck.std() - 1) < 0.15


def test_extends_in_place(standard_normal):
    pop = generate_population(20, 1, standard_normal)
    returned = simulate_period(pop, 1, 2, standard_normal)

    assert returned is pop
    assert pop.periods == [1]
    assert {"luck_1", "need_1"} <= set(pop.data.columns)


def test_same_seed_is_bit_identical(standard_normal):
    a = simulate_period(generate_population(200, 1234, standard_normal), 1, 456, standard_normal)
    b = simulate_period(generate_population(200, 1234, standard_normal), 1, 456, standard_normal)

    np.testing.assert_array_equal(a.data["luck_1"].values, b.data["luck_1"].values)
    np.testing.assert_array_equal(a.data["need_1"].values, b.data["need_1"].values)


def test_luck_is_the_seeded_stream_in_id_order(population):
    expected = np.random.default_rng(456).normal(0.0, 1.0, size=1000)

    np.testing.assert_array_equal(population.data["luck_1"].values, expected)


def test_later_period_leaves_earlier_untouched(population, standard_normal):
    before = population.data[["propensity", "luck_1", "need_1"]].copy()

    simulate_period(population, 2, 789, standard_normal)

    np.testing.assert_array_equal(
        population.data[["propensity", "luck_1", "need_1"]].values, before.values
    )
    assert population.periods == [1, 2]


def test_periods_use_independent_streams(two_period_population):
    df = two_period_population.data

    assert not np.array_equal(df["luck_1"].values, df["luck_2"].values)
    assert abs(np.corrcoef(df["luck_1"], df["luck_2"])[0, 1]) < 0.15


def test_resimulating_a_period_is_rejected(population, standard_normal):
    with pytest.raises(OrderingViolation):
        simulate_period(population, 1, 999, standard_normal)


@pytest.mark.parametrize("period_id", [0, -1, 1.5])
def test_rejects_invalid_period(period_id, standard_normal):
    pop = generate_population(10, 1, standard_normal)
    with pytest.raises(InvalidConfiguration):
        simulate_period(pop, period_id, 2, standard_normal)


def test_rejects_negative_luck_std(standard_normal):
    pop = generate_population(10, 1, standard_normal)
    with pytest.raises(InvalidConfiguration):
        simulate_period(pop, 1, 2, {"distribution": "normal", "params": {"mean": 0.0, "std": -0.5}})
