import copy

import numpy as np
import pandas as pd
import pytest

from regression_to_mean.simulator import (
    InvalidConfiguration,
    RegressionToMeanSimulation,
    SimulationResult,
    spawn_seeds,
)
from regression_to_mean.evaluation import detection_rate


def test_run_with_default_config(config):
    result = RegressionToMeanSimulation(config).run()

    assert isinstance(result, SimulationResult)
    assert result.population.size == 1000
    assert result.population.periods == [1, 2]
    assert result.cohort.size == 100
    assert result.trial.arm_sizes == {"control": 50, "treatment": 50}
    assert result.trial.test_ran
    assert result.period_comparison["followup_mean"] < result.period_comparison["baseline_mean"]


def test_run_is_reproducible(config):
    a = RegressionToMeanSimulation(config).run()
    b = RegressionToMeanSimulation(config).run()

    pd.testing.assert_frame_equal(a.population.data, b.population.data)
    assert a.cohort.ids == b.cohort.ids
    assert a.trial.test.statistic == b.trial.test.statistic
    assert a.trial.test.p_value == b.trial.test.p_value


def test_changing_one_seed_leaves_other_draws_alone(config):
    sim = RegressionToMeanSimulation(config)
    base = sim.run()

    seeds = copy.deepcopy(config["seeds"])
    seeds["assignment"] += 1
    changed = sim.run(seeds=seeds)

    pd.testing.assert_frame_equal(base.population.data, changed.population.data)
    assert base.cohort.ids == changed.cohort.ids


def test_verbose_prints_progress(config, capsys):
    RegressionToMeanSimulation(config, verbose=True).run()

    out = capsys.readouterr().out
    assert "Generating population of 1000" in out
    assert "Selected top 10% on period 1: 100 individuals" in out


def test_invalid_config_fails_fast(config):
    config["population"]["size"] = 0
    sim = RegressionToMeanSimulation(config)
    with pytest.raises(InvalidConfiguration):
        sim.run()

    config["population"]["size"] = 1000
    config["selection"]["proportion"] = 0
    with pytest.raises(InvalidConfiguration):
        RegressionToMeanSimulation(config)


def test_spawned_seeds_are_distinct():
    seeds = list(spawn_seeds(42, 3, 1, 2))

    assert len(seeds) == 3
    assert len({s["propensity"] for s in seeds}) == 3
    assert seeds == list(spawn_seeds(42, 3, 1, 2))
    for s in seeds:
        values = [s["propensity"], s["luck"][1], s["luck"][2], s["assignment"], s["effect"]]
        assert len(set(values)) == 5


def test_replicate_table(config):
    replications = RegressionToMeanSimulation(config).replicate(n_reps=5, base_seed=7)

    assert len(replications) == 5
    assert list(replications["rep"]) == [0, 1, 2, 3, 4]
    assert replications["test_ran"].all()
    assert (replications["cohort_followup_mean"] < replications["cohort_baseline_mean"]).all()


def test_treatment_effect_is_detected_in_most_runs(config):
    # 5000 individuals -> 500 in the cohort, 250 per arm
    config["population"]["size"] = 5000
    replications = RegressionToMeanSimulation(config).replicate(n_reps=40, base_seed=2024)

    assert detection_rate(replications, 0.05) >= 0.8
    assert (replications["treatment_mean_change"] < replications["control_mean_change"]).mean() >= 0.9


def test_no_effect_rarely_detected(config):
    config["population"]["size"] = 2000
    config["trial"]["effect"] = {"distribution": "normal", "params": {"mean": 0.0, "std": 0.0}}
    replications = RegressionToMeanSimulation(config).replicate(n_reps=40, base_seed=11)

    assert detection_rate(replications, 0.05) <= 0.2
    # the cohort still improves with nothing applied
    assert (replications["control_mean_change"] < 0).all()
    assert np.isfinite(replications["shrinkage"]).all()
