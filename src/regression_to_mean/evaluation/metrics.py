"""Metrics summarising single runs and replications."""

from typing import Dict
import numpy as np
import pandas as pd

from ..simulator.core.data_structures import SimulationResult


def detection_rate(replications: pd.DataFrame, alpha: float = 0.05) -> float:
    """
    Share of replications in which the trial detected the effect.

    Parameters
    ----------
    replications : pd.DataFrame
        Output of `RegressionToMeanSimulation.replicate`.
    alpha : float, default=0.05
        Two-sided significance level.

    Returns
    -------
    float
        Fraction of runs with p < alpha, among runs where the test could run.
        NaN if the test ran in none of them.
    """
    ran = replications[replications['test_ran']]
    if ran.empty:
        return float('nan')
    return float((ran['p_value'] < alpha).mean())


def summarise_replications(
    replications: pd.DataFrame,
    alpha: float = 0.05
) -> Dict[str, float]:
    """
    Aggregate replication results.

    Parameters
    ----------
    replications : pd.DataFrame
        Output of `RegressionToMeanSimulation.replicate`.
    alpha : float, default=0.05
        Two-sided significance level.

    Returns
    -------
    Dict[str, float]
        Mean cohort need in both periods, mean shrinkage, mean change per arm,
        detection rate and number of runs where the test could not run.
    """
    return {
        'n_reps': len(replications),
        'mean_cohort_baseline': replications['cohort_baseline_mean'].mean(),
        'mean_cohort_followup': replications['cohort_followup_mean'].mean(),
        'mean_shrinkage': replications['shrinkage'].mean(),
        'mean_control_change': replications['control_mean_change'].mean(),
        'mean_treatment_change': replications['treatment_mean_change'].mean(),
        'detection_rate': detection_rate(replications, alpha),
        'n_insufficient': int((~replications['test_ran']).sum()),
    }


def print_simulation_summary(result: SimulationResult) -> None:
    """
    Print formatted summary of one pipeline run.

    Parameters
    ----------
    result : SimulationResult
        Output of `RegressionToMeanSimulation.run`.
    """
    comparison = result.period_comparison
    trial = result.trial

    print("\n" + "="*60)
    print("REGRESSION TO THE MEAN")
    print("="*60)

    print(f"\nSelected cohort: {result.cohort.size} of {result.population.size} "
          f"(top {result.cohort.proportion:.0%} on period {result.cohort.reference_period})")
    print("-" * 40)
    profile = result.selection_profile
    for field, value in profile['cohort'].items():
        print(f"  {field:15s}: {value:8.3f}   (population {profile['population'][field]:8.3f})")

    print(f"\nNo intervention, period {trial.baseline_period} -> {trial.followup_period}:")
    print("-" * 40)
    print(f"  {'Mean need':15s}: {comparison['baseline_mean']:8.3f} -> {comparison['followup_mean']:8.3f}")
    print(f"  {'Mean change':15s}: {comparison['mean_change']:8.3f}")
    print(f"  {'Shrinkage':15s}: {comparison['shrinkage']:8.1%}")

    print("\nRandomized trial:")
    print("-" * 40)
    for row in trial.arm_summary.itertuples(index=False):
        print(f"  {row.arm:10s} n={row.n:4d}  mean change {row.mean_change:8.3f}")

    if trial.test_ran:
        print(f"  {trial.test.method.capitalize()} t = {trial.test.statistic:.3f}, "
              f"p = {trial.test.p_value:.4f}")
    else:
        print(f"  Test not run: {trial.test}")

    print("\n" + "="*60)


def print_replication_summary(summary: Dict[str, float], alpha: float = 0.05) -> None:
    """Print formatted summary of `summarise_replications` output."""
    print("\n" + "="*60)
    print(f"REPLICATIONS (n = {summary['n_reps']})")
    print("="*60)
    for name, value in summary.items():
        if name == 'n_reps':
            continue
        if isinstance(value, (int, np.integer)):
            print(f"  {name:25s}: {value:10d}")
        else:
            print(f"  {name:25s}: {value:10.4f}")
    print(f"  (detection at alpha = {alpha})")
    print("="*60)
