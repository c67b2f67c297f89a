"""Display tables built from pipeline outputs."""

import pandas as pd

from ..simulator.core.data_structures import SimulationResult


def selection_profile_table(result: SimulationResult) -> pd.DataFrame:
    """Cohort vs population means of propensity, luck and need on the reference period."""
    profile = result.selection_profile
    table = pd.DataFrame(profile).rename_axis('field').reset_index()
    table['difference'] = table['cohort'] - table['population']
    return table


def period_comparison_table(result: SimulationResult) -> pd.DataFrame:
    """Cohort mean need on each period next to the population baseline mean."""
    comparison = result.period_comparison
    trial = result.trial
    return pd.DataFrame([
        {
            'period': trial.baseline_period,
            'cohort_mean_need': comparison['baseline_mean'],
            'gap_to_population_mean': comparison['baseline_gap'],
        },
        {
            'period': trial.followup_period,
            'cohort_mean_need': comparison['followup_mean'],
            'gap_to_population_mean': comparison['followup_gap'],
        },
    ])


def arm_summary_table(result: SimulationResult) -> pd.DataFrame:
    """Per-arm means with the test outcome attached to every row."""
    trial = result.trial
    table = trial.arm_summary.copy()
    if trial.test_ran:
        table['statistic'] = trial.test.statistic
        table['p_value'] = trial.test.p_value
    else:
        table['statistic'] = None
        table['p_value'] = None
    return table


def build_report_tables(result: SimulationResult) -> dict:
    """All tables the rendering layer consumes, keyed by name."""
    return {
        'selection_profile': selection_profile_table(result),
        'period_comparison': period_comparison_table(result),
        'arm_summary': arm_summary_table(result),
    }
