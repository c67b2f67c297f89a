"""Cohort selection and descriptive aggregation."""

import re
import numpy as np
import pandas as pd

from typing import Dict, List, Union

from ..core.data_structures import Cohort, Population
from ..core.errors import InvalidConfiguration, OrderingViolation
from ..core.utils import luck_column, need_column, validate_period_id


_PERIOD_FIELD = re.compile(r'^(luck|need|adjusted_need)_(\d+)$')


class CohortSelector:
    """Selects the highest-need individuals on a reference period.

    Ranking is by descending need; ties keep ascending `id` order. The
    cohort size is ceil(proportion * N), so any proportion in (0, 1]
    selects at least one individual.
    """

    def __init__(self, proportion: float):
        """
        Args:
            proportion: Fraction of the population to select, in (0, 1]
        """
        if (
            isinstance(proportion, bool)
            or not isinstance(proportion, (int, float, np.number))
            or not 0 < proportion <= 1
        ):
            raise InvalidConfiguration(f"Proportion must be in (0, 1], got {proportion!r}")
        self.proportion = float(proportion)

    def cohort_size(self, n: int) -> int:
        # rounding guards against products like 0.3 * 10 = 3.0000000000000004
        return max(1, int(np.ceil(round(self.proportion * n, 9))))

    def select(self, population: Population, period_id: int) -> Cohort:
        validate_period_id(period_id)
        population.require_period(period_id)

        ranked = population.data[['id', need_column(period_id)]].sort_values(
            by=[need_column(period_id), 'id'],
            ascending=[False, True],
            kind='mergesort'
        )
        k = self.cohort_size(population.size)
        ids = tuple(int(i) for i in ranked['id'].values[:k])

        return Cohort(
            population=population,
            ids=ids,
            reference_period=int(period_id),
            proportion=self.proportion
        )


def select_top(population: Population, period_id: int, proportion: float) -> Cohort:
    """Select the top `proportion` of `population` by need in `period_id`."""
    return CohortSelector(proportion).select(population, period_id)


def _as_frame(subset: Union[Population, Cohort, pd.DataFrame]) -> pd.DataFrame:
    if isinstance(subset, (Population, Cohort)):
        return subset.data
    if isinstance(subset, pd.DataFrame):
        return subset
    raise InvalidConfiguration(f"Cannot aggregate over {type(subset).__name__}")


def aggregate_means(
    subset: Union[Population, Cohort, pd.DataFrame],
    fields: List[str]
) -> Dict[str, float]:
    """Arithmetic mean of each field across the subset.

    Args:
        subset: Population, Cohort or any table of individuals
        fields: Column names to average

    Returns:
        Dict[str, float]: Mapping field -> mean, in the order requested
    """
    if not fields:
        raise InvalidConfiguration("At least one field is required")

    df = _as_frame(subset)
    if df.empty:
        raise InvalidConfiguration("Cannot aggregate over an empty subset")

    for name in fields:
        if name in df.columns:
            continue
        match = _PERIOD_FIELD.match(name)
        if match:
            raise OrderingViolation(
                f"Field '{name}' is not available: period {match.group(2)} has not been computed"
            )
        raise InvalidConfiguration(f"Unknown field: {name}")

    return {name: float(df[name].mean()) for name in fields}


def selection_profile(cohort: Cohort) -> Dict[str, Dict[str, float]]:
    """Mean propensity, luck and need on the reference period, cohort vs population.

    A high-need selection over-represents both high propensity and high luck.
    """
    period_id = cohort.reference_period
    fields = ['propensity', luck_column(period_id), need_column(period_id)]

    return {
        'cohort': aggregate_means(cohort, fields),
        'population': aggregate_means(cohort.population, fields),
    }


def period_comparison(
    cohort: Cohort,
    baseline_period: int,
    followup_period: int
) -> Dict[str, float]:
    """Compare the same cohort's need across two periods, with no intervention.

    Returns:
        dict: Cohort means on both periods, the mean per-individual change,
            the population-wide baseline mean and the shrinkage toward it
            (fraction of the baseline gap that disappeared at follow-up)
    """
    population = cohort.population
    population.require_period(baseline_period)
    population.require_period(followup_period)

    baseline_col = need_column(baseline_period)
    followup_col = need_column(followup_period)

    df = cohort.data
    means = aggregate_means(df, [baseline_col, followup_col])
    mean_change = float((df[followup_col] - df[baseline_col]).mean())
    population_mean = aggregate_means(population, [baseline_col])[baseline_col]

    baseline_gap = means[baseline_col] - population_mean
    followup_gap = means[followup_col] - population_mean
    # a cohort sitting at the population mean (proportion 1) has no gap to shrink
    gap_defined = not np.isclose(baseline_gap, 0.0, atol=1e-12)
    shrinkage = 1 - followup_gap / baseline_gap if gap_defined else float('nan')

    return {
        'baseline_mean': means[baseline_col],
        'followup_mean': means[followup_col],
        'mean_change': mean_change,
        'population_baseline_mean': population_mean,
        'baseline_gap': baseline_gap,
        'followup_gap': followup_gap,
        'shrinkage': shrinkage,
        'moved_toward_mean': bool(gap_defined and abs(followup_gap) < abs(baseline_gap)),
    }
