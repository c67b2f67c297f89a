"""Data structures for simulation outputs."""

import numpy as np
import pandas as pd

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .errors import InsufficientSample, InvalidConfiguration, OrderingViolation
from .utils import luck_column, need_column


@dataclass(eq=False)
class Population:
    """Synthetic population, one row per individual.

    Columns are `id`, `propensity` and, for every simulated period `p`,
    `luck_p` and `need_p`. Rows stay in `id` order and are never added or
    removed; simulating a period only adds columns.
    """
    data: pd.DataFrame
    periods: List[int] = field(default_factory=list)

    def __post_init__(self):
        """Validate data structure."""
        required_columns = ['id', 'propensity']

        missing = set(required_columns) - set(self.data.columns)
        if missing:
            raise InvalidConfiguration(f"Data missing required columns: {missing}")

        if not self.data['id'].is_unique:
            raise InvalidConfiguration("Individual ids must be unique")

    @property
    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return self.size

    def has_period(self, period_id: int) -> bool:
        return period_id in self.periods

    def require_period(self, period_id: int) -> None:
        """Raise if `period_id` has not been simulated yet."""
        if not self.has_period(period_id):
            raise OrderingViolation(
                f"Period {period_id} has not been simulated "
                f"(simulated periods: {sorted(self.periods)})"
            )

    def to_records(self) -> List[Dict]:
        return self.data.to_dict(orient='records')

    def summary(self) -> Dict:
        """Generate summary statistics of the population."""
        summary = {
            'n_individuals': self.size,
            'periods': sorted(self.periods),
            'propensity_mean': self.data['propensity'].mean(),
            'propensity_std': self.data['propensity'].std(),
        }
        for period_id in sorted(self.periods):
            summary[f'{need_column(period_id)}_mean'] = self.data[need_column(period_id)].mean()
            summary[f'{luck_column(period_id)}_std'] = self.data[luck_column(period_id)].std()
        return summary


@dataclass(frozen=True, eq=False)
class Cohort:
    """Read-only view of the individuals selected on a reference period.

    Membership is fixed at selection time. `data` is projected from the
    population on every access, so periods simulated after selection show up
    for the same members.
    """
    population: Population
    ids: Tuple[int, ...]
    reference_period: int
    proportion: float

    @property
    def size(self) -> int:
        return len(self.ids)

    def __len__(self) -> int:
        return self.size

    @property
    def data(self) -> pd.DataFrame:
        """Cohort rows in selection-rank order (a copy)."""
        indexed = self.population.data.set_index('id')
        return indexed.loc[list(self.ids)].reset_index()

    def to_records(self) -> List[Dict]:
        return self.data.to_dict(orient='records')


@dataclass(frozen=True)
class SignificanceTest:
    """Two-sample comparison of per-individual change between arms."""
    statistic: float
    p_value: float
    mean_difference: float
    method: str = 'welch'

    def is_significant(self, alpha: float = 0.05) -> bool:
        return self.p_value < alpha


@dataclass(eq=False)
class TrialResult:
    """Output of a randomized control/treatment comparison on a cohort."""
    assignments: pd.DataFrame
    arm_summary: pd.DataFrame
    test: Union[SignificanceTest, InsufficientSample]
    baseline_period: int
    followup_period: int
    allocation_prob: float
    allocation_method: str

    @property
    def test_ran(self) -> bool:
        return isinstance(self.test, SignificanceTest)

    @property
    def arm_sizes(self) -> Dict[str, int]:
        return self.arm_summary.set_index('arm')['n'].to_dict()

    def changes(self, arm: str) -> np.ndarray:
        """Per-individual change values for one arm."""
        return self.assignments.loc[self.assignments['arm'] == arm, 'change'].values

    def to_records(self) -> List[Dict]:
        return self.assignments.to_dict(orient='records')


@dataclass(eq=False)
class SimulationResult:
    """Container for one full pipeline run."""
    population: Population
    cohort: Cohort
    selection_profile: Dict[str, Dict[str, float]]
    period_comparison: Dict[str, float]
    trial: TrialResult
    seeds: Dict
    config: Dict
    metadata: Optional[Dict] = None
