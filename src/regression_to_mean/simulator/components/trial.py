"""Randomized control/treatment trial on a selected cohort."""

import numpy as np
import pandas as pd

from scipy import stats
from typing import Dict, Optional, Union

from ..core.data_structures import Cohort, SignificanceTest, TrialResult
from ..core.errors import InsufficientSample, InvalidConfiguration, OrderingViolation
from ..core.utils import draw_values, need_column, validate_distribution, validate_seed


ARMS = ('control', 'treatment')
ALLOCATION_METHODS = ('complete', 'bernoulli')
MIN_ARM_SIZE = 2


class InterventionTrial:
    """Assigns cohort members to arms, applies the treatment effect and tests it.

    Stateless apart from its configuration: every call to `run` uses fresh
    random streams built from the seeds it receives.
    """

    def __init__(
        self,
        allocation_prob: float,
        effect_distribution_params: Dict,
        allocation_method: str = 'complete',
        equal_var: bool = False
    ):
        """Initialize trial.

        Args:
            allocation_prob: Probability of assignment to treatment, in [0, 1]
            effect_distribution_params: Distribution of the per-individual
                treatment effect (subtracted from follow-up need)
            allocation_method: 'complete' assigns exactly round(p * n) members
                to treatment; 'bernoulli' flips an independent coin per member
            equal_var: Use Student's instead of Welch's t-test
        """
        if (
            isinstance(allocation_prob, bool)
            or not isinstance(allocation_prob, (int, float, np.number))
            or not 0 <= allocation_prob <= 1
        ):
            raise InvalidConfiguration(
                f"Allocation probability must be in [0, 1], got {allocation_prob!r}"
            )
        if allocation_method not in ALLOCATION_METHODS:
            raise InvalidConfiguration(
                f"Unknown allocation method: {allocation_method}. Choose from {list(ALLOCATION_METHODS)}"
            )
        validate_distribution(effect_distribution_params)

        self.allocation_prob = float(allocation_prob)
        self.effect_distribution_params = effect_distribution_params
        self.allocation_method = allocation_method
        self.equal_var = equal_var

    def assign(self, n: int, seed: int) -> np.ndarray:
        """Draw arm labels for `n` members.

        Depends only on `n` and `seed`, never on member attributes.

        Returns:
            np.ndarray: Boolean mask, True for treatment
        """
        rng = np.random.default_rng(seed)

        if self.allocation_method == 'complete':
            n_treated = int(np.floor(self.allocation_prob * n + 0.5))
            is_treatment = np.zeros(n, dtype=bool)
            is_treatment[rng.permutation(n)[:n_treated]] = True
            return is_treatment

        return rng.random(n) < self.allocation_prob

    def run(
        self,
        cohort: Cohort,
        assignment_seed: int,
        effect_seed: int,
        baseline_period: Optional[int] = None,
        followup_period: Optional[int] = None
    ) -> TrialResult:
        """Run the trial on a cohort.

        Args:
            cohort: Cohort returned by selection
            assignment_seed: Seed of the arm-assignment stream
            effect_seed: Seed of the treatment-effect stream
            baseline_period: Defaults to the cohort's reference period
            followup_period: Defaults to the period after the baseline

        Returns:
            TrialResult: Per-individual table, per-arm means and the test
        """
        if not isinstance(cohort, Cohort):
            raise OrderingViolation(
                f"Trial requires a selected Cohort, got {type(cohort).__name__}"
            )
        validate_seed(assignment_seed, 'assignment seed')
        validate_seed(effect_seed, 'effect seed')

        if baseline_period is None:
            baseline_period = cohort.reference_period
        if followup_period is None:
            followup_period = baseline_period + 1

        cohort.population.require_period(baseline_period)
        cohort.population.require_period(followup_period)

        df = cohort.data
        n = len(df)

        is_treatment = self.assign(n, assignment_seed)
        # One draw per member so the effects do not depend on the assignment
        effects = draw_values(
            np.random.default_rng(effect_seed), self.effect_distribution_params, n
        )
        applied = np.where(is_treatment, effects, 0.0)

        baseline = df[need_column(baseline_period)].values
        followup = df[need_column(followup_period)].values
        adjusted = followup - applied

        adjusted_col = f'adjusted_{need_column(followup_period)}'
        assignments = pd.DataFrame({
            'id': df['id'].values,
            'arm': np.where(is_treatment, 'treatment', 'control'),
            'propensity': df['propensity'].values,
            'effect': applied,
            need_column(baseline_period): baseline,
            need_column(followup_period): followup,
            adjusted_col: adjusted,
            'change': adjusted - baseline,
        })

        arm_summary = self._summarise_arms(assignments, baseline_period, adjusted_col)

        control = assignments.loc[assignments['arm'] == 'control', 'change'].values
        treatment = assignments.loc[assignments['arm'] == 'treatment', 'change'].values
        test = compare_arms(control, treatment, equal_var=self.equal_var)

        return TrialResult(
            assignments=assignments,
            arm_summary=arm_summary,
            test=test,
            baseline_period=int(baseline_period),
            followup_period=int(followup_period),
            allocation_prob=self.allocation_prob,
            allocation_method=self.allocation_method
        )

    @staticmethod
    def _summarise_arms(
        assignments: pd.DataFrame,
        baseline_period: int,
        adjusted_col: str
    ) -> pd.DataFrame:
        """Mean baseline need, adjusted follow-up need and change per arm."""
        rows = []
        for arm in ARMS:
            members = assignments[assignments['arm'] == arm]
            rows.append({
                'arm': arm,
                'n': len(members),
                'mean_propensity': members['propensity'].mean(),
                'mean_baseline_need': members[need_column(baseline_period)].mean(),
                'mean_adjusted_followup_need': members[adjusted_col].mean(),
                'mean_change': members['change'].mean(),
                'mean_effect': members['effect'].mean(),
            })
        return pd.DataFrame(rows)


def compare_arms(
    control: np.ndarray,
    treatment: np.ndarray,
    equal_var: bool = False
) -> Union[SignificanceTest, InsufficientSample]:
    """Two-sample t-test of per-individual change, control vs treatment.

    A positive statistic means the control arm's change was larger, i.e.
    treatment lowered need more.
    """
    control = np.asarray(control, dtype=float)
    treatment = np.asarray(treatment, dtype=float)

    sizes = {'control': len(control), 'treatment': len(treatment)}
    if min(sizes.values()) < MIN_ARM_SIZE:
        return InsufficientSample(
            reason=f"each arm needs at least {MIN_ARM_SIZE} members",
            arm_sizes=sizes
        )

    statistic, p_value = stats.ttest_ind(control, treatment, equal_var=equal_var)

    return SignificanceTest(
        statistic=float(statistic),
        p_value=float(p_value),
        mean_difference=float(control.mean() - treatment.mean()),
        method='student' if equal_var else 'welch'
    )


def run_trial(
    cohort: Cohort,
    allocation_prob: float,
    effect_distribution_params: Dict,
    assignment_seed: int,
    effect_seed: int,
    allocation_method: str = 'complete',
    baseline_period: Optional[int] = None,
    followup_period: Optional[int] = None
) -> TrialResult:
    """Randomize the cohort into arms, apply the effect and compare changes."""
    trial = InterventionTrial(
        allocation_prob=allocation_prob,
        effect_distribution_params=effect_distribution_params,
        allocation_method=allocation_method
    )
    return trial.run(
        cohort,
        assignment_seed=assignment_seed,
        effect_seed=effect_seed,
        baseline_period=baseline_period,
        followup_period=followup_period
    )
