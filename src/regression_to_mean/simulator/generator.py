"""Main interface for running the regression-to-the-mean pipeline."""

import numpy as np
import pandas as pd

from pathlib import Path
from typing import Dict, Optional, Union

from .core.data_structures import SimulationResult
from .components import (
    PopulationGenerator,
    OutcomeSimulator,
    CohortSelector,
    InterventionTrial,
    selection_profile,
    period_comparison,
)
from ..utils.config_loader import DEFAULT_CONFIG_PATH, load_config, validate_config


class RegressionToMeanSimulation:
    """High-level interface running the four stages in causal order.

    population -> baseline period -> cohort selection -> follow-up period -> trial
    """

    def __init__(self, config: Dict, verbose: bool = False):
        """Initialize simulation.

        Args:
            config: Parsed configuration (see config/simulation.yml)
            verbose: Print progress messages
        """
        validate_config(config)
        self.config = config
        self.verbose = verbose

        outcomes = config['outcomes']
        trial = config['trial']

        self.baseline_period = outcomes['baseline_period']
        self.followup_period = outcomes['followup_period']

        self.population_gen = PopulationGenerator(config['population']['propensity'])
        self.outcome_sim = OutcomeSimulator(outcomes['luck'])
        self.selector = CohortSelector(config['selection']['proportion'])
        self.trial = InterventionTrial(
            allocation_prob=trial['allocation_prob'],
            effect_distribution_params=trial['effect'],
            allocation_method=trial.get('allocation_method', 'complete'),
            equal_var=trial.get('equal_var', False)
        )

    @classmethod
    def from_yaml(
        cls,
        config_path: Union[str, Path] = DEFAULT_CONFIG_PATH,
        verbose: bool = False
    ) -> 'RegressionToMeanSimulation':
        """Build a simulation from a YAML configuration file."""
        config = load_config(config_path)
        if verbose:
            print(f"Loaded configuration from {config_path}")
        return cls(config, verbose=verbose)

    def run(self, seeds: Optional[Dict] = None) -> SimulationResult:
        """Run the pipeline once.

        Args:
            seeds: Overrides the configured seeds. Same layout as the
                `seeds` section: propensity, luck (per period), assignment, effect

        Returns:
            SimulationResult: Population, cohort, descriptive tables and trial
        """
        if seeds is None:
            seeds = self.config['seeds']

        n = self.config['population']['size']

        self._log(f"Generating population of {n} (seed {seeds['propensity']})...")
        population = self.population_gen.generate(n, seeds['propensity'])

        self._log(f"Simulating period {self.baseline_period}...")
        self.outcome_sim.simulate(
            population, self.baseline_period, seeds['luck'][self.baseline_period]
        )

        cohort = self.selector.select(population, self.baseline_period)
        self._log(
            f"Selected top {self.selector.proportion:.0%} on period {self.baseline_period}: "
            f"{cohort.size} individuals"
        )

        self._log(f"Simulating period {self.followup_period}...")
        self.outcome_sim.simulate(
            population, self.followup_period, seeds['luck'][self.followup_period]
        )

        comparison = period_comparison(cohort, self.baseline_period, self.followup_period)
        self._log(
            f"  Cohort mean need {comparison['baseline_mean']:.3f} -> "
            f"{comparison['followup_mean']:.3f} with no intervention"
        )

        trial = self.trial.run(
            cohort,
            assignment_seed=seeds['assignment'],
            effect_seed=seeds['effect'],
            baseline_period=self.baseline_period,
            followup_period=self.followup_period
        )
        if trial.test_ran:
            self._log(
                f"  Trial: t = {trial.test.statistic:.3f}, p = {trial.test.p_value:.4f}"
            )
        else:
            self._log(f"  Trial: {trial.test}")

        return SimulationResult(
            population=population,
            cohort=cohort,
            selection_profile=selection_profile(cohort),
            period_comparison=comparison,
            trial=trial,
            seeds=seeds,
            config=self.config,
            metadata=self._get_metadata()
        )

    def replicate(
        self,
        n_reps: Optional[int] = None,
        base_seed: Optional[int] = None
    ) -> pd.DataFrame:
        """Re-run the pipeline with independent seeds per replication.

        Args:
            n_reps: Number of replications (default from `replication` section)
            base_seed: Root of the seed sequence (default from `replication` section)

        Returns:
            pd.DataFrame: One row per replication
        """
        replication = self.config.get('replication', {})
        if n_reps is None:
            n_reps = replication.get('n_reps', 100)
        if base_seed is None:
            base_seed = replication.get('base_seed', 42)

        rows = []
        for rep, seeds in enumerate(spawn_seeds(base_seed, n_reps, self.baseline_period, self.followup_period)):
            self._log(f"Replication {rep + 1}/{n_reps}...")
            result = self.run(seeds=seeds)
            trial = result.trial
            arm_means = trial.arm_summary.set_index('arm')['mean_change']

            rows.append({
                'rep': rep,
                'cohort_baseline_mean': result.period_comparison['baseline_mean'],
                'cohort_followup_mean': result.period_comparison['followup_mean'],
                'shrinkage': result.period_comparison['shrinkage'],
                'control_mean_change': arm_means['control'],
                'treatment_mean_change': arm_means['treatment'],
                'test_ran': trial.test_ran,
                'statistic': trial.test.statistic if trial.test_ran else np.nan,
                'p_value': trial.test.p_value if trial.test_ran else np.nan,
            })

        return pd.DataFrame(rows)

    def get_config_summary(self) -> Dict:
        """Get summary of configuration parameters."""
        return {
            'population_size': self.config['population']['size'],
            'periods': [self.baseline_period, self.followup_period],
            'selection_proportion': self.selector.proportion,
            'allocation_prob': self.trial.allocation_prob,
            'allocation_method': self.trial.allocation_method,
            'effect': self.config['trial']['effect'],
        }

    def _get_metadata(self) -> Dict:
        return {
            'population_size': self.config['population']['size'],
            'baseline_period': self.baseline_period,
            'followup_period': self.followup_period,
            'proportion': self.selector.proportion,
            'allocation_method': self.trial.allocation_method,
        }

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)


def spawn_seeds(base_seed: int, n_reps: int, baseline_period: int, followup_period: int):
    """Yield independent seed sets, one per replication.

    Each replication gets its own child of `np.random.SeedSequence(base_seed)`;
    the five draws of a run take separate words of the child's state.
    """
    for child in np.random.SeedSequence(base_seed).spawn(n_reps):
        state = [int(word) for word in child.generate_state(5)]
        yield {
            'propensity': state[0],
            'luck': {baseline_period: state[1], followup_period: state[2]},
            'assignment': state[3],
            'effect': state[4],
        }
