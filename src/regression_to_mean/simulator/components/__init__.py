"""Pipeline stages: population, outcomes, selection, trial."""

from .population import PopulationGenerator, generate_population
from .outcomes import OutcomeSimulator, simulate_period
from .selection import (
    CohortSelector,
    select_top,
    aggregate_means,
    selection_profile,
    period_comparison,
)
from .trial import InterventionTrial, run_trial, compare_arms

__all__ = [
    'PopulationGenerator',
    'OutcomeSimulator',
    'CohortSelector',
    'InterventionTrial',
    'generate_population',
    'simulate_period',
    'select_top',
    'aggregate_means',
    'selection_profile',
    'period_comparison',
    'run_trial',
    'compare_arms',
]
