"""Simulation pipeline demonstrating regression to the mean.

A synthetic population with fixed propensities gets independent yearly
noise; the top-need subgroup is selected in one period and re-measured in
the next, then split at random into control and treatment arms.
"""

from .generator import RegressionToMeanSimulation, spawn_seeds
from .core import (
    Population,
    Cohort,
    SignificanceTest,
    TrialResult,
    SimulationResult,
    SimulationError,
    InvalidConfiguration,
    OrderingViolation,
    InsufficientSample,
)
from .components import (
    generate_population,
    simulate_period,
    select_top,
    aggregate_means,
    selection_profile,
    period_comparison,
    run_trial,
    compare_arms,
)

__all__ = [
    'RegressionToMeanSimulation',
    'spawn_seeds',
    'Population',
    'Cohort',
    'SignificanceTest',
    'TrialResult',
    'SimulationResult',
    'SimulationError',
    'InvalidConfiguration',
    'OrderingViolation',
    'InsufficientSample',
    'generate_population',
    'simulate_period',
    'select_top',
    'aggregate_means',
    'selection_profile',
    'period_comparison',
    'run_trial',
    'compare_arms',
]
