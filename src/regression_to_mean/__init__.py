"""Regression to the mean in risk-stratification programmes, by simulation."""

from .simulator import (
    RegressionToMeanSimulation,
    generate_population,
    simulate_period,
    select_top,
    aggregate_means,
    run_trial,
    InvalidConfiguration,
    OrderingViolation,
    InsufficientSample,
)
from .utils import load_config

__all__ = [
    'RegressionToMeanSimulation',
    'generate_population',
    'simulate_period',
    'select_top',
    'aggregate_means',
    'run_trial',
    'InvalidConfiguration',
    'OrderingViolation',
    'InsufficientSample',
    'load_config',
]
__version__ = '1.0.0'
