"""Core infrastructure for the simulation pipeline."""

from .data_structures import Population, Cohort, SignificanceTest, TrialResult, SimulationResult
from .errors import SimulationError, InvalidConfiguration, OrderingViolation, InsufficientSample

__all__ = [
    'Population',
    'Cohort',
    'SignificanceTest',
    'TrialResult',
    'SimulationResult',
    'SimulationError',
    'InvalidConfiguration',
    'OrderingViolation',
    'InsufficientSample',
]
