"""Utility functions for simulation."""

import numpy as np

from typing import Dict

from .errors import InvalidConfiguration


SUPPORTED_DISTRIBUTIONS = {
    'normal': ('mean', 'std'),
    'uniform': ('min', 'max'),
}


def luck_column(period_id: int) -> str:
    """Column holding the noise drawn for a period."""
    return f'luck_{period_id}'


def need_column(period_id: int) -> str:
    """Column holding the observed need for a period."""
    return f'need_{period_id}'


def validate_distribution(spec: Dict) -> None:
    """Check a distribution spec of the form {'distribution': ..., 'params': {...}}.

    Args:
        spec: Distribution name and parameters

    Raises:
        InvalidConfiguration: Unknown distribution, missing or invalid parameters
    """
    if not isinstance(spec, dict):
        raise InvalidConfiguration(f"Distribution spec must be a mapping, got {spec!r}")

    dist = spec.get('distribution', 'normal')
    if dist not in SUPPORTED_DISTRIBUTIONS:
        raise InvalidConfiguration(
            f"Unknown distribution: {dist}. Choose from {list(SUPPORTED_DISTRIBUTIONS)}"
        )

    params = spec.get('params', {})
    missing = [name for name in SUPPORTED_DISTRIBUTIONS[dist] if name not in params]
    if missing:
        raise InvalidConfiguration(f"Distribution '{dist}' missing parameters: {missing}")

    for name in SUPPORTED_DISTRIBUTIONS[dist]:
        value = params[name]
        if isinstance(value, bool) or not isinstance(value, (int, float, np.number)) or not np.isfinite(value):
            raise InvalidConfiguration(f"Parameter '{name}' must be finite, got {params[name]}")

    if dist == 'normal' and params['std'] < 0:
        raise InvalidConfiguration(f"Standard deviation must be non-negative, got {params['std']}")
    if dist == 'uniform' and params['min'] > params['max']:
        raise InvalidConfiguration(
            f"Uniform bounds reversed: min={params['min']} > max={params['max']}"
        )


def validate_seed(seed, name: str = 'seed') -> None:
    """Seeds must be explicit non-negative integers."""
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise InvalidConfiguration(f"{name} must be a non-negative integer, got {seed!r}")


def validate_period_id(period_id) -> None:
    if isinstance(period_id, bool) or not isinstance(period_id, (int, np.integer)) or period_id < 1:
        raise InvalidConfiguration(f"Period id must be a positive integer, got {period_id!r}")


def draw_values(rng: np.random.Generator, spec: Dict, size: int) -> np.ndarray:
    """Draw `size` values from the distribution described by `spec`.

    Args:
        rng: Dedicated random stream for this draw
        spec: Validated distribution spec
        size: Number of values

    Returns:
        np.ndarray: Drawn values
    """
    dist = spec.get('distribution', 'normal')
    params = spec['params']

    if dist == 'normal':
        return rng.normal(params['mean'], params['std'], size=size)
    elif dist == 'uniform':
        return rng.uniform(params['min'], params['max'], size=size)
    else:
        raise InvalidConfiguration(f"Unknown distribution: {dist}")
