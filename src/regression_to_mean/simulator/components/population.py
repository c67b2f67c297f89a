"""Population generation logic."""

import numpy as np
import pandas as pd

from typing import Dict

from ..core.data_structures import Population
from ..core.errors import InvalidConfiguration
from ..core.utils import draw_values, validate_distribution, validate_seed


class PopulationGenerator:
    """Generates the base cohort with a fixed latent propensity."""

    def __init__(self, distribution_params: Dict):
        """
        Initialize population generator.

        Args:
            distribution_params: Propensity distribution spec, e.g.
                {'distribution': 'normal', 'params': {'mean': 0.0, 'std': 1.0}}
        """
        validate_distribution(distribution_params)
        self.distribution_params = distribution_params

    def generate(self, n: int, seed: int) -> Population:
        """Generate `n` individuals with ids 1..n.

        Args:
            n: Population size
            seed: Seed of the propensity stream

        Returns:
            Population: Individuals with `id` and `propensity` columns
        """
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
            raise InvalidConfiguration(f"Population size must be a positive integer, got {n!r}")
        validate_seed(seed, 'propensity seed')

        rng = np.random.default_rng(seed)
        propensity = draw_values(rng, self.distribution_params, int(n))

        df = pd.DataFrame({
            'id': np.arange(1, n + 1),
            'propensity': propensity,
        })
        return Population(data=df)


def generate_population(n: int, seed: int, distribution_params: Dict) -> Population:
    """Generate a population of `n` individuals from a seeded propensity stream."""
    return PopulationGenerator(distribution_params).generate(n, seed)
