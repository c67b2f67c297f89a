"""Per-period outcome simulation: need = propensity + luck."""

import numpy as np

from typing import Dict

from ..core.data_structures import Population
from ..core.errors import OrderingViolation
from ..core.utils import (
    draw_values,
    luck_column,
    need_column,
    validate_distribution,
    validate_period_id,
    validate_seed,
)


class OutcomeSimulator:
    """Overlays independent period noise ("luck") on fixed propensities."""

    def __init__(self, distribution_params: Dict):
        """Initialize outcome simulator.

        Args:
            distribution_params: Luck distribution spec
        """
        validate_distribution(distribution_params)
        self.distribution_params = distribution_params

    def simulate(self, population: Population, period_id: int, seed: int) -> Population:
        """Simulate one period in place.

        Adds `luck_<period_id>` and `need_<period_id>` columns. Earlier
        periods are left untouched; a period can only be simulated once.

        Args:
            population: Population to extend
            period_id: Positive integer period identifier
            seed: Seed of this period's luck stream

        Returns:
            Population: The same population, extended
        """
        validate_period_id(period_id)
        validate_seed(seed, f'luck seed for period {period_id}')

        if population.has_period(period_id):
            raise OrderingViolation(f"Period {period_id} has already been simulated")

        rng = np.random.default_rng(seed)
        luck = draw_values(rng, self.distribution_params, population.size)

        df = population.data
        df[luck_column(period_id)] = luck
        df[need_column(period_id)] = df['propensity'].values + luck
        population.periods.append(int(period_id))

        return population


def simulate_period(
    population: Population,
    period_id: int,
    seed: int,
    distribution_params: Dict
) -> Population:
    """Draw luck for `period_id` and derive need, extending `population` in place."""
    return OutcomeSimulator(distribution_params).simulate(population, period_id, seed)
