"""Error taxonomy for the simulation pipeline."""

from dataclasses import dataclass
from typing import Dict


class SimulationError(ValueError):
    """Base class for errors raised by pipeline operations."""


class InvalidConfiguration(SimulationError):
    """A parameter is outside its valid range (size, proportion, std, ...)."""


class OrderingViolation(SimulationError):
    """A stage was called on data an earlier stage has not produced yet."""


@dataclass(frozen=True)
class InsufficientSample:
    """Failure result returned when the significance test cannot run.

    Returned in place of a test result so that callers can tell
    "no effect detected" apart from "test could not run".
    """
    reason: str
    arm_sizes: Dict[str, int]

    def __str__(self) -> str:
        sizes = ', '.join(f'{arm}={n}' for arm, n in self.arm_sizes.items())
        return f"insufficient sample size: {self.reason} ({sizes})"
