"""
Base class for price-path simulators.

Every process produces independent realizations of a discretized price path
with fixed-step Euler-Maruyama, dt = T / number_of_steps. The initial price
is NOT part of the returned path: element i is the price after step i + 1,
so the last element is the price at the horizon T.

Randomness comes from a numpy Generator. Passing rng=None draws fresh
OS entropy (no reproducibility); passing a Generator makes the draw
reproducible and lets concurrent callers keep independent streams.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from mc_derivatives.errors import DomainError


def resolve_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    """Return rng, or a freshly seeded Generator when rng is None."""
    return rng if rng is not None else np.random.default_rng()


def validate_counts(number_of_paths: int, number_of_steps: int) -> None:
    """Reject negative path or step counts (zero is allowed at this layer)."""
    if number_of_paths < 0:
        raise DomainError(f"CRITICAL: number_of_paths must be >= 0, got {number_of_paths}")
    if number_of_steps < 0:
        raise DomainError(f"CRITICAL: number_of_steps must be >= 0, got {number_of_steps}")


class StochasticProcess(ABC):
    """
    Abstract price-path simulator.

    Subclasses implement generate_price_paths(); the single-path contract
    used by the Monte Carlo engine is derived from it.
    """

    @property
    @abstractmethod
    def time_to_expiry(self) -> float:
        """Simulation horizon T in years."""
        pass

    @abstractmethod
    def generate_price_paths(
        self,
        number_of_paths: int,
        number_of_steps: int,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """
        Simulate several independent price paths.

        Parameters
        ----------
        number_of_paths : int
            Number of independent realizations
        number_of_steps : int
            Number of Euler steps per path
        rng : np.random.Generator, optional
            Random source; freshly seeded when omitted

        Returns
        -------
        np.ndarray
            Prices, shape (number_of_paths, number_of_steps)
        """
        pass

    def generate_price_path(
        self,
        number_of_steps: int,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """
        Simulate one price path.

        number_of_steps = 0 yields an empty path; rejecting it is the
        consumer's job.

        Returns
        -------
        np.ndarray
            Prices after each step, shape (number_of_steps,)
        """
        return self.generate_price_paths(1, number_of_steps, rng)[0]
