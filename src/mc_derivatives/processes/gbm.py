"""
Geometric Brownian Motion (GBM) path generation.

[T1] GBM SDE: dS = r S dt + sigma S dW

Discretized with Euler-Maruyama rather than the exact log-normal step:
    S(t+dt) = S(t) + r S(t) dt + sigma S(t) dW,  dW = Z sqrt(dt)

The Euler step carries a discretization bias that vanishes as dt -> 0.
Equivalently S(t_k) = S(0) * prod_{j<=k} (1 + r dt + sigma dW_j), which is
how the paths are built below.

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 6
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from mc_derivatives.processes.base import StochasticProcess, resolve_rng, validate_counts


@dataclass(frozen=True)
class GBMParams:
    """
    Parameters for GBM simulation.

    Ranges are not validated here; callers own parameter sanity.

    Attributes
    ----------
    s0 : float
        Initial price
    r : float
        Risk-free rate / drift (annualized, decimal)
    sigma : float
        Volatility (annualized, decimal)
    T : float
        Horizon in years
    """

    s0: float
    r: float
    sigma: float
    T: float

    @property
    def forward(self) -> float:
        """Forward price: S * exp(r*T)."""
        return self.s0 * np.exp(self.r * self.T)


class GBMProcess(StochasticProcess):
    """
    GBM simulator with a single Gaussian driver per step.

    Examples
    --------
    >>> process = GBMProcess(GBMParams(s0=100.0, r=0.05, sigma=0.2, T=1.0))
    >>> path = process.generate_price_path(365, rng=np.random.default_rng(42))
    >>> path.shape
    (365,)
    """

    def __init__(self, params: GBMParams):
        self.params = params

    def __repr__(self) -> str:
        return f"GBMProcess({self.params!r})"

    @property
    def time_to_expiry(self) -> float:
        return self.params.T

    def generate_price_paths(
        self,
        number_of_paths: int,
        number_of_steps: int,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        validate_counts(number_of_paths, number_of_steps)
        if number_of_steps == 0:
            return np.empty((number_of_paths, 0))

        rng = resolve_rng(rng)
        p = self.params

        dt = p.T / number_of_steps
        dw = rng.standard_normal((number_of_paths, number_of_steps)) * np.sqrt(dt)

        # Per-step growth factors of the Euler recursion s <- s * (1 + r dt + sigma dW)
        growth = 1.0 + p.r * dt + p.sigma * dw

        return p.s0 * np.cumprod(growth, axis=1)
