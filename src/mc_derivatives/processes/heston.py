"""
Heston stochastic volatility path generation.

[T1] Heston SDEs under the pricing measure:
  dS = r S dt + sqrt(v) S dW_s
  dv = kappa (theta - v) dt + sigma_v sqrt(v) dW_v
  dW_s dW_v = rho dt

Euler-Maruyama with two correlated drivers built from independent normals:
  dW_s = Z1 sqrt(dt)
  dW_v = (rho Z1 + sqrt(1 - rho^2) Z2) sqrt(dt)

Each step advances the price with the variance at the start of the step,
then advances the variance and floors it at zero:
  s <- s + r s dt + s sqrt(v) dW_s
  v <- max(0, v + kappa (theta - v) dt + sigma_v sqrt(v) dW_v)

The floor keeps every variance that enters a square root non-negative. It
biases the variance upward relative to the continuous CIR process when the
Feller condition fails; that bias is accepted, not corrected, and every floor
event is counted (HestonPathResult.n_floored) and logged at DEBUG.

References
----------
[T1] Heston, S. L. (1993). A closed-form solution for options with stochastic
     volatility with applications to bond and currency options.
[T1] Lord, R., Koekkoek, R., & van Dijk, D. (2010). A comparison of biased
     simulation schemes for stochastic volatility models.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from mc_derivatives.processes.base import StochasticProcess, resolve_rng, validate_counts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HestonParams:
    """
    Heston model parameters.

    The variance parameters (v0, theta) are variances, not volatilities, and
    sigma_v is the volatility of the variance process. Ranges are not
    validated here.

    Attributes
    ----------
    s0 : float
        Initial price
    r : float
        Risk-free rate / drift (annualized, decimal)
    v0 : float
        Initial variance
    kappa : float
        Mean reversion speed
    theta : float
        Long-run variance
    sigma_v : float
        Volatility of variance
    rho : float
        Correlation between price and variance drivers, in [-1, 1]
    T : float
        Horizon in years
    """

    s0: float
    r: float
    v0: float
    kappa: float
    theta: float
    sigma_v: float
    rho: float
    T: float

    def satisfies_feller(self) -> bool:
        """
        Check the Feller condition 2*kappa*theta >= sigma_v^2.

        [T1] When it holds the continuous variance process stays strictly positive.
        """
        return 2 * self.kappa * self.theta >= self.sigma_v**2


@dataclass(frozen=True)
class HestonPathResult:
    """
    Result of Heston path generation.

    Attributes
    ----------
    price_paths : np.ndarray
        Price after each step, shape (n_paths, n_steps)
    variance_paths : np.ndarray
        Variance used in each step's price update, shape (n_paths, n_steps)
    n_floored : int
        Number of variance updates floored at zero across all paths
    """

    price_paths: np.ndarray
    variance_paths: np.ndarray
    n_floored: int

    @property
    def n_paths(self) -> int:
        """Number of paths."""
        return self.price_paths.shape[0]

    @property
    def n_steps(self) -> int:
        """Number of time steps."""
        return self.price_paths.shape[1]

    @property
    def terminal_prices(self) -> np.ndarray:
        """Price at the horizon for every path."""
        return self.price_paths[:, -1]


class HestonProcess(StochasticProcess):
    """
    Heston simulator with full-truncation variance flooring.

    Examples
    --------
    >>> params = HestonParams(s0=100.0, r=0.05, v0=0.04, kappa=2.0,
    ...                       theta=0.04, sigma_v=0.3, rho=-0.7, T=1.0)
    >>> result = HestonProcess(params).simulate(1000, 252, rng=np.random.default_rng(42))
    >>> bool((result.variance_paths >= 0).all())
    True
    """

    def __init__(self, params: HestonParams):
        self.params = params

    def __repr__(self) -> str:
        return f"HestonProcess({self.params!r})"

    @property
    def time_to_expiry(self) -> float:
        return self.params.T

    def simulate(
        self,
        number_of_paths: int,
        number_of_steps: int,
        rng: Optional[np.random.Generator] = None,
    ) -> HestonPathResult:
        """
        Simulate price and variance paths, vectorized across paths.

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
        HestonPathResult
            Price paths, variances used and the floor-event count
        """
        validate_counts(number_of_paths, number_of_steps)

        prices = np.empty((number_of_paths, number_of_steps))
        variances = np.empty((number_of_paths, number_of_steps))
        if number_of_steps == 0:
            return HestonPathResult(price_paths=prices, variance_paths=variances, n_floored=0)

        rng = resolve_rng(rng)
        p = self.params

        dt = p.T / number_of_steps
        sqrt_dt = np.sqrt(dt)
        rho_perp = np.sqrt(1.0 - p.rho**2)

        s = np.full(number_of_paths, p.s0, dtype=np.float64)
        v = np.full(number_of_paths, max(p.v0, 0.0), dtype=np.float64)
        n_floored = number_of_paths if p.v0 < 0 else 0

        for i in range(number_of_steps):
            z1 = rng.standard_normal(number_of_paths)
            z2 = rng.standard_normal(number_of_paths)

            dw_s = z1 * sqrt_dt
            dw_v = (p.rho * z1 + rho_perp * z2) * sqrt_dt

            sqrt_v = np.sqrt(v)
            variances[:, i] = v

            s = s + p.r * s * dt + s * sqrt_v * dw_s
            v = v + p.kappa * (p.theta - v) * dt + p.sigma_v * sqrt_v * dw_v

            negative = v < 0.0
            if negative.any():
                n_floored += int(negative.sum())
                v = np.where(negative, 0.0, v)

            prices[:, i] = s

        if n_floored:
            logger.debug(
                f"Heston variance floored to zero {n_floored} times "
                f"({number_of_paths} paths x {number_of_steps} steps)"
            )

        return HestonPathResult(price_paths=prices, variance_paths=variances, n_floored=n_floored)

    def generate_price_paths(
        self,
        number_of_paths: int,
        number_of_steps: int,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        return self.simulate(number_of_paths, number_of_steps, rng).price_paths
