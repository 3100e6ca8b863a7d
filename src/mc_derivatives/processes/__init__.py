"""
Stochastic price-path simulators.

Provides:
- GBM process (Euler-Maruyama)
- Heston stochastic volatility process (Euler, full-truncation variance floor)
"""

from mc_derivatives.processes.base import StochasticProcess
from mc_derivatives.processes.gbm import GBMParams, GBMProcess
from mc_derivatives.processes.heston import HestonParams, HestonPathResult, HestonProcess

__all__ = [
    "StochasticProcess",
    # GBM
    "GBMParams",
    "GBMProcess",
    # Heston
    "HestonParams",
    "HestonPathResult",
    "HestonProcess",
]
