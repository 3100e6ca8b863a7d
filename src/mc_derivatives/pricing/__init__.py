"""
Pricing engines.

Provides:
- Monte Carlo engine (any process x any instrument, compound discounting)
- Black-Scholes analytical pricing with Greeks (continuous discounting)
- CRR binomial tree
"""

from mc_derivatives.pricing.binomial import binomial_price, binomial_price_option
from mc_derivatives.pricing.black_scholes import (
    BSResult,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_price_option,
    black_scholes_put,
    put_call_parity_check,
)
from mc_derivatives.pricing.monte_carlo import (
    MCResult,
    MonteCarloEngine,
    convergence_analysis,
    estimate_convergence_rate,
    monte_carlo_price,
)

__all__ = [
    # Monte Carlo
    "MCResult",
    "MonteCarloEngine",
    "convergence_analysis",
    "estimate_convergence_rate",
    "monte_carlo_price",
    # Black-Scholes
    "BSResult",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_price",
    "black_scholes_price_option",
    "black_scholes_put",
    "put_call_parity_check",
    # Lattice
    "binomial_price",
    "binomial_price_option",
]
