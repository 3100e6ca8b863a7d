"""
Numeric tolerances shared by pricing checks and tests.

Two kinds of tolerance live here:
    Exact identities: pathwise or closed-form relations that only floating
        point rounding can break (parity, cashflow round-trips).
    Sampling error: bounds on Monte Carlo estimates, expressed through the
        CLT standard error sigma / sqrt(N).

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Exact Identities (Rounding Only)
# =============================================================================

#: Closed-form no-arbitrage bounds (C <= S, P <= K e^(-rT), ...)
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: C - P = S e^(-qT) - K e^(-rT) in closed form, call - put = S_T - K per path
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8

#: Knock-in + knock-out = vanilla on the same path
IN_OUT_PARITY_TOLERANCE: Final[float] = 1e-10

#: Cashflow discount / accrue round-trips (relative)
CASHFLOW_TOLERANCE: Final[float] = 1e-9

#: CRR lattice vs closed form at a few hundred steps (absolute, price units)
BINOMIAL_BS_TOLERANCE: Final[float] = 0.05


# =============================================================================
# Sampling Error (CLT)
# =============================================================================

#: Standard errors allowed between an MC estimate and its reference
MC_STANDARD_ERRORS: Final[float] = 4.0


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Relative tolerance for an N-path estimate.

    [T1] The estimator's standard error is sigma / sqrt(N); confidence=3
    covers 99.7% of seeds.

    Parameters
    ----------
    n_paths : int
        Paths in the estimate
    sigma : float
        Relative standard deviation of one payoff
    confidence : float
        Multiple of the standard error to accept

    Returns
    -------
    float
        confidence * sigma / sqrt(n_paths)
    """
    return confidence * sigma / np.sqrt(n_paths)


# =============================================================================
# Lookup by Name
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "in_out_parity": IN_OUT_PARITY_TOLERANCE,
    "cashflow": CASHFLOW_TOLERANCE,
    "binomial_bs": BINOMIAL_BS_TOLERANCE,
    "mc_standard_errors": MC_STANDARD_ERRORS,
}


def get_tolerance(name: str) -> float:
    """Look up a tolerance by registry name; unknown names raise KeyError."""
    try:
        return TOLERANCE_REGISTRY[name]
    except KeyError:
        known = ", ".join(sorted(TOLERANCE_REGISTRY))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {known}") from None
