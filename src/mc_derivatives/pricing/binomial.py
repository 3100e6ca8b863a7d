"""
Cox-Ross-Rubinstein binomial tree for European options.

Deterministic lattice pricer, useful as a second reference next to the
closed form. Uses continuous discounting per step, exp(-r dt).

[T1] u = exp(σ√dt), d = 1/u, p = (exp(r dt) - d) / (u - d)

References
----------
[T1] Cox, J. C., Ross, S. A., & Rubinstein, M. (1979). Option pricing:
     A simplified approach. Journal of Financial Economics, 7(3), 229-263.
"""

from datetime import datetime, timezone
from typing import Optional

import numpy as np

from mc_derivatives.cashflows import year_fraction
from mc_derivatives.errors import DomainError, ValidationError
from mc_derivatives.instruments.base import OptionType
from mc_derivatives.instruments.vanilla import VanillaOption


def binomial_price(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
    n_steps: int = 500,
) -> float:
    """
    Price a European option on a CRR lattice.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Continuously compounded risk-free rate (decimal)
    volatility : float
        Volatility (decimal, > 0)
    time_to_expiry : float
        Time to expiry (years, > 0)
    option_type : OptionType
        Call or put
    n_steps : int, default 500
        Number of lattice steps

    Returns
    -------
    float
        Option price
    """
    if n_steps <= 0:
        raise DomainError(f"CRITICAL: n_steps must be > 0, got {n_steps}")
    if volatility <= 0:
        raise ValidationError(f"CRITICAL: volatility must be > 0, got {volatility}")
    if time_to_expiry <= 0:
        raise ValidationError(f"CRITICAL: time_to_expiry must be > 0, got {time_to_expiry}")

    dt = time_to_expiry / n_steps
    up = np.exp(volatility * np.sqrt(dt))
    down = 1.0 / up
    growth = np.exp(rate * dt)
    p = (growth - down) / (up - down)

    if not 0.0 <= p <= 1.0:
        raise DomainError(
            f"CRITICAL: risk-neutral probability {p:.6f} outside [0, 1]. "
            f"Increase n_steps (dt={dt:.6g} too coarse for rate={rate}, volatility={volatility})."
        )

    # Terminal prices, j up-moves out of n_steps
    j = np.arange(n_steps + 1)
    terminal = spot * up**j * down ** (n_steps - j)

    if option_type == OptionType.CALL:
        values = np.maximum(terminal - strike, 0.0)
    else:
        values = np.maximum(strike - terminal, 0.0)

    discount = 1.0 / growth
    for _ in range(n_steps):
        values = discount * (p * values[1:] + (1.0 - p) * values[:-1])

    return float(values[0])


def binomial_price_option(
    option: VanillaOption,
    spot: float,
    rate: float,
    volatility: float,
    valuation_datetime: Optional[datetime] = None,
    n_steps: int = 500,
) -> float:
    """
    Price a VanillaOption on a CRR lattice up to its exercise instant.

    Time to expiry is measured in years of 365.25 days from valuation_datetime
    (default now, UTC), as for the closed form.

    Raises
    ------
    ValidationError
        If the option is exercised at or before the valuation instant
    """
    if valuation_datetime is None:
        valuation_datetime = datetime.now(timezone.utc)

    time_to_expiry = year_fraction(valuation_datetime, option.exercise_datetime)
    if time_to_expiry <= 0:
        raise ValidationError(
            f"CRITICAL: option exercised at {option.exercise_datetime.isoformat()} "
            f"is already expired at {valuation_datetime.isoformat()}"
        )

    return binomial_price(
        spot, option.strike, rate, volatility, time_to_expiry, option.option_type, n_steps
    )
