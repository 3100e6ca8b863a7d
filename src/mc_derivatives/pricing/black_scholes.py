"""
Black-Scholes closed form for European options.

Reference pricer for the Monte Carlo engine. Calls and puts share one formula
through the sign phi (+1 call, -1 put):

    [T1] V = phi * (S e^(-qT) N(phi d1) - K e^(-rT) N(phi d2))

Discounting here is continuous, exp(-rT). The Monte Carlo engine discounts
cashflows with annual compounding, (1 + r)^(-t); feed each convention its own
rate when comparing the two.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from scipy import stats

from mc_derivatives.cashflows import year_fraction
from mc_derivatives.config.settings import SETTINGS
from mc_derivatives.errors import ValidationError
from mc_derivatives.instruments.base import OptionType, intrinsic_value
from mc_derivatives.instruments.vanilla import VanillaOption

#: Greeks scaling: vega and rho per 1 percentage point, theta per calendar day
PER_PERCENT: float = 0.01
DAYS_PER_YEAR: float = 365.0


@dataclass(frozen=True)
class BSResult:
    """
    Closed-form price with sensitivities.

    Attributes
    ----------
    price : float
        Option value
    delta : float
        dV/dS
    gamma : float
        d2V/dS2
    vega : float
        dV/dsigma per 1 vol point
    theta : float
        dV/dt per calendar day
    rho : float
        dV/dr per 1 rate point
    d1 : float
        First standardized moneyness
    d2 : float
        Second standardized moneyness, d1 - sigma sqrt(T)
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float


def _phi(option_type: OptionType) -> float:
    return 1.0 if option_type == OptionType.CALL else -1.0


def _check_inputs(spot: float, strike: float, volatility: float, time_to_expiry: float) -> None:
    if spot <= 0:
        raise ValidationError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise ValidationError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility <= 0:
        raise ValidationError(f"CRITICAL: volatility must be > 0, got {volatility}")
    if time_to_expiry < 0:
        raise ValidationError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")


def _moneyness(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    dividend: float,
) -> tuple[float, float]:
    """[T1] d1 = (ln(S/K) + (r - q + sigma^2/2) T) / (sigma sqrt(T)), d2 = d1 - sigma sqrt(T)."""
    total_vol = volatility * np.sqrt(time_to_expiry)
    d1 = (np.log(spot / strike) + (rate - dividend) * time_to_expiry) / total_vol + 0.5 * total_vol
    return float(d1), float(d1 - total_vol)


def black_scholes_price(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
    dividend: float = 0.0,
) -> float:
    """
    Price a European call or put.

    Parameters
    ----------
    spot : float
        Current spot price (> 0)
    strike : float
        Strike price (> 0)
    rate : float
        Continuously compounded risk-free rate (decimal)
    volatility : float
        Volatility (decimal, > 0)
    time_to_expiry : float
        Time to expiry in years (>= 0); zero returns intrinsic value
    option_type : OptionType
        Call or put
    dividend : float, default 0.0
        Continuous dividend yield (decimal)

    Returns
    -------
    float
        Option value

    Examples
    --------
    >>> round(black_scholes_price(100, 100, 0.05, 0.20, 1.0, OptionType.CALL), 2)
    10.45
    """
    _check_inputs(spot, strike, volatility, time_to_expiry)

    if time_to_expiry == 0:
        return intrinsic_value(spot, strike, option_type)

    phi = _phi(option_type)
    d1, d2 = _moneyness(spot, strike, rate, volatility, time_to_expiry, dividend)
    forward_leg = spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(phi * d1)
    strike_leg = strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(phi * d2)

    return float(phi * (forward_leg - strike_leg))


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    dividend: float = 0.0,
) -> float:
    """[T1] C = S e^(-qT) N(d1) - K e^(-rT) N(d2)."""
    return black_scholes_price(
        spot, strike, rate, volatility, time_to_expiry, OptionType.CALL, dividend
    )


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    dividend: float = 0.0,
) -> float:
    """[T1] P = K e^(-rT) N(-d2) - S e^(-qT) N(-d1)."""
    return black_scholes_price(
        spot, strike, rate, volatility, time_to_expiry, OptionType.PUT, dividend
    )


def black_scholes_price_option(
    option: VanillaOption,
    spot: float,
    rate: float,
    volatility: float,
    valuation_datetime: Optional[datetime] = None,
) -> float:
    """
    Price a VanillaOption, measuring time to expiry up to its exercise instant.

    Time is counted in years of 365.25 days, the same clock the cashflows use.
    valuation_datetime defaults to now (UTC). An option exercised before the
    valuation instant raises ValidationError.
    """
    if valuation_datetime is None:
        valuation_datetime = datetime.now(timezone.utc)

    time_to_expiry = year_fraction(valuation_datetime, option.exercise_datetime)
    if time_to_expiry < 0:
        raise ValidationError(
            f"CRITICAL: option exercised at {option.exercise_datetime.isoformat()} "
            f"is already expired at {valuation_datetime.isoformat()}"
        )

    return black_scholes_price(
        spot, option.strike, rate, volatility, time_to_expiry, option.option_type
    )


def black_scholes_greeks(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
    dividend: float = 0.0,
) -> BSResult:
    """
    Price and first-order sensitivities in one pass.

    With phi = +1 (call) or -1 (put), Df = e^(-rT), Dq = e^(-qT):
    [T1] delta = phi Dq N(phi d1)
    [T1] gamma = Dq n(d1) / (S sigma sqrt(T))
    [T1] vega  = S Dq n(d1) sqrt(T)
    [T1] theta = -S Dq n(d1) sigma / (2 sqrt(T)) - phi r K Df N(phi d2) + phi q S Dq N(phi d1)
    [T1] rho   = phi K T Df N(phi d2)

    Vega and rho are scaled per 1 percentage point, theta per calendar day.
    At expiry the price is intrinsic and every sensitivity but delta is zero.
    """
    _check_inputs(spot, strike, volatility, time_to_expiry)
    phi = _phi(option_type)

    if time_to_expiry == 0:
        price = intrinsic_value(spot, strike, option_type)
        edge = float("inf") if spot > strike else float("-inf")
        return BSResult(
            price=price,
            delta=phi if price > 0 else 0.0,
            gamma=0.0,
            vega=0.0,
            theta=0.0,
            rho=0.0,
            d1=edge,
            d2=edge,
        )

    d1, d2 = _moneyness(spot, strike, rate, volatility, time_to_expiry, dividend)
    sqrt_t = np.sqrt(time_to_expiry)
    df_rate = np.exp(-rate * time_to_expiry)
    df_div = np.exp(-dividend * time_to_expiry)

    density = stats.norm.pdf(d1)
    cdf_d1 = stats.norm.cdf(phi * d1)
    cdf_d2 = stats.norm.cdf(phi * d2)

    price = phi * (spot * df_div * cdf_d1 - strike * df_rate * cdf_d2)
    theta_annual = (
        -spot * df_div * density * volatility / (2.0 * sqrt_t)
        - phi * rate * strike * df_rate * cdf_d2
        + phi * dividend * spot * df_div * cdf_d1
    )

    return BSResult(
        price=float(price),
        delta=float(phi * df_div * cdf_d1),
        gamma=float(df_div * density / (spot * volatility * sqrt_t)),
        vega=float(spot * df_div * density * sqrt_t * PER_PERCENT),
        theta=float(theta_annual / DAYS_PER_YEAR),
        rho=float(phi * strike * time_to_expiry * df_rate * cdf_d2 * PER_PERCENT),
        d1=d1,
        d2=d2,
    )


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    time_to_expiry: float,
    dividend: float = 0.0,
    tolerance: Optional[float] = None,
) -> tuple[bool, float]:
    """
    Compare C - P with the forward value S e^(-qT) - K e^(-rT).

    tolerance defaults to SETTINGS.validation.put_call_parity_tolerance.

    Returns
    -------
    tuple[bool, float]
        (within tolerance, absolute parity error)
    """
    forward_value = spot * np.exp(-dividend * time_to_expiry) - strike * np.exp(
        -rate * time_to_expiry
    )
    if tolerance is None:
        tolerance = SETTINGS.validation.put_call_parity_tolerance

    error = abs((call_price - put_price) - forward_value)
    return error < tolerance, error
