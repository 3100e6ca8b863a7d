"""
mc-derivatives: Monte Carlo pricing of derivative contracts.

Quick Start
-----------
>>> from datetime import datetime, timedelta, timezone
>>> from mc_derivatives import (
...     Currency, GBMParams, GBMProcess, OptionType, VanillaOption, monte_carlo_price,
... )
>>> now = datetime.now(timezone.utc)
>>> option = VanillaOption(
...     strike=100.0,
...     exercise_datetime=now + timedelta(days=365),
...     settlement_datetime=now + timedelta(days=367),
...     option_type=OptionType.CALL,
...     underlying_currency=Currency.USD,
... )
>>> process = GBMProcess(GBMParams(s0=100.0, r=0.05, sigma=0.2, T=1.0))
>>> pv = monte_carlo_price(option, process, 0.05, number_of_paths=1000, number_of_steps=365)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Cashflows
# =============================================================================
from mc_derivatives.cashflows import CashFlow, Currency, year_fraction

# =============================================================================
# Errors
# =============================================================================
from mc_derivatives.errors import DomainError, PricingCancelled, PricingError, ValidationError

# =============================================================================
# Processes
# =============================================================================
from mc_derivatives.processes import (
    GBMParams,
    GBMProcess,
    HestonParams,
    HestonPathResult,
    HestonProcess,
    StochasticProcess,
)

# =============================================================================
# Instruments
# =============================================================================
from mc_derivatives.instruments import (
    Barrier,
    BarrierOption,
    BarrierType,
    Instrument,
    OptionType,
    VanillaOption,
)

# =============================================================================
# Pricing
# =============================================================================
from mc_derivatives.pricing import (
    BSResult,
    MCResult,
    MonteCarloEngine,
    binomial_price,
    binomial_price_option,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_price_option,
    black_scholes_put,
    convergence_analysis,
    monte_carlo_price,
)

# =============================================================================
# Configuration
# =============================================================================
from mc_derivatives.config.settings import SETTINGS, SimulationConfig

__all__ = [
    # Version
    "__version__",
    # Cashflows
    "CashFlow",
    "Currency",
    "year_fraction",
    # Errors
    "PricingError",
    "ValidationError",
    "DomainError",
    "PricingCancelled",
    # Processes
    "StochasticProcess",
    "GBMParams",
    "GBMProcess",
    "HestonParams",
    "HestonPathResult",
    "HestonProcess",
    # Instruments
    "Instrument",
    "OptionType",
    "VanillaOption",
    "Barrier",
    "BarrierOption",
    "BarrierType",
    # Pricing
    "MCResult",
    "MonteCarloEngine",
    "monte_carlo_price",
    "convergence_analysis",
    "BSResult",
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    "black_scholes_price_option",
    "black_scholes_greeks",
    "binomial_price",
    "binomial_price_option",
    # Config
    "SETTINGS",
    "SimulationConfig",
]
