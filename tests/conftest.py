"""
Centralized pytest fixtures for the mc-derivatives test suite.

Fixture Categories:
1. Instants - Fixed valuation / exercise / settlement datetimes
2. Model Parameters - Standard GBM and Heston setups
3. Instruments - ATM vanilla options and option factories
4. Randomness - Reproducible numpy generators
"""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from mc_derivatives.cashflows import Currency
from mc_derivatives.instruments import (
    Barrier,
    BarrierOption,
    BarrierType,
    OptionType,
    VanillaOption,
)
from mc_derivatives.processes import GBMParams, GBMProcess, HestonParams, HestonProcess

# =============================================================================
# INSTANTS
# =============================================================================

VALUATION = datetime(2024, 1, 1, tzinfo=timezone.utc)
EXERCISE = VALUATION + timedelta(days=365)
SETTLEMENT = EXERCISE + timedelta(days=2)


@pytest.fixture
def valuation_datetime() -> datetime:
    """Fixed valuation instant."""
    return VALUATION


@pytest.fixture
def exercise_datetime() -> datetime:
    """Exercise instant one year after valuation."""
    return EXERCISE


@pytest.fixture
def settlement_datetime() -> datetime:
    """Settlement two days after exercise."""
    return SETTLEMENT


# =============================================================================
# MODEL PARAMETERS
# =============================================================================

@pytest.fixture
def gbm_params() -> GBMParams:
    """Standard GBM parameters (s0=100, r=5%, sigma=20%, T=1)."""
    return GBMParams(s0=100.0, r=0.05, sigma=0.20, T=1.0)


@pytest.fixture
def gbm_process(gbm_params: GBMParams) -> GBMProcess:
    """GBM process on standard parameters."""
    return GBMProcess(gbm_params)


@pytest.fixture
def heston_params() -> HestonParams:
    """Typical equity Heston parameters (Feller satisfied)."""
    return HestonParams(
        s0=100.0, r=0.05, v0=0.04, kappa=2.0, theta=0.04, sigma_v=0.3, rho=-0.7, T=1.0
    )


@pytest.fixture
def heston_process(heston_params: HestonParams) -> HestonProcess:
    """Heston process on typical parameters."""
    return HestonProcess(heston_params)


# =============================================================================
# INSTRUMENTS
# =============================================================================

def _vanilla(option_type: OptionType, strike: float = 100.0) -> VanillaOption:
    return VanillaOption(
        strike=strike,
        exercise_datetime=EXERCISE,
        settlement_datetime=SETTLEMENT,
        option_type=option_type,
        underlying_currency=Currency.USD,
    )


def _barrier(
    barrier_type: BarrierType,
    level: float,
    option_type: OptionType = OptionType.CALL,
    strike: float = 100.0,
) -> BarrierOption:
    return BarrierOption(
        strike=strike,
        exercise_datetime=EXERCISE,
        settlement_datetime=SETTLEMENT,
        option_type=option_type,
        barrier=Barrier(barrier_type, level),
        underlying_currency=Currency.USD,
    )


@pytest.fixture
def make_vanilla():
    """Factory for USD vanilla options on the standard instants."""
    return _vanilla


@pytest.fixture
def make_barrier():
    """Factory for USD barrier options on the standard instants."""
    return _barrier


@pytest.fixture
def vanilla_call() -> VanillaOption:
    """ATM call, K=100."""
    return _vanilla(OptionType.CALL)


@pytest.fixture
def vanilla_put() -> VanillaOption:
    """ATM put, K=100."""
    return _vanilla(OptionType.PUT)


# =============================================================================
# RANDOMNESS
# =============================================================================

@pytest.fixture
def reproducible_rng() -> np.random.Generator:
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
